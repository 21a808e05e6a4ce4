"""
linkcite command line
=====================

Generates citations from a JSON multi-source metadata document.

The input is either a bare ``{attribute: {source: value}}`` mapping or a
document with a ``multi_source`` key and optional ``url``, ``priority``,
``overrides``, ``disabled`` and ``enrichments`` keys. Command line options
take precedence over the document.

Usage:
    linkcite page.json
    linkcite page.json --format bibliography --format in_text
    linkcite - --metadata-priority structured_data --select title=open_graph < page.json
    linkcite page.json --custom title="Manual Title" --disable language --json

Exit codes:
    0: Citations printed
    1: Invalid configuration or unreadable input
    2: Invalid arguments or unsupported format
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog

from linkcite import __version__
from linkcite.citation.styles import InfoboxLayout, parse_styles
from linkcite.config import load_settings
from linkcite.errors import ConfigurationError, UnsupportedFormatError
from linkcite.log_config import configure_logging
from linkcite.pipeline import GenerationRequest, generate
from linkcite.resolution.priority import PriorityConfig

log = structlog.get_logger()

EXIT_OK = 0
EXIT_ERROR = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkcite",
        description="Generate citations from multi-source web page metadata",
    )
    parser.add_argument("metadata", help="JSON metadata file, or - for stdin")
    parser.add_argument(
        "--format", "-f",
        action="append",
        dest="formats",
        metavar="{infobox,bibliography,in_text,all}",
        help="Citation style (repeatable; default from settings)",
    )
    parser.add_argument(
        "--metadata-priority", "-m",
        metavar="SOURCE",
        help="Source tried first for every field",
    )
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="FIELD=SOURCE",
        help="Take a field from one source only (repeatable)",
    )
    parser.add_argument(
        "--custom",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Use a literal value for a field (repeatable)",
    )
    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="FIELD",
        help="Omit a field from every citation (repeatable)",
    )
    parser.add_argument("--translated-title", metavar="TEXT", help="Translated title")
    parser.add_argument("--archive-url", metavar="URL", help="Web archive snapshot URL")
    parser.add_argument(
        "--archive-date",
        metavar="DATE",
        help="Snapshot date (YYYY-MM-DD or Wayback timestamp)",
    )
    parser.add_argument("--url", help="Requested URL, used when no source supplies one")
    parser.add_argument(
        "--singleline",
        action="store_true",
        help="Render the infobox template on one line",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print resolved fields, provenance, citations and warnings as JSON",
    )
    parser.add_argument("--config", "-c", metavar="YAML", help="YAML settings file")
    parser.add_argument("--log-level", default="WARNING", help="Log level for stderr output")
    parser.add_argument("--version", action="version", version=f"linkcite {__version__}")
    return parser


def parse_assignments(values: List[str], option: str) -> List[Tuple[str, str]]:
    """
    Split ``FIELD=VALUE`` option values.

    Raises:
        ValueError: If a value has no ``=`` or an empty field name
    """
    pairs = []
    for value in values:
        name, sep, rest = value.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"{option} expects FIELD=VALUE, got {value!r}")
        pairs.append((name.strip(), rest))
    return pairs


def read_document(path: str) -> Dict[str, Any]:
    """
    Read the metadata document from a file or stdin.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the content is not a JSON object
    """
    if path == "-":
        text = sys.stdin.read()
    else:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()

    data = json.loads(text)
    if not isinstance(data, Mapping):
        raise ValueError("metadata must be a JSON object")
    if "multi_source" not in data:
        return {"multi_source": dict(data)}

    for key in ("multi_source", "overrides", "enrichments"):
        if data.get(key) is not None and not isinstance(data[key], Mapping):
            raise ValueError(f"'{key}' must be a JSON object")
    if data.get("disabled") is not None and not isinstance(data["disabled"], list):
        raise ValueError("'disabled' must be a JSON array")
    if data.get("url") is not None and not isinstance(data["url"], str):
        raise ValueError("'url' must be a JSON string")
    return dict(data)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        selections = parse_assignments(args.select, "--select")
        customs = parse_assignments(args.custom, "--custom")
    except ValueError as e:
        parser.error(str(e))

    try:
        settings = load_settings(config_file=args.config)
    except ConfigurationError as e:
        print(f"linkcite: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        configure_logging(args.log_level, settings.log_json)
    except ValueError as e:
        parser.error(str(e))

    try:
        styles = parse_styles(args.formats) if args.formats else list(settings.default_styles)
    except UnsupportedFormatError as e:
        parser.error(str(e))

    try:
        document = read_document(args.metadata)
    except (OSError, ValueError) as e:
        print(f"linkcite: cannot read metadata: {e}", file=sys.stderr)
        return EXIT_ERROR

    log.debug("Metadata read", path=args.metadata, keys=sorted(document))

    overrides: Dict[str, Any] = dict(document.get("overrides") or {})
    for name, source in selections:
        overrides[name] = source
    for name, value in customs:
        overrides[name] = {"custom": value}

    disabled = list(document.get("disabled") or []) + args.disable

    # Shapes are checked by GenerationRequest.from_raw
    enrichments: Dict[str, Any] = dict(document.get("enrichments") or {})
    for key in ("translated_title", "archive_url", "archive_date"):
        value = getattr(args, key)
        if value:
            enrichments[key] = value

    if args.singleline:
        layout = InfoboxLayout.SINGLELINE
    else:
        layout = settings.infobox_layout

    try:
        if document.get("priority") is not None:
            priority = PriorityConfig.from_raw(document["priority"])
        else:
            priority = settings.priority_config()
        if args.metadata_priority:
            priority = PriorityConfig.single(args.metadata_priority, base=priority)

        request = GenerationRequest.from_raw(
            multi_source=document.get("multi_source"),
            priority=priority,
            overrides=overrides,
            disabled=disabled,
            enrichments=enrichments,
            requested_url=args.url or document.get("url"),
            styles=styles,
            layout=layout,
        )
    except ConfigurationError as e:
        print(f"linkcite: {e}", file=sys.stderr)
        return EXIT_ERROR

    result = generate(request)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print("\n\n".join(result.citations.values()))

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
