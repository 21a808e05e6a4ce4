"""
Enrichment Merge
================

Folds values produced by external services (title translation, web
archive lookup) into an already classified ``Reference``.

The merge only touches the extras record: the reference kind and the
resolved attributes are carried over unchanged. Extras whose field is
disabled are cleared even when a value is supplied.

Example:
    >>> enriched = enrich(
    ...     reference,
    ...     translated_title="The Future of Technology",
    ...     archive_url="https://web.archive.org/web/20240115123000/https://example.com",
    ...     archive_date="20240115123000",
    ... )
    >>> enriched.archive_date.iso()
    '2024-01-15'
"""

from dataclasses import replace
from typing import Any, Iterable, Optional, Union

import structlog

from linkcite.attributes import AttributeType, Translation, coerce_translation, parse_date
from linkcite.reference.models import Reference, ReferenceExtras

log = structlog.get_logger()


def enrich(
    reference: Reference,
    translated_title: Optional[Union[str, Translation]] = None,
    archive_url: Optional[str] = None,
    archive_date: Optional[Any] = None,
    disabled: Optional[Iterable[AttributeType]] = None,
) -> Reference:
    """
    Return a copy of ``reference`` with enrichment values merged in.

    Args:
        reference: Classified reference
        translated_title: Translated title text or ``Translation``
        archive_url: Archive snapshot URL
        archive_date: Snapshot date (``Date``, ``date``, ISO string or
            14-digit Wayback timestamp)
        disabled: Extra disabled fields, in addition to the ones recorded
            on the resolved attribute set

    Returns:
        New Reference of the same kind. ``None`` arguments keep the
        existing extras; unparseable archive dates are dropped.
    """
    blocked = set(reference.attributes.disabled)
    blocked.update(disabled or ())
    current = reference.extras

    new_title = current.translated_title
    if translated_title is not None:
        new_title = coerce_translation(translated_title)

    new_archive_url = current.archive_url
    if archive_url is not None:
        new_archive_url = archive_url.strip() or None

    new_archive_date = current.archive_date
    if archive_date is not None:
        new_archive_date = parse_date(archive_date)
        if new_archive_date is None:
            log.warning("Archive date could not be parsed", archive_date=str(archive_date))

    if AttributeType.TRANSLATED_TITLE in blocked:
        new_title = None
    if AttributeType.ARCHIVE_URL in blocked:
        new_archive_url = None
    if AttributeType.ARCHIVE_DATE in blocked:
        new_archive_date = None

    extras = ReferenceExtras(
        translated_title=new_title,
        archive_url=new_archive_url,
        archive_date=new_archive_date,
    )
    return replace(reference, extras=extras)


__all__ = ["enrich"]
