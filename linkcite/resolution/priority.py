"""
Resolution Configuration
========================

Request-scoped inputs that steer the attribute resolver:

- PriorityConfig: default source order plus optional per-field orders
- SelectionOverrides: explicit per-field source choice or literal value
- DisabledFields: fields removed from the result and every citation

All objects validate their shape on construction and raise
``ConfigurationError`` listing every problem found.

Example:
    >>> from linkcite.resolution.priority import PriorityConfig, SelectionOverrides
    >>>
    >>> priority = PriorityConfig.from_raw({
    ...     "default": ["structured_data", "open_graph"],
    ...     "overrides": {"date": ["doi_registry", "html_meta"]},
    ... })
    >>> overrides = SelectionOverrides.from_raw({"title": {"custom": "Manual Title"}})
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from linkcite.attributes import (
    AttributeType,
    SourceId,
    parse_attribute_type,
    parse_source_id,
)
from linkcite.errors import ConfigurationError, ValidationIssue


# Fallback order used when no configuration is supplied
DEFAULT_SOURCE_ORDER: Tuple[SourceId, ...] = (
    SourceId.OPEN_GRAPH,
    SourceId.STRUCTURED_DATA,
    SourceId.HTML_META,
    SourceId.DOI_REGISTRY,
    SourceId.CITATION_SERVICE,
    SourceId.AI_ASSISTED,
)


def _validate_order(order: Sequence[Any], field_name: str, issues: List[ValidationIssue]) -> Tuple[SourceId, ...]:
    parsed: List[SourceId] = []
    for index, raw in enumerate(order):
        item_field = f"{field_name}[{index}]"
        try:
            source = parse_source_id(raw, field=item_field)
        except ConfigurationError as e:
            issues.extend(e.issues)
            continue
        if source == SourceId.CUSTOM:
            issues.append(ValidationIssue(item_field, "'custom' cannot appear in a priority order"))
        elif source in parsed:
            issues.append(ValidationIssue(item_field, f"duplicate source '{source.value}'"))
        else:
            parsed.append(source)
    if not order:
        issues.append(ValidationIssue(field_name, "priority order must not be empty"))
    return tuple(parsed)


# =============================================================================
# PRIORITY
# =============================================================================


@dataclass(frozen=True)
class PriorityConfig:
    """
    Ordered source fallback, with optional per-field orders.

    Attributes:
        default: Source order used for every field without an override
        overrides: Field-specific source orders
    """
    default: Tuple[SourceId, ...] = DEFAULT_SOURCE_ORDER
    overrides: Mapping = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        issues: List[ValidationIssue] = []
        default = _validate_order(list(self.default), "priority.default", issues)

        overrides: Dict[AttributeType, Tuple[SourceId, ...]] = {}
        for raw_type, order in dict(self.overrides).items():
            try:
                attribute_type = parse_attribute_type(raw_type, field=f"priority.overrides.{raw_type}")
            except ConfigurationError as e:
                issues.extend(e.issues)
                continue
            if isinstance(order, (str, SourceId)):
                order = [order]
            overrides[attribute_type] = _validate_order(
                list(order), f"priority.overrides.{attribute_type.value}", issues
            )

        if issues:
            raise ConfigurationError("Invalid priority configuration", issues)

        # Frozen dataclass: normalized values are written back once
        object.__setattr__(self, "default", default)
        object.__setattr__(self, "overrides", MappingProxyType(overrides))

    @classmethod
    def from_raw(cls, raw: Optional[Mapping]) -> "PriorityConfig":
        """Build from ``{"default": [...], "overrides": {field: [...]}}``."""
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                "Invalid priority configuration",
                [ValidationIssue("priority", "expected a mapping with 'default' and 'overrides'")],
            )
        default = raw.get("default")
        return cls(
            default=tuple(default) if default is not None else DEFAULT_SOURCE_ORDER,
            overrides=raw.get("overrides") or {},
        )

    @classmethod
    def single(cls, source: Union[str, SourceId], base: Optional["PriorityConfig"] = None) -> "PriorityConfig":
        """
        Put one source first, keeping the remaining default order after it.

        Used by the CLI ``--metadata-priority`` option.
        """
        first = parse_source_id(source, field="metadata_priority")
        base = base or cls()
        rest = tuple(s for s in base.default if s != first)
        return cls(default=(first,) + rest, overrides=base.overrides)

    def order_for(self, attribute_type: AttributeType) -> Tuple[SourceId, ...]:
        """Effective source order for a field."""
        return self.overrides.get(attribute_type, self.default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default": [s.value for s in self.default],
            "overrides": {t.value: [s.value for s in order] for t, order in self.overrides.items()},
        }


# =============================================================================
# SELECTION OVERRIDES
# =============================================================================


@dataclass(frozen=True)
class CustomValue:
    """A literal value typed by the user, bypassing every source."""
    value: Any


Selection = Union[SourceId, CustomValue]


class SelectionOverrides(Mapping):
    """
    Read-only mapping ``AttributeType -> SourceId | CustomValue``.

    An explicit selection always wins over the priority order.
    """

    def __init__(self, selections: Optional[Mapping] = None):
        issues: List[ValidationIssue] = []
        data: Dict[AttributeType, Selection] = {}

        for raw_type, selection in (selections or {}).items():
            field_name = f"overrides.{raw_type}"
            try:
                attribute_type = parse_attribute_type(raw_type, field=field_name)
                parsed = self._parse_selection(selection, field_name)
            except ConfigurationError as e:
                issues.extend(e.issues)
                continue
            data[attribute_type] = parsed

        if issues:
            raise ConfigurationError("Invalid selection overrides", issues)
        self._data = MappingProxyType(data)

    @staticmethod
    def _parse_selection(selection: Any, field_name: str) -> Selection:
        if isinstance(selection, CustomValue):
            return selection
        if isinstance(selection, Mapping):
            if "custom" not in selection:
                raise ConfigurationError(
                    "Invalid selection override",
                    [ValidationIssue(field_name, "expected a source id or {'custom': value}")],
                )
            return CustomValue(selection["custom"])
        source = parse_source_id(selection, field=field_name)
        if source == SourceId.CUSTOM:
            raise ConfigurationError(
                "Invalid selection override",
                [ValidationIssue(field_name, "selecting 'custom' requires a literal value")],
            )
        return source

    @classmethod
    def from_raw(cls, raw: Optional[Mapping]) -> "SelectionOverrides":
        return cls(raw)

    def __getitem__(self, key: AttributeType) -> Selection:
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def with_selection(self, attribute_type: AttributeType, selection: Any) -> "SelectionOverrides":
        """Return a copy with one field's selection replaced."""
        data: Dict[Any, Any] = dict(self._data)
        data[attribute_type] = selection
        return SelectionOverrides(data)

    def __repr__(self) -> str:
        return f"SelectionOverrides({dict(self._data)!r})"


# =============================================================================
# DISABLED FIELDS
# =============================================================================


DisabledFields = FrozenSet[AttributeType]


def parse_disabled(raw: Optional[Iterable[Union[str, AttributeType]]]) -> DisabledFields:
    """
    Build a disabled-field set from names.

    Raises:
        ConfigurationError: If a name is unknown
    """
    issues: List[ValidationIssue] = []
    disabled = set()
    for index, item in enumerate(raw or ()):
        try:
            disabled.add(parse_attribute_type(item, field=f"disabled[{index}]"))
        except ConfigurationError as e:
            issues.extend(e.issues)
    if issues:
        raise ConfigurationError("Invalid disabled fields", issues)
    return frozenset(disabled)


__all__ = [
    "DEFAULT_SOURCE_ORDER",
    "PriorityConfig",
    "CustomValue",
    "Selection",
    "SelectionOverrides",
    "DisabledFields",
    "parse_disabled",
]
