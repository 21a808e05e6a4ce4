"""
Attribute Resolver
==================

Merges per-source metadata into one canonical value per field.

Rules, per attribute type:
1. Disabled fields are always absent.
2. An explicit selection wins: a selected source contributes its whole
   value (or nothing, when it has no value); a custom literal bypasses
   every source.
3. Otherwise the first source in the effective priority order (per-field
   override, else the default order) with a value wins.

Merging is whole-field: the winning source's value is taken as-is, so
author lists from different sources are never interleaved.

The resolver is a pure function of its inputs. It holds no state between
calls and can run concurrently across requests.

Example:
    >>> from linkcite.attributes import MultiSourceAttributeSet, AttributeType
    >>> from linkcite.resolution import PriorityConfig, resolve
    >>>
    >>> multi = MultiSourceAttributeSet.from_raw(
    ...     {"title": {"open_graph": "A", "structured_data": "B"}}
    ... )
    >>> priority = PriorityConfig(default=("structured_data", "open_graph"))
    >>> resolve(multi, priority).get(AttributeType.TITLE)
    'B'
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import structlog

from linkcite.attributes import (
    AttributeType,
    AttributeValue,
    Date,
    MultiSourceAttributeSet,
    SourceId,
    Translation,
    coerce_value,
)
from linkcite.errors import ConfigurationError
from linkcite.resolution.priority import (
    CustomValue,
    DisabledFields,
    PriorityConfig,
    SelectionOverrides,
)

log = structlog.get_logger()


@dataclass(frozen=True)
class ResolvedAttributeSet:
    """
    One canonical value per attribute type, with provenance.

    Attributes:
        values: Winning value per field (absent fields have no key)
        provenance: Winning source per field, ``SourceId.CUSTOM`` for literals
        disabled: Fields that were disabled for this request
    """
    values: Mapping = field(default_factory=lambda: MappingProxyType({}))
    provenance: Mapping = field(default_factory=lambda: MappingProxyType({}))
    disabled: DisabledFields = frozenset()

    def __post_init__(self):
        values = {t: v for t, v in dict(self.values).items() if t not in self.disabled}
        provenance = {t: s for t, s in dict(self.provenance).items() if t in values}
        object.__setattr__(self, "values", MappingProxyType(values))
        object.__setattr__(self, "provenance", MappingProxyType(provenance))
        object.__setattr__(self, "disabled", frozenset(self.disabled))

    def get(self, attribute_type: AttributeType) -> Optional[AttributeValue]:
        return self.values.get(attribute_type)

    def has(self, attribute_type: AttributeType) -> bool:
        return attribute_type in self.values

    def is_disabled(self, attribute_type: AttributeType) -> bool:
        return attribute_type in self.disabled

    def source_of(self, attribute_type: AttributeType) -> Optional[SourceId]:
        return self.provenance.get(attribute_type)

    def missing(self) -> List[AttributeType]:
        """Enabled fields that have no value."""
        return [
            t for t in AttributeType
            if t not in self.values and t not in self.disabled
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation used by the API and the CLI ``--json`` output."""
        return {
            "values": {t.value: _plain(v) for t, v in self.values.items()},
            "provenance": {t.value: s.value for t, s in self.provenance.items()},
            "disabled": sorted(t.value for t in self.disabled),
        }


def _plain(value: Any) -> Any:
    if isinstance(value, tuple):
        authors = []
        for author in value:
            given, family = author.split()
            authors.append({"full_name": author.full_name, "given_name": given, "family_name": family})
        return authors
    if isinstance(value, Date):
        return value.iso()
    if isinstance(value, Translation):
        return {"text": value.text, "language": value.language}
    return value


def _coerce_custom(attribute_type: AttributeType, custom: CustomValue) -> Optional[AttributeValue]:
    try:
        value = coerce_value(attribute_type, custom.value, field=f"overrides.{attribute_type.value}")
    except ConfigurationError as e:
        log.warning(
            "Custom value rejected",
            attribute=attribute_type.value,
            error=str(e),
        )
        return None
    if value is None:
        log.warning(
            "Custom value could not be interpreted",
            attribute=attribute_type.value,
        )
    return value


def resolve(
    multi_source: MultiSourceAttributeSet,
    priority: PriorityConfig,
    overrides: Optional[SelectionOverrides] = None,
    disabled: DisabledFields = frozenset(),
) -> ResolvedAttributeSet:
    """
    Resolve one canonical value per attribute type.

    Args:
        multi_source: Per-field, per-source values
        priority: Default and per-field source orders
        overrides: Explicit source selections or custom literals
        disabled: Fields to omit regardless of availability

    Returns:
        ResolvedAttributeSet with values and provenance. Never raises for
        well-formed inputs; fields without any value are simply absent.
    """
    overrides = overrides or SelectionOverrides()
    values: Dict[AttributeType, AttributeValue] = {}
    provenance: Dict[AttributeType, SourceId] = {}

    for attribute_type in AttributeType:
        if attribute_type in disabled:
            continue

        candidates = multi_source.sources_for(attribute_type)
        selection = overrides.get(attribute_type)

        if isinstance(selection, CustomValue):
            value = _coerce_custom(attribute_type, selection)
            if value is not None:
                values[attribute_type] = value
                provenance[attribute_type] = SourceId.CUSTOM
            continue

        if selection is not None:
            if selection in candidates:
                values[attribute_type] = candidates[selection]
                provenance[attribute_type] = selection
            continue

        for source in priority.order_for(attribute_type):
            if source in candidates:
                values[attribute_type] = candidates[source]
                provenance[attribute_type] = source
                break

    log.debug(
        "Attributes resolved",
        resolved=[t.value for t in values],
        disabled=sorted(t.value for t in disabled),
        custom=[t.value for t, s in provenance.items() if s == SourceId.CUSTOM],
    )

    return ResolvedAttributeSet(
        values=values,
        provenance=provenance,
        disabled=frozenset(disabled),
    )


__all__ = ["ResolvedAttributeSet", "resolve"]
