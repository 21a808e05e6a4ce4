"""
Attribute Resolution
====================

Merges metadata from multiple extractors into one value per field.

Example:
    >>> from linkcite.resolution import resolve, PriorityConfig, SelectionOverrides
    >>> resolved = resolve(multi_source, PriorityConfig(), SelectionOverrides(), frozenset())
"""

from linkcite.resolution.priority import (
    DEFAULT_SOURCE_ORDER,
    CustomValue,
    DisabledFields,
    PriorityConfig,
    Selection,
    SelectionOverrides,
    parse_disabled,
)
from linkcite.resolution.resolver import ResolvedAttributeSet, resolve

__all__ = [
    # Configuration
    "DEFAULT_SOURCE_ORDER",
    "PriorityConfig",
    "CustomValue",
    "Selection",
    "SelectionOverrides",
    "DisabledFields",
    "parse_disabled",
    # Resolver
    "ResolvedAttributeSet",
    "resolve",
]
