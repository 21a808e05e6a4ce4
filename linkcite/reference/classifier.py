"""
Reference Classifier
====================

Chooses the reference shape from the resolved attributes.

Decision order (first match wins):
1. DOI or journal present        -> scholarly
2. Site name or publisher present -> news
3. Otherwise                      -> generic

Classification never fails: generic is the total fallback.
"""

import structlog

from linkcite.attributes import AttributeType
from linkcite.reference.models import Reference, ReferenceKind
from linkcite.resolution.resolver import ResolvedAttributeSet

log = structlog.get_logger()

SCHOLARLY_MARKERS = (AttributeType.DOI, AttributeType.JOURNAL)
NEWS_MARKERS = (AttributeType.SITE_NAME, AttributeType.PUBLISHER)


def classify_kind(resolved: ResolvedAttributeSet) -> ReferenceKind:
    """Return the reference kind for a resolved attribute set."""
    if any(resolved.has(t) for t in SCHOLARLY_MARKERS):
        return ReferenceKind.SCHOLARLY
    if any(resolved.has(t) for t in NEWS_MARKERS):
        return ReferenceKind.NEWS
    return ReferenceKind.GENERIC


def classify(resolved: ResolvedAttributeSet) -> Reference:
    """
    Wrap a resolved attribute set in a ``Reference`` with empty extras.

    Example:
        >>> reference = classify(resolved)
        >>> reference.kind
        <ReferenceKind.NEWS: 'news'>
    """
    kind = classify_kind(resolved)
    log.debug("Reference classified", kind=kind.value)
    return Reference(kind=kind, attributes=resolved)


__all__ = ["classify", "classify_kind"]
