"""
References
==========

Classified citation records and the enrichment merge.

Example:
    >>> from linkcite.reference import classify, enrich
    >>> reference = enrich(classify(resolved), archive_url="https://web.archive.org/...")
"""

from linkcite.reference.models import Reference, ReferenceExtras, ReferenceKind
from linkcite.reference.classifier import classify, classify_kind
from linkcite.reference.enrichment import enrich

__all__ = [
    "Reference",
    "ReferenceExtras",
    "ReferenceKind",
    "classify",
    "classify_kind",
    "enrich",
]
