# ============================================================================
# src/prescription_tracker/sources/__init__.py
# ============================================================================
"""
External drug data sources:
- RxNormClient: RxNav concept search, spelling, relations
- OpenFDAClient: openFDA drug labeling
"""

from .base import BaseSourceClient, as_list
from .rxnorm_client import (
    RxNormClient,
    ApproximateMatch,
    RelatedConcept,
    ConceptGroup,
    ConceptDetail,
    DETAIL_TTYS,
    EXPANSION_TTYS,
)
from .openfda_client import OpenFDAClient, build_label_query

__all__ = [
    "BaseSourceClient",
    "as_list",
    "RxNormClient",
    "ApproximateMatch",
    "RelatedConcept",
    "ConceptGroup",
    "ConceptDetail",
    "DETAIL_TTYS",
    "EXPANSION_TTYS",
    "OpenFDAClient",
    "build_label_query",
]
