"""
Text extractors for drug labeling.
"""

from .description_extractor import (
    DescriptionExtractor,
    extract_description,
    normalize_indication_text,
    rewrite_conditions,
    DEFAULT_STRATEGIES,
    ACNE_DESCRIPTION,
)

__all__ = [
    "DescriptionExtractor",
    "extract_description",
    "normalize_indication_text",
    "rewrite_conditions",
    "DEFAULT_STRATEGIES",
    "ACNE_DESCRIPTION",
]
