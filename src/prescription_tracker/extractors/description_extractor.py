# ============================================================================
# src/prescription_tracker/extractors/description_extractor.py
# ============================================================================
"""
Description Extractor

Turns openFDA "indications and usage" text into one short, readable
sentence such as "Used to treat schizophrenia."

The text is normalized first (markup, entities, whitespace, leading
numbered section caption), then the strategies below are tried in order and
the first non-empty answer wins:

1. "indicated for / used for / treatment of: <conditions>" with phrase tidy-up
2. "<subject> is indicated for|in <condition>"
3. "<Name> <dosage form> ... is|are ... indicated for <description>"
4. first medically-flavoured sentence of reasonable length
5. acne vocabulary fallback

This is heuristic text tidying, not clinical NLP. Strategy 1 can capture
past the intended clause on unusual inputs.
"""

import logging
import re
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)


_TAGS = re.compile(r'<[^>]+>')
_WHITESPACE = re.compile(r'\s+')
_SECTION_HEADER = re.compile(r'^\d+(\.\d+)?\s+[A-Z\s]+(?=\s+[A-Z][a-z])')

_TREATMENT = re.compile(
    r'(?:indicated for|used for|treatment of|for the treatment of):\s*(.+?)(?:\.|$)',
    re.IGNORECASE
)
_IS_INDICATED = re.compile(r'(.+?)\s+is indicated\s+(?:for|in)\s+(.+?)(?:\.|$)', re.IGNORECASE)
_NAME_AND_FORM = re.compile(
    r'([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s+(?:gel|cream|tablet|capsule|solution).*?(?:is|are)\s+(.+?)(?:\.|$)',
    re.IGNORECASE
)
_INDICATED_PREFIX = re.compile(r'indicated\s+(?:for|in)\s+', re.IGNORECASE)
_SENTENCE_SPLIT = re.compile(r'[.!?]+')
_MEDICAL_KEYWORDS = re.compile(
    r'(?:treat|indicated|used|therapy|condition|acne|dermatitis|psoriasis)',
    re.IGNORECASE
)
_ACNE_TERMS = re.compile(r'(?:acne|comedone|blackhead|whitehead|pimple)', re.IGNORECASE)

ACNE_DESCRIPTION = "Used to treat acne and related skin conditions."

# Applied in order to the condition list captured by the treatment strategy
CONDITION_REWRITES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r'\s+Acute Treatment of\s+'), ', acute episodes of '),
    (re.compile(r'\s+Adjunctive Treatment of\s+'), ', as add-on treatment for '),
    (re.compile(r'\s+associated with\s+', re.IGNORECASE), ' in people with '),
    (re.compile(r'Major Depressive Disorder'), 'major depression'),
    (re.compile(r'Bipolar I Disorder'), 'bipolar disorder'),
    (re.compile(r'Autistic Disorder'), 'autism'),
    (re.compile(r"Tourette's Disorder"), "Tourette's syndrome"),
)


def normalize_indication_text(text: str) -> str:
    """Strip markup and entities, collapse whitespace, drop the section caption."""
    clean = _TAGS.sub('', text)
    clean = clean.replace('&nbsp;', ' ').replace('&amp;', '&')
    clean = _WHITESPACE.sub(' ', clean).strip()
    return _SECTION_HEADER.sub('', clean, count=1).strip()


def rewrite_conditions(conditions: str) -> str:
    for pattern, replacement in CONDITION_REWRITES:
        conditions = pattern.sub(replacement, conditions)
    return conditions


def _used_to_treat(text: str) -> str:
    return f"Used to treat {text.lower()}."


# ============================================================================
# STRATEGIES (normalized text -> sentence or None)
# ============================================================================

def from_treatment_list(text: str) -> Optional[str]:
    match = _TREATMENT.search(text)
    if not match:
        return None
    conditions = rewrite_conditions(match.group(1).strip())
    if len(conditions) > 10:
        return _used_to_treat(conditions)
    return None


def from_is_indicated(text: str) -> Optional[str]:
    match = _IS_INDICATED.search(text)
    if not match or not match.group(2):
        return None
    condition = match.group(2).strip()
    if len(condition) > 10:
        return _used_to_treat(condition)
    return None


def from_named_product(text: str) -> Optional[str]:
    match = _NAME_AND_FORM.search(text)
    if not match or not match.group(2):
        return None
    description = match.group(2).strip()
    if len(description) > 10 and 'indicated' in description.lower():
        description = _INDICATED_PREFIX.sub('', description, count=1)
        return _used_to_treat(description)
    return None


def from_first_sentence(text: str) -> Optional[str]:
    for sentence in _SENTENCE_SPLIT.split(text):
        trimmed = sentence.strip()
        if 20 < len(trimmed) < 200 and _MEDICAL_KEYWORDS.search(trimmed):
            return trimmed[0].upper() + trimmed[1:].lower() + '.'
    return None


def from_acne_terms(text: str) -> Optional[str]:
    if _ACNE_TERMS.search(text):
        return ACNE_DESCRIPTION
    return None


DEFAULT_STRATEGIES: Tuple[Callable[[str], Optional[str]], ...] = (
    from_treatment_list,
    from_is_indicated,
    from_named_product,
    from_first_sentence,
    from_acne_terms,
)


class DescriptionExtractor:
    """Applies the extraction strategies in order."""

    def __init__(self, strategies: Tuple[Callable[[str], Optional[str]], ...] = DEFAULT_STRATEGIES):
        self.strategies = strategies

    def extract(self, raw_indication_text: str) -> str:
        """
        Short "used to treat" sentence for raw label text.

        Returns '' when nothing usable is found or extraction fails.
        """
        if not raw_indication_text:
            return ""

        try:
            clean = normalize_indication_text(raw_indication_text)
            for strategy in self.strategies:
                result = strategy(clean)
                if result:
                    logger.debug(f"Description extracted by {strategy.__name__}")
                    return result

            logger.warning(f"Could not extract meaningful description from: \"{clean[:100]}...\"")
            return ""

        except Exception as e:
            logger.error(f"Error creating clean description: {e}")
            return ""


_default_extractor = DescriptionExtractor()


def extract_description(raw_indication_text: str) -> str:
    """Module-level shortcut using the default strategy order."""
    return _default_extractor.extract(raw_indication_text)
