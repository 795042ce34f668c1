# ============================================================================
# src/prescription_tracker/utils/text_normalizer.py
# ============================================================================
"""
Name Normalization Utilities

Small helpers shared by the search engine, the enrichment merger and the
note writers:
- Title Case for medication names
- Case-insensitive de-duplication (first occurrence wins)
- Cross-list removal (generic names beat brand names)
- URL slugs for reference links
"""

import re
from typing import Iterable, List, Optional

_WORD_START = re.compile(r'\b\w')
_NON_SLUG = re.compile(r'[^a-z0-9]')


def title_case(name: str) -> str:
    """
    Lowercase the whole name, then uppercase the first letter of every word.

    "ARIPIPRAZOLE" -> "Aripiprazole", "abilify odt" -> "Abilify Odt"
    """
    return _WORD_START.sub(lambda m: m.group(0).upper(), name.lower())


def dedupe_casefold(names: Iterable[str], exclude: Optional[Iterable[str]] = None) -> List[str]:
    """
    Drop empty and case-insensitively repeated names, keeping the first
    occurrence. Names matching anything in exclude are dropped as well.
    """
    seen = {n.lower() for n in (exclude or []) if n}
    result = []
    for name in names:
        if not name:
            continue
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(name)
    return result


def remove_overlap(names: Iterable[str], reserved: Iterable[str]) -> List[str]:
    """Remove entries of names that case-insensitively appear in reserved."""
    reserved_lower = {r.lower() for r in reserved if r}
    return [n for n in names if n and n.lower() not in reserved_lower]


def slugify(name: str) -> str:
    """Lowercase and replace every character outside [a-z0-9] with '-'."""
    return _NON_SLUG.sub('-', name.lower())


def strip_link_brackets(text: str) -> str:
    """Remove wiki-link brackets: "[[Dr Smith]]" -> "Dr Smith"."""
    return text.replace('[', '').replace(']', '').strip()
