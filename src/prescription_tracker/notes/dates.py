# ============================================================================
# src/prescription_tracker/notes/dates.py
# ============================================================================
"""
Date-organized folder paths.

A pattern such as "YYYY/YYYY-MM" is rendered with a fill date, so
2024-03-05 becomes "2024/2024-03". Supported tokens:

    YYYY 2024    YY 24
    MMMM March   MMM Mar   MM 03   M 3
    DDDD Tuesday DDD Tue   DD 05   D 5

Tokens are matched greedily anywhere in the pattern, so literal letters
Y, M and D inside a pattern are replaced too.
"""

import calendar
import re
from datetime import date
from typing import Dict

from ..utils.file_utils import normalize_vault_path

_TOKENS = re.compile(r'YYYY|YY|MMMM|MMM|MM|M|DDDD|DDD|DD|D')


def date_placeholders(day: date) -> Dict[str, str]:
    return {
        'YYYY': f"{day.year:04d}",
        'YY': f"{day.year % 100:02d}",
        'MMMM': calendar.month_name[day.month],
        'MMM': calendar.month_abbr[day.month],
        'MM': f"{day.month:02d}",
        'M': str(day.month),
        'DDDD': calendar.day_name[day.weekday()],
        'DDD': calendar.day_abbr[day.weekday()],
        'DD': f"{day.day:02d}",
        'D': str(day.day),
    }


def render_date_pattern(pattern: str, day: date) -> str:
    placeholders = date_placeholders(day)
    return _TOKENS.sub(lambda m: placeholders.get(m.group(0), m.group(0)), pattern)


def date_based_path(day: date, base_folder: str, date_organization: str) -> str:
    """Vault-relative folder for a note dated day."""
    sub_folder = render_date_pattern(date_organization, day)
    return normalize_vault_path(f"{base_folder}/{sub_folder}")
