# ============================================================================
# src/prescription_tracker/core/prescription.py
# ============================================================================
"""
Single filled prescription as entered on the data-entry form
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO 'YYYY-MM-DD' string; empty values give None."""
    if not value:
        return None
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


@dataclass
class PrescriptionData:
    medication_name: str
    fill_date: str  # YYYY-MM-DD
    dosage: str = ""
    obtained_date: str = ""
    pharmacy: str = ""
    prescription_number: str = ""
    days_supply: int = 0
    quantity_dispensed: str = ""
    quantity_written: str = ""
    copay: str = ""
    manufacturer: str = ""
    patient: str = ""
    frequency: str = ""
    prescribed_by: str = ""
    instructions: str = ""
    refills_remaining: int = 0
    notes: str = ""
    diagnosis: str = ""
    date_written: str = ""
    drug_label: str = ""  # vault path of a scanned label to rename
    substituted: str = ""

    @property
    def date_finished(self) -> str:
        """Obtained date plus days supply, or '' when either is missing."""
        obtained = parse_date(self.obtained_date)
        if obtained is None or self.days_supply <= 0:
            return ""
        return (obtained + timedelta(days=self.days_supply)).strftime("%Y-%m-%d")

    @property
    def fill_date_compact(self) -> str:
        """Fill date as YYYYMMDD ('' when missing)."""
        filled = parse_date(self.fill_date)
        return filled.strftime("%Y%m%d") if filled else ""
