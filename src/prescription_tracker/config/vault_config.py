# ============================================================================
# src/prescription_tracker/config/vault_config.py
# ============================================================================
"""
Vault Layout Settings
- Where prescription, medication, diagnosis and people notes live
- Date folder pattern for prescriptions
- Pick lists for the data-entry form
"""

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class VaultSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PRESCRIPTION_FOLDER: str = Field(
        default="Prescriptions",
        description="Folder where prescription notes will be stored"
    )
    DATE_ORGANIZATION: str = Field(
        default="YYYY/YYYY-MM",
        description="Sub-folder pattern under the prescription folder. Tokens: YYYY YY MMMM MMM MM M DDDD DDD DD D"
    )
    PHARMACY_LIST: List[str] = Field(
        default_factory=lambda: ["CVS Pharmacy", "Walgreens", "Rite Aid"],
        description="Pharmacies offered by the data-entry form"
    )
    PEOPLE_FOLDER: str = Field(
        default="People",
        description="Folder containing people notes (used to find prescribing doctors)"
    )
    RELATIONSHIP_PROPERTY: str = Field(
        default="relationship",
        description="Front matter property that holds the relationship"
    )
    DOCTOR_RELATIONSHIP_VALUE: str = Field(
        default="doctor",
        description="Relationship value identifying a prescriber (string or list properties)"
    )
    MEDICATIONS_FOLDER: str = Field(
        default="Medications",
        description="Folder containing medication notes"
    )
    DIAGNOSIS_FOLDER: str = Field(
        default="Diagnosis",
        description="Folder containing diagnosis notes"
    )
    SELECTED_PATIENT_NOTES: List[str] = Field(
        default_factory=list,
        description="People note names offered as patients"
    )

vault_settings = VaultSettings()
