# ============================================================================
# src/prescription_tracker/config/sources_config.py
# ============================================================================
"""
External Drug Data Sources
- RxNav (RxNorm concept search)
- openFDA (drug labeling)
- Request timeout
- Search limits
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class SourceSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    RXNAV_BASE_URL: str = Field(
        default="https://rxnav.nlm.nih.gov/REST",
        description="RxNav REST root"
    )
    OPENFDA_LABEL_URL: str = Field(
        default="https://api.fda.gov/drug/label.json",
        description="openFDA drug label endpoint"
    )
    OPENFDA_API_KEY: Optional[str] = Field(
        default=None,
        description="Optional openFDA key (raises the anonymous rate limit)"
    )
    REQUEST_TIMEOUT: float = Field(
        default=10.0,
        gt=0.0,
        description="Total seconds allowed per outbound request"
    )
    SEARCH_MIN_QUERY_LENGTH: int = Field(
        default=2,
        ge=1,
        description="Shorter queries return no candidates without touching the network"
    )
    SEARCH_MAX_RESULTS: int = Field(
        default=8,
        ge=1,
        description="Maximum number of ranked candidates returned by a search"
    )

source_settings = SourceSettings()
