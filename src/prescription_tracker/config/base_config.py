# ============================================================================
# src/prescription_tracker/config/base_config.py
# ============================================================================
"""
Base Configuration
- Vault root (the folder of Markdown notes)
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class BaseSettingsConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Notes vault
    VAULT_PATH: Path = Field(
        default=Path("vault"),
        description="Root folder of the Markdown vault that notes are written into"
    )

    def create_directories(self):
        """Create the vault root if it doesn't exist"""
        self.VAULT_PATH.mkdir(parents=True, exist_ok=True)

# Global instance
base_settings = BaseSettingsConfig()
