# ============================================================================
# src/prescription_tracker/config/__init__.py
# ============================================================================
"""
Convenient imports for all settings
"""

from .base_config import base_settings, BaseSettingsConfig
from .sources_config import source_settings, SourceSettings
from .vault_config import vault_settings, VaultSettings
from .logging_config import logging_settings, LoggingSettings
