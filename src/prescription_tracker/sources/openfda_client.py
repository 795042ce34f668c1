# ============================================================================
# src/prescription_tracker/sources/openfda_client.py
# ============================================================================
"""
openFDA Drug Label Client

Labeling source: free-text name matched against openfda.brand_name and
openfda.generic_name, returning SPL label records with pharmacologic class
arrays, generic/brand name arrays and indications_and_usage text.

openFDA answers HTTP 404 when nothing matches; that is treated as an empty
result, not an error.
"""

from typing import Any, Dict, List, Optional

from .base import BaseSourceClient
from ..config.sources_config import source_settings


def build_label_query(name: str) -> str:
    """Brand-name-or-generic-name phrase query."""
    phrase = name.replace('"', '')
    return f'openfda.brand_name:"{phrase}" OR openfda.generic_name:"{phrase}"'


class OpenFDAClient(BaseSourceClient):
    """
    Async openFDA label client.

    Config options:
        label_url: Label endpoint (default: OPENFDA_LABEL_URL setting)
        api_key: Optional API key (default: OPENFDA_API_KEY setting)
        timeout: Request timeout in seconds
    """

    source_name = "openfda"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.label_url = self.config.get('label_url', source_settings.OPENFDA_LABEL_URL)
        self.api_key = self.config.get('api_key', source_settings.OPENFDA_API_KEY)

    async def search_labels(self, name: str, limit: int = 1) -> List[Dict[str, Any]]:
        """
        Label records whose brand or generic name matches name.

        Args:
            name: Medication name
            limit: Maximum number of records

        Returns:
            Raw label records (possibly empty)
        """
        params: Dict[str, Any] = {"search": build_label_query(name), "limit": limit}
        if self.api_key:
            params["api_key"] = self.api_key

        data = await self._get_json(self.label_url, params=params, not_found_ok=True)
        if data is None:
            self.logger.info(f"No openFDA labeling data for: {name}")
            return []

        results = data.get("results") or []
        return [r for r in results if isinstance(r, dict)]
