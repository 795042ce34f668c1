# ============================================================================
# src/prescription_tracker/sources/base.py
# ============================================================================
"""
Base HTTP client for external drug data sources.

Owns one lazily created aiohttp session per event loop and turns transport,
status and decoding problems into SourceError subclasses so callers can
absorb them in one place.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from ..config.sources_config import source_settings
from ..utils.exceptions import SourceResponseError, SourceUnavailableError


def as_list(value: Any) -> list:
    """RxNav returns a bare object when a repeated element has one entry."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class BaseSourceClient:
    """
    Shared request plumbing for RxNav and openFDA clients.

    Config options:
        timeout: Total seconds per request (default: REQUEST_TIMEOUT setting)
    """

    source_name = "source"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__module__)
        self.timeout = float(self.config.get('timeout', source_settings.REQUEST_TIMEOUT))

        # HTTP session (created lazily, tied to event loop)
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_loop: Optional[asyncio.AbstractEventLoop] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session for current event loop."""
        current_loop = asyncio.get_running_loop()

        needs_new_session = (
            self._session is None
            or self._session.closed
            or self._session_loop is not current_loop
        )

        if needs_new_session:
            if self._session is not None and not self._session.closed:
                try:
                    await self._session.close()
                except RuntimeError:
                    # Session belonged to a loop that is already gone
                    pass

            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Accept": "application/json"},
            )
            self._session_loop = current_loop

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._session_loop = None

    async def _get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        not_found_ok: bool = False,
    ) -> Optional[Dict[str, Any]]:
        """
        GET url and decode the JSON body.

        Args:
            url: Absolute URL
            params: Query parameters (already-encoded values are passed through)
            not_found_ok: Return None on HTTP 404 instead of raising

        Returns:
            Decoded JSON object, or None for an accepted 404
        """
        session = await self._get_session()
        self.logger.debug(f"{self.source_name} GET {url} params={params}")

        try:
            async with session.get(url, params=params) as response:
                if response.status == 404 and not_found_ok:
                    return None
                if response.status != 200:
                    raise SourceUnavailableError(
                        f"{self.source_name} returned status {response.status} for {url}",
                        source=self.source_name,
                        status=response.status,
                    )
                text = await response.text()
        except asyncio.TimeoutError as e:
            raise SourceUnavailableError(
                f"{self.source_name} timed out after {self.timeout}s: {url}",
                source=self.source_name,
            ) from e
        except aiohttp.ClientError as e:
            raise SourceUnavailableError(
                f"{self.source_name} request failed: {e}",
                source=self.source_name,
            ) from e

        try:
            data = json.loads(text) if text else {}
        except json.JSONDecodeError as e:
            raise SourceResponseError(
                f"{self.source_name} returned invalid JSON: {e}",
                source=self.source_name,
            ) from e

        if not isinstance(data, dict):
            raise SourceResponseError(
                f"{self.source_name} returned {type(data).__name__}, expected object",
                source=self.source_name,
            )
        return data
