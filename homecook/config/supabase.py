# homecook/config/supabase.py
"""
Supabase client wrapper and lightweight health check.

Initialization is lazy and synchronous: nothing touches the network until
`client` or `health_check()` is used. The wrapper is built once in `main.py`
and handed to `SupabaseDocumentStore`; services never import it directly.
Diagnostics return structural info only, never secrets.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from supabase import Client, create_client  # supabase-py

from homecook.config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

# Simple strict supabase domain check (https + project ref + .supabase.co)
_SUPABASE_URL_RE = re.compile(r"^https://[A-Za-z0-9\-]+\.supabase\.co/?$")

# Cheap table used by the health check.
HEALTH_CHECK_TABLE = "cook_profiles"


class SupabaseClient:
    """
    Lightweight wrapper around the supabase-py `Client`.

    Use:
        wrapper = SupabaseClient()
        client = wrapper.client  # None if not configured
    """

    def __init__(self, config: Optional[Settings] = None) -> None:
        self._settings = config or default_settings
        self._client: Optional[Client] = None
        self._initialized: bool = False

    def _validate_url(self, url: Optional[str]) -> bool:
        return bool(url and _SUPABASE_URL_RE.match(url))

    def _initialize_client(self) -> None:
        if self._initialized:
            return
        self._initialized = True

        supabase_url = (self._settings.supabase_url or "").strip()
        supabase_key = self._settings.supabase_service_role_key or ""

        if not supabase_url or not supabase_key:
            logger.debug(
                "Supabase credentials not present at init: url=%r key_present=%s",
                supabase_url,
                bool(supabase_key),
            )
            return

        if not self._validate_url(supabase_url):
            logger.error(
                "Supabase URL format invalid: %r. Expected https://<project>.supabase.co",
                supabase_url,
            )
            return

        try:
            self._client = create_client(supabase_url, supabase_key)
            logger.info(
                "Initialized Supabase client for host=%s", urlparse(supabase_url).netloc
            )
        except Exception as exc:
            logger.exception("Failed to initialize Supabase client: %s", exc)
            self._client = None

    @property
    def client(self) -> Optional[Client]:
        """Return the underlying supabase client or None when not configured."""
        if self._client is None and not self._initialized:
            self._initialize_client()
        return self._client

    def diagnostics(self) -> Dict[str, Any]:
        """Non-sensitive diagnostics about the client configuration."""
        diag: Dict[str, Any] = {
            "configured": self._settings.supabase_configured,
            "client_present": self._client is not None,
            "host": None,
        }
        if self._settings.supabase_url:
            diag["host"] = urlparse(self._settings.supabase_url).netloc
        return diag

    def health_check(self) -> bool:
        """
        Synchronous health check.

        Runs a one-row select against a known table. Any exception or
        error-shaped response counts as unhealthy. Callers on the event loop
        should run this in a worker thread.
        """
        client = self.client
        if client is None:
            logger.debug("Supabase health_check: no client configured")
            return False

        try:
            res = client.table(HEALTH_CHECK_TABLE).select("id").limit(1).execute()
            if hasattr(res, "error") and res.error:
                logger.warning(
                    "Supabase health_check returned error object: %s",
                    getattr(res, "error"),
                )
                return False
            if (
                hasattr(res, "status_code")
                and isinstance(res.status_code, int)
                and res.status_code >= 400
            ):
                logger.warning("Supabase health_check HTTP status: %s", res.status_code)
                return False
            return True
        except Exception as exc:
            logger.exception("Exception during Supabase health_check: %s", exc)
            return False
