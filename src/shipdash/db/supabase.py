"""Supabase client shared by the shipment repository and the anonymous session."""

from __future__ import annotations

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client(url: str | None = None, key: str | None = None) -> Client | None:
    """Return the cached client for ``url``/``key`` (default: settings), or None.

    None means the dashboard runs without a remote store: shipments stay in
    memory and the session issues a local anonymous id. Creating the client
    does not contact the server, so a reachable project is not implied.
    """
    url = url or settings.supabase_url
    key = key or settings.supabase_key
    if not url or not key:
        logger.warning("Supabase not configured (SHIPDASH_SUPABASE_URL / SHIPDASH_SUPABASE_KEY missing)")
        return None
    try:
        return create_client(url, key)
    except Exception as exc:
        logger.error(f"Failed to create Supabase client for {url}: {exc}")
        return None
