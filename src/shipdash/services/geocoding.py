"""HTTP client for resolving place names through a Nominatim-compatible geocoder."""

from __future__ import annotations

import logging

import httpx

from ..config import settings
from ..models.domain import Coordinates

logger = logging.getLogger(__name__)


class GeocodingClient:
    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Geocoder base URL is not configured.")
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        # One client per call; submits geocode both endpoints from separate threads.
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            transport=self._transport,
        )

    def geocode(self, address: str) -> Coordinates | None:
        """Return the best-match coordinates for ``address`` or None.

        Empty results, malformed payloads, out-of-range coordinates and
        transport errors are all reported as None; the caller cannot tell a
        miss from an outage, only that the address did not resolve.
        """
        query = address.strip()
        if not query:
            return None

        client = self._get_client()
        try:
            response = client.get("/search", params={"q": query, "format": "json", "limit": 1})
            response.raise_for_status()
            results = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"Geocoding request for '{query}' failed: {exc}")
            return None
        finally:
            client.close()

        if not isinstance(results, list) or not results:
            logger.warning(f"No geocoding match for '{query}'")
            return None

        best = results[0]
        try:
            coordinates = Coordinates(lat=float(best["lat"]), lng=float(best["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Malformed geocoding result for '{query}': {exc}")
            return None

        if not coordinates.in_range:
            logger.warning(f"Geocoder returned out-of-range coordinates for '{query}': {coordinates}")
            return None
        return coordinates


def check_health(base_url: str | None = None) -> bool:
    """Check geocoder reachability with a minimal lookup."""
    base = (base_url or settings.geocoder_base_url).rstrip("/")
    if not base:
        return False
    try:
        response = httpx.get(
            f"{base}/search",
            params={"q": "Berlin", "format": "json", "limit": 1},
            headers={"User-Agent": settings.geocoder_user_agent},
            timeout=5.0,
        )
        response.raise_for_status()
        return isinstance(response.json(), list)
    except (httpx.HTTPError, ValueError):
        return False
