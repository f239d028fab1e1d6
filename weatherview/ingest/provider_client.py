"""OpenWeatherMap API client with retry and rate limit handling."""

import asyncio
import logging

import httpx

from weatherview.config.schema import ProviderConfig
from weatherview.models.errors import (
    MalformedResponseError,
    MissingCredentialError,
    ProviderRequestError,
)

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 502, 503, 504)


class ProviderClient:
    """Async wrapper around the /weather, /forecast and /geo/direct endpoints.

    The credential is checked before every call so that a missing key is
    reported as a configuration error and never reaches the network.
    """

    def __init__(self, config: ProviderConfig, http: httpx.AsyncClient | None = None):
        self.config = config
        self._http = http
        self._owns_http = http is None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=self.config.timeout,
                headers={"User-Agent": self.config.user_agent},
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    # --- Endpoints ---

    async def current_by_city(self, city: str) -> dict:
        return await self._get_json(
            f"{self.config.base_url}/weather",
            {"q": city, "units": self.config.units},
        )

    async def current_by_coordinates(self, lat: float, lon: float) -> dict:
        return await self._get_json(
            f"{self.config.base_url}/weather",
            {"lat": lat, "lon": lon, "units": self.config.units},
        )

    async def forecast_by_city(self, city: str) -> dict:
        return await self._get_json(
            f"{self.config.base_url}/forecast",
            {"q": city, "units": self.config.units},
        )

    async def forecast_by_coordinates(self, lat: float, lon: float) -> dict:
        return await self._get_json(
            f"{self.config.base_url}/forecast",
            {"lat": lat, "lon": lon, "units": self.config.units},
        )

    async def geocode(self, query: str, limit: int = 5) -> list:
        data = await self._get_json(
            f"{self.config.geo_base_url}/direct",
            {"q": query, "limit": limit},
        )
        if not isinstance(data, list):
            raise MalformedResponseError("Geocoding response is not a list")
        return data

    # --- Transport ---

    async def _get_json(self, url: str, params: dict):
        """GET a provider endpoint and decode JSON.

        Retries on 429/5xx gateway errors and transport errors with
        exponential backoff.
        """
        if not self.config.api_key:
            raise MissingCredentialError()

        query = {**params, "appid": self.config.api_key}
        max_retries = self.config.max_retries

        for attempt in range(max_retries + 1):
            try:
                resp = await self._client().get(url, params=query)
            except httpx.RequestError as e:
                if attempt < max_retries:
                    delay = self._delay(attempt)
                    logger.warning(
                        "Provider request error, retrying in %.1fs: %s", delay, e
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error("Provider request failed: GET %s -> %s", url, e)
                raise ProviderRequestError(f"Request failed: {e}") from e

            if resp.status_code in RETRY_STATUSES and attempt < max_retries:
                delay = self._delay(attempt)
                logger.warning(
                    "Provider %s returned %d, retrying in %.1fs (attempt %d/%d)",
                    url, resp.status_code, delay, attempt + 1, max_retries,
                )
                await asyncio.sleep(delay)
                continue

            if resp.status_code >= 400:
                provider_message = _error_message(resp)
                logger.error(
                    "Provider %d: GET %s -> %s", resp.status_code, url, provider_message
                )
                raise ProviderRequestError(
                    f"HTTP {resp.status_code}: {provider_message}",
                    status_code=resp.status_code,
                    provider_message=provider_message,
                )

            try:
                return resp.json()
            except ValueError as e:
                raise MalformedResponseError(f"Invalid JSON from {url}: {e}") from e

        raise AssertionError("unreachable")

    def _delay(self, attempt: int) -> float:
        return self.config.retry_base_delay * (2**attempt)


def _error_message(resp: httpx.Response) -> str:
    """Extract the provider's `message` field, falling back to the raw body."""
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "")[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return (resp.text or "")[:200]
