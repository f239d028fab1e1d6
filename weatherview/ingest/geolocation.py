"""Device location resolvers.

A resolver either returns coordinates or raises GeolocationError with kind
Unsupported (no location capability), Denied (the user refused) or
Unavailable (the lookup itself failed).
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

import httpx
from pydantic import BaseModel, ValidationError

from weatherview.config.schema import GeolocationConfig
from weatherview.models.errors import ErrorKind, GeolocationError
from weatherview.models.weather import Coordinates

logger = logging.getLogger(__name__)

ConsentPrompt = Callable[[], bool | Awaitable[bool]]


class GeolocationResolver(Protocol):
    async def resolve(self, ask: bool = True) -> Coordinates: ...


class IpLocation(BaseModel):
    """Subset of the ipapi.co response."""

    latitude: float
    longitude: float
    city: str | None = None
    country_name: str | None = None


class IpGeolocationResolver:
    """Resolves the device position from its public IP address.

    The consent prompt runs before any lookup unless `ask` is false, which
    callers pass once the decision has already been recorded. A falsy
    answer is Denied.
    """

    def __init__(
        self,
        config: GeolocationConfig,
        consent: ConsentPrompt | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self.consent = consent
        self._http = http

    async def resolve(self, ask: bool = True) -> Coordinates:
        if not self.config.enabled:
            raise GeolocationError(
                ErrorKind.UNSUPPORTED, "Geolocation is disabled in the configuration"
            )

        if ask and self.consent is not None:
            answer = self.consent()
            if inspect.isawaitable(answer):
                answer = await answer
            if not answer:
                raise GeolocationError(ErrorKind.DENIED, "Location access was denied")

        try:
            if self._http is not None:
                resp = await self._http.get(self.config.lookup_url)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as http:
                    resp = await http.get(self.config.lookup_url)
        except httpx.RequestError as e:
            raise GeolocationError(
                ErrorKind.UNAVAILABLE, f"Location lookup failed: {e}"
            ) from e

        if resp.status_code != 200:
            raise GeolocationError(
                ErrorKind.UNAVAILABLE,
                f"Location lookup failed with status {resp.status_code}",
            )

        try:
            location = IpLocation.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise GeolocationError(
                ErrorKind.UNAVAILABLE, f"Location could not be determined: {e}"
            ) from e

        logger.info(
            "Resolved location %s, %s (%.2f, %.2f)",
            location.city, location.country_name,
            location.latitude, location.longitude,
        )
        return Coordinates(latitude=location.latitude, longitude=location.longitude)


class FixedGeolocationResolver:
    """Returns preset coordinates, e.g. from command-line flags."""

    def __init__(self, latitude: float, longitude: float):
        self.coordinates = Coordinates(latitude=latitude, longitude=longitude)

    async def resolve(self, ask: bool = True) -> Coordinates:
        return self.coordinates


class UnsupportedGeolocationResolver:
    async def resolve(self, ask: bool = True) -> Coordinates:
        raise GeolocationError(
            ErrorKind.UNSUPPORTED, "Geolocation is not supported on this device"
        )
