"""City suggestion fetcher backed by the provider's direct geocoding endpoint."""

from pydantic import ValidationError

from weatherview.ingest.provider_client import ProviderClient
from weatherview.models.errors import MalformedResponseError
from weatherview.models.provider import GeoCandidate
from weatherview.models.weather import CitySuggestion


class SuggestionFetcher:
    def __init__(self, client: ProviderClient, min_chars: int = 3, limit: int = 5):
        self.client = client
        self.min_chars = min_chars
        self.limit = limit

    async def suggest(self, partial: str) -> list[CitySuggestion]:
        """Return up to `limit` ranked candidates for a partial city name.

        Inputs shorter than `min_chars` return an empty list without a request.
        """
        if len(partial) < self.min_chars:
            return []

        raw = await self.client.geocode(partial, limit=self.limit)
        try:
            candidates = [GeoCandidate.model_validate(item) for item in raw]
        except ValidationError as e:
            raise MalformedResponseError(
                f"Unexpected geocoding shape: {e.error_count()} errors"
            ) from e

        return [
            CitySuggestion(
                name=c.name,
                country=c.country,
                state=c.state,
                latitude=c.lat,
                longitude=c.lon,
            )
            for c in candidates[: self.limit]
        ]
