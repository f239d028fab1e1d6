"""Error kinds surfaced to the presentation layer and the exceptions behind them."""

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    MISSING_CREDENTIAL = "MissingCredential"
    NOT_FOUND = "NotFound"
    PROVIDER_ERROR = "ProviderError"
    UNSUPPORTED = "Unsupported"
    DENIED = "Denied"
    UNAVAILABLE = "Unavailable"


@dataclass(frozen=True)
class AppError:
    """User-visible error held in application state."""

    kind: ErrorKind
    message: str


class WeatherViewError(Exception):
    kind: ErrorKind = ErrorKind.PROVIDER_ERROR


class MissingCredentialError(WeatherViewError):
    """Raised before any request when no API key is configured."""

    kind = ErrorKind.MISSING_CREDENTIAL

    def __init__(self, message: str = "API key is not set"):
        super().__init__(message)


class ProviderRequestError(WeatherViewError):
    """Raised when the provider answers with an error status or cannot be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        provider_message: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.provider_message = provider_message

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class MalformedResponseError(WeatherViewError):
    """Raised when a provider payload does not have the expected shape."""


class GeolocationError(WeatherViewError):
    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
