"""Remote Translation Service - interface, results and error taxonomy."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from triagro.services.translation.service_availability import ServiceAvailability

RESPONSE_TEXT_FIELDS = ("out", "translated_text", "translation", "result", "text")


class RemoteTranslationError(Exception):
    """A remote translation call failed. status is None for transport errors."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
        self.message = message

    @property
    def is_retryable(self) -> bool:
        """Transport errors, timeouts, 5xx, 429 and 408 are worth another attempt."""
        if self.status is None:
            return True
        return self.status >= 500 or self.status in (408, 429)

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"HTTP {self.status}: {self.message}"


class RemoteAuthError(RemoteTranslationError):
    """401/403 - the subscription key was rejected."""


class RemoteRateLimitedError(RemoteTranslationError):
    """429 - the API asked us to slow down."""


class RemoteServiceUnavailableError(RemoteTranslationError):
    """The service is marked unavailable; no request was sent."""


class UnsupportedLanguagePairError(RemoteTranslationError):
    """Neither a direct nor a pivot route exists for the pair."""

    @property
    def is_retryable(self) -> bool:
        return False


@dataclass(frozen=True)
class Decoded:
    """The response carried a translated string."""

    text: str


@dataclass(frozen=True)
class UnrecognizedShape:
    """The response parsed but held no translated text we know how to find."""

    payload: Any


DecodeResult = Union[Decoded, UnrecognizedShape]


def decode_translation_payload(
    payload: Any, fields: Sequence[str] = RESPONSE_TEXT_FIELDS
) -> DecodeResult:
    """
    Extract translated text from an API response body.

    Accepts a bare JSON string or an object exposing one of the known
    field names (checked in order). Anything else is UnrecognizedShape.
    """
    if isinstance(payload, str):
        text = payload.strip()
        return Decoded(text) if text else UnrecognizedShape(payload)

    if isinstance(payload, dict):
        for name in fields:
            value = payload.get(name)
            if isinstance(value, str) and value.strip():
                return Decoded(value.strip())

    return UnrecognizedShape(payload)


@dataclass
class TranslationResult:
    """Result of a remote translation request."""

    text: str
    provider: str
    unrecognized: bool = False

    @property
    def is_passthrough(self) -> bool:
        """True if some hop returned a shape we could not read and text was kept."""
        return self.unrecognized


class RemoteTranslationService(ABC):
    """
    Abstract client for a remote machine translation API.

    Implementations (e.g., GhanaNLPTranslationService) handle HTTP and
    retries, and keep `availability` up to date as calls succeed or fail.
    """

    provider_name = "remote"
    availability: ServiceAvailability

    @abstractmethod
    async def translate(
        self, text: str, source_lang: str, target_lang: str
    ) -> TranslationResult:
        """
        Translate text between two languages.

        Args:
            text: Text to translate.
            source_lang: Source language code.
            target_lang: Target language code.

        Returns:
            TranslationResult with the translated text.

        Raises:
            RemoteTranslationError: If the call failed after retries.
        """
        pass

    @property
    def is_available(self) -> bool:
        """Whether a request would currently be attempted."""
        return self.availability.is_available
