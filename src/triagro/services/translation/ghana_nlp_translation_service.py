"""Ghana NLP Translation Service - Implements translation via the Ghana NLP HTTP API."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional

import httpx

from triagro.core import SUPPORTED_LANGUAGE_PAIRS, LanguagePair, plan_route
from triagro.services.translation.service_availability import ServiceAvailability
from triagro.services.translation.translation_service import (
    DecodeResult,
    RemoteAuthError,
    RemoteRateLimitedError,
    RemoteServiceUnavailableError,
    RemoteTranslationError,
    RemoteTranslationService,
    TranslationResult,
    UnrecognizedShape,
    UnsupportedLanguagePairError,
    decode_translation_payload,
)

logger = logging.getLogger(__name__)


class GhanaNLPTranslationService(RemoteTranslationService):
    """
    Translation client for the Ghana NLP translation API.

    Sends POST {base_url}/translate with {"in": text, "lang": "en-tw"} and
    reads the translated text from the response. Transient failures are
    retried with a linearly growing delay; authentication and rate-limit
    failures update the shared ServiceAvailability.

    The httpx.AsyncClient is injected so tests can swap in a MockTransport.
    """

    provider_name = "ghana-nlp"

    DEFAULT_BASE_URL = "https://translation-api.ghananlp.org/v1"
    USER_AGENT = "TriAgro-Translation-Client/1.0"
    FAST_TIMEOUT = 3.0
    ACCURATE_TIMEOUT = 15.0
    MAX_RETRIES = 3
    RETRY_DELAY = 1.0
    PROBE_TEXT = "Hello"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        availability: Optional[ServiceAvailability] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = FAST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        language_pairs: Optional[List[LanguagePair]] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._client = client
        self._api_key = api_key.strip() if api_key and api_key.strip() else None
        self.availability = availability or ServiceAvailability("Ghana NLP API")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._pairs = list(language_pairs) if language_pairs is not None else list(SUPPORTED_LANGUAGE_PAIRS)
        self._sleep = sleep

    async def translate(
        self, text: str, source_lang: str, target_lang: str
    ) -> TranslationResult:
        """
        Translate text, going through English when there is no direct pair.

        A two-hop route counts as one operation: if either hop fails the
        whole translation fails, and only the final text is returned.

        Raises:
            RemoteServiceUnavailableError: The service is currently disabled.
            UnsupportedLanguagePairError: No direct or pivot route exists.
            RemoteTranslationError: The request failed after retries.
        """
        if not self.is_available:
            raise RemoteServiceUnavailableError(f"{self.availability.name} is currently unavailable")

        route = plan_route(source_lang, target_lang, self._pairs)
        if route is None:
            raise UnsupportedLanguagePairError(
                f"Unsupported language pair: {source_lang} to {target_lang}"
            )

        current = text
        try:
            for hop in route.hops:
                decoded = await self.translate_pair(current, hop)
                if isinstance(decoded, UnrecognizedShape):
                    logger.warning(
                        "Unexpected response format for %s: %r", hop, decoded.payload
                    )
                    self.availability.mark_success()
                    return TranslationResult(text=text, provider=self.provider_name, unrecognized=True)
                current = decoded.text
        except RemoteAuthError:
            self.availability.mark_auth_failure()
            raise
        except RemoteRateLimitedError:
            self.availability.mark_rate_limited()
            raise

        self.availability.mark_success()
        return TranslationResult(text=current, provider=self.provider_name)

    async def translate_pair(self, text: str, pair_code: str) -> DecodeResult:
        """
        One API request for a single pair code, with retries.

        Retries up to max_retries times on transport errors, timeouts, 5xx,
        429 and 408, waiting attempt * retry_delay seconds between tries.
        """
        attempt = 0
        while True:
            try:
                payload = await self._post(text, pair_code)
                return decode_translation_payload(payload)
            except RemoteTranslationError as e:
                if attempt < self.max_retries and e.is_retryable:
                    attempt += 1
                    delay = self.retry_delay * attempt
                    logger.info(
                        "Retrying translation (%d/%d) in %.1fs after: %s",
                        attempt, self.max_retries, delay, e,
                    )
                    await self._sleep(delay)
                    continue
                raise

    async def _post(self, text: str, pair_code: str) -> Any:
        request_data = {"in": text.strip(), "lang": pair_code}
        logger.debug("Ghana NLP request: %s", request_data)

        try:
            response = await self._client.post(
                f"{self.base_url}/translate",
                json=request_data,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise RemoteTranslationError(f"Request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise RemoteTranslationError(f"Network error: {e}") from e

        status = response.status_code
        if status in (401, 403):
            raise RemoteAuthError(self._error_message(response), status)
        if status == 429:
            raise RemoteRateLimitedError(self._error_message(response), status)
        if not response.is_success:
            raise RemoteTranslationError(self._error_message(response), status)

        try:
            return response.json()
        except ValueError:
            # Plain-text body rather than a JSON document.
            return response.text

    def _headers(self) -> dict:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        }
        if self._api_key:
            headers["Ocp-Apim-Subscription-Key"] = self._api_key
        return headers

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text[:200] or response.reason_phrase
        if isinstance(data, dict):
            message = data.get("message") or data.get("error")
            if message:
                return str(message)
        return response.reason_phrase or f"HTTP {response.status_code}"

    async def test_connection(self) -> bool:
        """Probe the API with a short request and settle the availability flag."""
        if not self.is_available:
            # Disabled or cooling down; checking now must not move the deadline.
            logger.debug("Skipping connectivity check: %s is unavailable", self.availability.name)
            return False
        try:
            await self.translate(self.PROBE_TEXT, "en", "tw")
            success = True
        except RemoteTranslationError as e:
            logger.warning("Ghana NLP connectivity probe failed: %s", e)
            success = False
        self.availability.record_probe(success)
        return success

    def get_supported_language_pairs(self) -> List[dict]:
        return [
            {"code": pair.code, "from": pair.source, "to": pair.target, "name": pair.name}
            for pair in self._pairs
        ]

    def get_usage_stats(self) -> dict:
        return {
            "provider": self.provider_name,
            "api_key": "Configured" if self._api_key else "Not configured",
            "base_url": self.base_url,
            "timeout": self.timeout,
            "supported_language_pairs": len(self._pairs),
            "availability": self.availability.snapshot(),
        }

    async def health_check(self) -> dict:
        """Probe connectivity and report status for monitoring."""
        connected = await self.test_connection()
        return {
            "service": "Ghana NLP Translation Service",
            "status": "healthy" if connected else "degraded",
            **self.get_usage_stats(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
