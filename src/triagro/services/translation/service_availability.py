"""Availability tracking for a remote translation service."""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ServiceAvailability:
    """
    Tracks whether a remote service should be called.

    - Starts available, pending a connectivity probe.
    - Authentication failures disable it for the life of the instance.
    - Rate limiting or a failed connectivity check disables it until a
      cooldown has passed.
    - Any success makes it available again (unless disabled for auth).
    """

    DEFAULT_COOLDOWN_SECONDS = 300

    def __init__(
        self,
        name: str,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._permanently_disabled = False
        self._disabled_until: Optional[float] = None
        self._probed = False

    @property
    def is_available(self) -> bool:
        if self._permanently_disabled:
            return False
        if self._disabled_until is not None:
            if self._clock() < self._disabled_until:
                return False
            self._disabled_until = None
            logger.info("%s re-enabled after rate limit cooldown", self.name)
        return True

    @property
    def is_permanently_disabled(self) -> bool:
        return self._permanently_disabled

    @property
    def probed(self) -> bool:
        return self._probed

    def record_probe(self, success: bool) -> None:
        """Settle the initial state from a connectivity probe."""
        self._probed = True
        if success:
            logger.info("%s connected successfully", self.name)
            self.mark_success()
        elif self.is_available:
            # A running cooldown keeps its original deadline.
            logger.warning("%s not reachable, using local fallbacks", self.name)
            self._disabled_until = self._clock() + self.cooldown_seconds

    def mark_success(self) -> None:
        if not self._permanently_disabled:
            self._disabled_until = None

    def mark_auth_failure(self) -> None:
        if not self._permanently_disabled:
            logger.error(
                "%s rejected the subscription key. Remote translation is disabled "
                "until the service is reconfigured.",
                self.name,
            )
        self._permanently_disabled = True

    def mark_rate_limited(self) -> None:
        self._disabled_until = self._clock() + self.cooldown_seconds
        logger.warning(
            "%s rate limit reached, pausing for %ss", self.name, self.cooldown_seconds
        )

    def reset(self) -> None:
        """Re-enable after reconfiguration (e.g. a new API key)."""
        self._permanently_disabled = False
        self._disabled_until = None

    def snapshot(self) -> dict:
        return {
            "name": self.name,
            "available": self.is_available,
            "permanently_disabled": self._permanently_disabled,
            "probed": self._probed,
        }
