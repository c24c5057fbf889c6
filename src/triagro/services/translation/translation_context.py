"""Shared mutable state owned by one resolver instance."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from triagro.services.caching import InMemoryTranslationCache, RequestDeduplicator, TranslationCache
from triagro.services.translation.service_availability import ServiceAvailability


class Tier(str, Enum):
    """Stage of the resolution pipeline that produced a result."""

    NOOP = "noop"
    CACHE = "cache"
    TEMPLATE = "template"
    PHRASE = "phrase"
    REMOTE = "remote"
    PASSTHROUGH = "passthrough"


@dataclass
class TierMetrics:
    """Per-tier hit counts and a rolling average latency in milliseconds."""

    hits: Dict[Tier, int] = field(default_factory=lambda: {tier: 0 for tier in Tier})
    total_requests: int = 0
    average_ms: float = 0.0

    def record(self, tier: Tier, duration_ms: float) -> None:
        self.hits[tier] += 1
        self.total_requests += 1
        total_time = self.average_ms * (self.total_requests - 1)
        self.average_ms = (total_time + duration_ms) / self.total_requests

    def snapshot(self) -> dict:
        return {
            "hits": {tier.value: count for tier, count in self.hits.items()},
            "total_requests": self.total_requests,
            "average_ms": round(self.average_ms, 3),
        }


@dataclass
class TranslationContext:
    """
    Cache, in-flight map, availability flag and metrics for one resolver.

    Each HybridTranslationService owns its own context; two resolvers
    share state only when handed the same objects. A resolver with a
    remote client replaces `availability` with the client's flag.
    """

    cache: TranslationCache
    deduplicator: RequestDeduplicator
    availability: ServiceAvailability
    metrics: TierMetrics

    @classmethod
    def create(
        cls,
        cache: Optional[TranslationCache] = None,
        availability: Optional[ServiceAvailability] = None,
    ) -> "TranslationContext":
        return cls(
            cache=cache if cache is not None else InMemoryTranslationCache(),
            deduplicator=RequestDeduplicator(),
            availability=availability or ServiceAvailability("Ghana NLP API"),
            metrics=TierMetrics(),
        )
