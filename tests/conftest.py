"""Shared test doubles."""

import asyncio
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from triagro.services.translation import (
    RemoteTranslationService,
    ServiceAvailability,
    TranslationResult,
)


class FakeRemoteTranslationService(RemoteTranslationService):
    """
    Scriptable stand-in for the remote API.

    Replies come from `replies` when the text is listed there, otherwise
    from `reply(text, source, target)`. Setting `error` makes every call raise.
    """

    provider_name = "fake"

    def __init__(
        self,
        replies: Optional[Dict[str, str]] = None,
        reply: Optional[Callable[[str, str, str], str]] = None,
        delay: float = 0.0,
        error: Optional[BaseException] = None,
        unrecognized: bool = False,
    ):
        self.replies = replies or {}
        self.reply = reply or (lambda text, source, target: f"[{target}] {text}")
        self.delay = delay
        self.error = error
        self.unrecognized = unrecognized
        self.availability = ServiceAvailability("Fake remote")
        self.calls: List[Tuple[str, str, str]] = []

    async def translate(self, text: str, source_lang: str, target_lang: str) -> TranslationResult:
        self.calls.append((text, source_lang, target_lang))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.unrecognized:
            return TranslationResult(text=text, provider=self.provider_name, unrecognized=True)
        translated = self.replies.get(text)
        if translated is None:
            translated = self.reply(text, source_lang, target_lang)
        return TranslationResult(text=translated, provider=self.provider_name)


@pytest.fixture
def fake_remote():
    return FakeRemoteTranslationService()


@pytest.fixture
def make_remote():
    """Factory for remotes with custom behaviour."""
    return FakeRemoteTranslationService
