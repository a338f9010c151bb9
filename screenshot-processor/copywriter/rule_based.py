"""
Rule-based copy generator.

Picks headline and subheadline phrases from fixed sets per slide type. The
choice is keyed by a stable string hash, so the same input always gets the
same copy and no network call is made.
"""

import logging
from typing import Callable, Dict, List

from showcase.errors import CopyGenerationError
from showcase.templates import SlideType

from .base import CopyGenerator, CopyMetadata, CopyRequest, GeneratedCopy, enforce_length

logger = logging.getLogger(__name__)

MODEL_NAME = "rule-based"

Phrase = Callable[[str, str], str]   # (app_name, bullet) -> text

HEADLINES: Dict[SlideType, List[Phrase]] = {
    SlideType.HERO: [
        lambda app, bullet: app,
        lambda app, bullet: f"Meet {app}",
        lambda app, bullet: f"Introducing {app}",
    ],
    SlideType.FEATURE: [
        lambda app, bullet: bullet,
        lambda app, bullet: f"✓ {bullet}",
    ],
    SlideType.CLOSING: [
        lambda app, bullet: f"Get {app} Today",
        lambda app, bullet: "Start Free",
        lambda app, bullet: f"Try {app} Free",
        lambda app, bullet: "Download Now",
    ],
}

SUBHEADLINES: Dict[SlideType, List[Phrase]] = {
    SlideType.HERO: [
        lambda app, bullet: "The app you've been waiting for",
        lambda app, bullet: "Transform the way you work",
        lambda app, bullet: "Built for modern teams",
    ],
    SlideType.FEATURE: [
        lambda app, bullet: f"Experience {bullet.lower()}",
        lambda app, bullet: "Designed to help you succeed",
        lambda app, bullet: "Everything you need, simplified",
    ],
    SlideType.CLOSING: [
        lambda app, bullet: "Join thousands of happy users",
        lambda app, bullet: "Available on iOS and Android",
        lambda app, bullet: "No credit card required",
    ],
}


def string_hash(value: str) -> int:
    """
    Non-negative 32-bit string hash over UTF-16 code units.

    h = h * 31 + code, wrapped to a signed 32-bit integer, absolute value.
    Stable across processes, unlike hash().
    """
    h = 0
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + code) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def select_phrase(phrases: List[Phrase], seed: str, app_name: str, bullet: str) -> str:
    return phrases[string_hash(seed) % len(phrases)](app_name, bullet)


class RuleBasedCopyGenerator(CopyGenerator):
    """Deterministic template-based copy. Always available."""

    @property
    def name(self) -> str:
        return MODEL_NAME

    def is_available(self) -> bool:
        return True

    def write(self, request: CopyRequest) -> GeneratedCopy:
        """Synchronous generation, shared with the LLM fallback path."""
        slide_type = SlideType(request.slide_type)
        app_name = request.app_name.strip()
        bullet = (request.value_bullet or "").strip()

        if not app_name:
            raise CopyGenerationError("App name is required for copy generation")

        if slide_type == SlideType.FEATURE and not bullet:
            # No bullet to feature; fall back to the app name
            bullet = app_name

        headline_seed = bullet if slide_type == SlideType.FEATURE else app_name
        headline = select_phrase(HEADLINES[slide_type], headline_seed, app_name, bullet)
        subheadline = select_phrase(SUBHEADLINES[slide_type], bullet or app_name, app_name, bullet)

        headline, subheadline, truncated = enforce_length(headline, subheadline)

        return GeneratedCopy(
            headline=headline,
            subheadline=subheadline,
            locale=request.locale,
            metadata=CopyMetadata(model=MODEL_NAME, truncated=truncated),
        )

    async def generate_copy(self, request: CopyRequest) -> GeneratedCopy:
        return self.write(request)
