"""
Copy generator interface.

A copy generator writes the headline and subheadline for one slide. The
storyboard assembler only depends on this interface, so rule-based and
LLM-backed implementations are interchangeable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Tuple

from showcase.constants import DEFAULT_LOCALE, HEADLINE_MAX_LENGTH, SUBHEADLINE_MAX_LENGTH
from showcase.templates import SlideType


@dataclass(frozen=True)
class BrandContext:
    """Optional brand hints passed through to the generator."""
    tone: Optional[str] = None          # e.g. "professional", "playful"
    keywords: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CopyRequest:
    slide_type: SlideType
    app_name: str
    value_bullet: Optional[str] = None
    locale: str = DEFAULT_LOCALE
    brand_context: BrandContext = field(default_factory=BrandContext)


@dataclass(frozen=True)
class CopyMetadata:
    model: str
    truncated: bool = False
    fallback_used: bool = False


@dataclass(frozen=True)
class GeneratedCopy:
    """Headline and subheadline, already within their length limits."""
    headline: str
    subheadline: str
    locale: str
    metadata: CopyMetadata


class CopyGenerator(ABC):
    """Writes slide copy. Implementations must honor the length limits."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    async def generate_copy(self, request: CopyRequest) -> GeneratedCopy:
        """
        Generate copy for one slide.

        Raises:
            CopyGenerationError: If copy could not be produced
        """
        pass


def truncate_at_word(text: str, max_length: int, ellipsis: str = "…") -> Tuple[str, bool]:
    """
    Shorten text to max_length characters.

    Cuts at the last space when that keeps at least 70% of the limit,
    otherwise hard-cuts and appends the ellipsis.

    Returns:
        (text, truncated)

    Examples:
        >>> truncate_at_word("Track every habit you care about", 20)
        ('Track every habit', True)
    """
    if len(text) <= max_length:
        return text, False

    cut = text[:max_length]
    last_space = cut.rfind(" ")
    if last_space > max_length * 0.7:
        return cut[:last_space].rstrip(), True

    return text[:max_length - len(ellipsis)].rstrip() + ellipsis, True


def enforce_length(
    headline: str,
    subheadline: str,
    ellipsis: str = "…",
) -> Tuple[str, str, bool]:
    """Apply the headline/subheadline limits. Returns (headline, subheadline, truncated)."""
    headline, headline_cut = truncate_at_word(headline.strip(), HEADLINE_MAX_LENGTH, ellipsis)
    subheadline, subheadline_cut = truncate_at_word(subheadline.strip(), SUBHEADLINE_MAX_LENGTH, ellipsis)
    return headline, subheadline, headline_cut or subheadline_cut
