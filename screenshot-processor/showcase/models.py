"""
Storyboard, render and export data models.

Storyboard models are frozen pydantic models: they cross the HTTP boundary
as camelCase JSON and are only changed by building new values.
Render results hold raw bytes and stay plain dataclasses.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .constants import (
    DEFAULT_LOCALE, GENERATOR_VERSION, HEADLINE_MAX_LENGTH,
    SLIDES_PER_STORYBOARD, SUBHEADLINE_MAX_LENGTH,
)
from .devices import DeviceTarget
from .errors import StoryboardValidationError
from .templates import SlideType


def utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision, e.g. 2026-01-01T00:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class DomainModel(BaseModel):
    """Frozen model serialized with camelCase keys."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============== Storyboard ==============

class SlideText(DomainModel):
    headline: str = Field(max_length=HEADLINE_MAX_LENGTH)
    subheadline: str = Field(max_length=SUBHEADLINE_MAX_LENGTH)
    locale: str = DEFAULT_LOCALE


class SlideScreenshot(DomainModel):
    """Reference to an uploaded screenshot. The bytes live with the caller."""
    screenshot_id: str
    original_filename: str


class Slide(DomainModel):
    id: int = Field(ge=1, le=SLIDES_PER_STORYBOARD)
    type: SlideType
    text: SlideText
    screenshot: SlideScreenshot
    template_id: str


class Storyboard(DomainModel):
    """Complete five-slide screenshot set for one app and locale."""
    app_name: str
    locale: str = DEFAULT_LOCALE
    slides: Tuple[Slide, ...]
    created_at: str = Field(default_factory=utc_timestamp)
    version: str = GENERATOR_VERSION

    @field_validator("slides")
    @classmethod
    def check_slides(cls, slides: Tuple[Slide, ...]) -> Tuple[Slide, ...]:
        if len(slides) != SLIDES_PER_STORYBOARD:
            raise ValueError(f"Storyboard must have exactly {SLIDES_PER_STORYBOARD} slides, got {len(slides)}")
        ids = [slide.id for slide in slides]
        if ids != list(range(1, SLIDES_PER_STORYBOARD + 1)):
            raise ValueError(f"Slide ids must be 1-{SLIDES_PER_STORYBOARD} in order, got {ids}")
        return slides

    def get_slide(self, slide_id: int) -> Slide:
        if isinstance(slide_id, bool) or slide_id < 1 or slide_id > len(self.slides):
            raise StoryboardValidationError(
                f"Invalid slide ID: {slide_id}. Must be 1-{SLIDES_PER_STORYBOARD}"
            )
        return self.slides[slide_id - 1]


# ============== Assembly input ==============

@dataclass(frozen=True)
class UploadedScreenshot:
    """Metadata for one uploaded screenshot."""
    id: str
    filename: str
    mime_type: str = "image/png"
    size: int = 0


@dataclass(frozen=True)
class StoryboardInput:
    app_name: str
    value_bullets: Tuple[str, ...]
    screenshots: Tuple[UploadedScreenshot, ...]
    locale: str = DEFAULT_LOCALE
    brand_color: Optional[str] = None


# ============== Rendering ==============

@dataclass(frozen=True)
class RenderMetadata:
    target_id: str
    slide_id: int
    template_id: str


@dataclass(frozen=True)
class RenderedImage:
    """One rendered PNG with its verified dimensions."""
    buffer: bytes
    width: int
    height: int
    metadata: RenderMetadata
    format: str = "png"


@dataclass(frozen=True)
class RenderedSlideImage:
    """Export input: the PNG for one (target, slide) pair."""
    target: DeviceTarget
    slide_id: int
    buffer: bytes


# ============== Export manifest ==============

class ManifestTarget(DomainModel):
    platform: str
    width: int
    height: int
    file_count: int


class ManifestSlide(DomainModel):
    slide_id: int
    headline: str
    subheadline: str
    screenshot_id: str
    template_id: str


class ExportManifest(DomainModel):
    app_name: str
    exported_at: str
    locale: str
    targets: List[ManifestTarget]
    templates_used: List[str]
    slides: List[ManifestSlide]
    generator_version: str = GENERATOR_VERSION

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


@dataclass(frozen=True)
class ExportResult:
    zip_buffer: bytes
    file_count: int
    size_bytes: int
    manifest: ExportManifest
