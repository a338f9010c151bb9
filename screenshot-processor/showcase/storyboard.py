"""
StoryboardAssembler - Builds the five-slide storyboard.

Slide plan:
1. Hero      <- screenshot 1, app name
2-4. Feature <- screenshots 2-4, value bullets 1-3
5. Closing   <- screenshot 5, call to action

Missing screenshots fall back to the first one with a warning. Copy comes
from an injected copy generator; templates come from the registry.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pydantic import ValidationError

from copywriter.base import BrandContext, CopyGenerator, CopyRequest
from .constants import SLIDES_PER_STORYBOARD, validate_storyboard_input
from .errors import StoryboardInvariantError, StoryboardValidationError
from .models import Slide, SlideScreenshot, SlideText, Storyboard, StoryboardInput, UploadedScreenshot
from .templates import SlideType, select_template

logger = logging.getLogger(__name__)

FEATURE_SLIDE_IDS = (2, 3, 4)
CLOSING_SCREENSHOT_INDEX = 4
HERO_TONE = "professional"


@dataclass
class AssemblyResult:
    """Storyboard plus non-fatal notes for the client."""
    storyboard: Storyboard
    warnings: List[str] = field(default_factory=list)


def fallback_warning(slide_id: int) -> str:
    return f"Slide {slide_id}: Using screenshot #1 (not enough screenshots provided)"


class StoryboardAssembler:
    """
    Assembles storyboards from app input.

    Usage:
        assembler = StoryboardAssembler(RuleBasedCopyGenerator())
        result = await assembler.assemble(storyboard_input)
    """

    def __init__(self, copy_generator: CopyGenerator):
        self.copy_generator = copy_generator

    def _pick_screenshot(
        self,
        screenshots: Tuple[UploadedScreenshot, ...],
        index: int,
        slide_id: int,
        warnings: List[str],
    ) -> UploadedScreenshot:
        if index < len(screenshots):
            return screenshots[index]
        warning = fallback_warning(slide_id)
        logger.warning(warning)
        warnings.append(warning)
        return screenshots[0]

    async def _build_slide(
        self,
        slide_id: int,
        slide_type: SlideType,
        template_id: Optional[str],
        data: StoryboardInput,
        screenshot: UploadedScreenshot,
        value_bullet: Optional[str] = None,
        tone: Optional[str] = None,
    ) -> Slide:
        copy = await self.copy_generator.generate_copy(
            CopyRequest(
                slide_type=slide_type,
                app_name=data.app_name,
                value_bullet=value_bullet,
                locale=data.locale,
                brand_context=BrandContext(tone=tone),
            )
        )
        template = select_template(slide_type, template_id)

        try:
            text = SlideText(headline=copy.headline, subheadline=copy.subheadline, locale=data.locale)
        except ValidationError as e:
            raise StoryboardValidationError(
                f"Copy for slide {slide_id} exceeds length limits",
                context={"generator": self.copy_generator.name, "errors": e.errors(include_url=False)},
            ) from e

        return Slide(
            id=slide_id,
            type=slide_type,
            text=text,
            screenshot=SlideScreenshot(screenshot_id=screenshot.id, original_filename=screenshot.filename),
            template_id=template.id,
        )

    async def assemble(self, data: StoryboardInput) -> AssemblyResult:
        """
        Build a storyboard.

        Args:
            data: App name, value bullets, screenshot metadata and locale

        Returns:
            AssemblyResult with the storyboard and screenshot fallback warnings

        Raises:
            StoryboardValidationError: Input breaks the bullet/screenshot/locale rules
            StoryboardInvariantError: Assembly did not produce exactly five slides
            CopyGenerationError: Propagated from the copy generator
        """
        validate_storyboard_input(data.app_name, data.value_bullets, len(data.screenshots), data.locale)

        warnings: List[str] = []
        slides: List[Slide] = []

        slides.append(await self._build_slide(
            1, SlideType.HERO, None, data, data.screenshots[0], tone=HERO_TONE,
        ))

        for bullet_index, slide_id in enumerate(FEATURE_SLIDE_IDS):
            screenshot = self._pick_screenshot(data.screenshots, bullet_index + 1, slide_id, warnings)
            template_id = "stack" if slide_id % 2 == 0 else "split"
            slides.append(await self._build_slide(
                slide_id, SlideType.FEATURE, template_id, data, screenshot,
                value_bullet=data.value_bullets[bullet_index],
            ))

        screenshot = self._pick_screenshot(data.screenshots, CLOSING_SCREENSHOT_INDEX, SLIDES_PER_STORYBOARD, warnings)
        slides.append(await self._build_slide(
            SLIDES_PER_STORYBOARD, SlideType.CLOSING, None, data, screenshot, tone=HERO_TONE,
        ))

        if len(slides) != SLIDES_PER_STORYBOARD:
            raise StoryboardInvariantError(
                f"Storyboard must have exactly {SLIDES_PER_STORYBOARD} slides, got {len(slides)}"
            )

        storyboard = Storyboard(app_name=data.app_name, locale=data.locale, slides=tuple(slides))

        logger.info(
            f"Assembled storyboard for '{data.app_name}': templates "
            f"{[s.template_id for s in slides]}, {len(warnings)} warnings"
        )
        return AssemblyResult(storyboard=storyboard, warnings=warnings)


def _check_slide_id(slide_id: int) -> None:
    # bool is an int subclass; True must not address slide 1
    if isinstance(slide_id, bool) or not isinstance(slide_id, int):
        raise StoryboardValidationError(f"Invalid slide ID: {slide_id!r}. Must be an integer")
    if slide_id < 1 or slide_id > SLIDES_PER_STORYBOARD:
        raise StoryboardValidationError(
            f"Invalid slide ID: {slide_id}. Must be 1-{SLIDES_PER_STORYBOARD}"
        )


def _replace_slide(storyboard: Storyboard, slide: Slide) -> Storyboard:
    slides = tuple(slide if s.id == slide.id else s for s in storyboard.slides)
    return storyboard.model_copy(update={"slides": slides})


def update_screenshot_assignment(
    storyboard: Storyboard,
    slide_id: int,
    screenshot_id: str,
    filename: str,
) -> Storyboard:
    """
    Assign a different screenshot to one slide.

    Returns:
        New storyboard; the given one is not modified

    Raises:
        StoryboardValidationError: slide_id outside 1-5 or empty screenshot id
    """
    _check_slide_id(slide_id)
    if not screenshot_id:
        raise StoryboardValidationError("Screenshot ID is required")

    slide = storyboard.get_slide(slide_id)
    updated = slide.model_copy(update={
        "screenshot": SlideScreenshot(screenshot_id=screenshot_id, original_filename=filename),
    })
    logger.info(f"Slide {slide_id}: screenshot -> {screenshot_id}")
    return _replace_slide(storyboard, updated)


def update_slide_text(
    storyboard: Storyboard,
    slide_id: int,
    headline: Optional[str] = None,
    subheadline: Optional[str] = None,
) -> Storyboard:
    """
    Edit the headline and/or subheadline of one slide.

    Fields left as None keep their current value.

    Returns:
        New storyboard; the given one is not modified

    Raises:
        StoryboardValidationError: slide_id outside 1-5 or text over its limit
    """
    _check_slide_id(slide_id)

    slide = storyboard.get_slide(slide_id)
    try:
        text = SlideText(
            headline=slide.text.headline if headline is None else headline,
            subheadline=slide.text.subheadline if subheadline is None else subheadline,
            locale=slide.text.locale,
        )
    except ValidationError as e:
        raise StoryboardValidationError(
            f"Slide {slide_id} text exceeds length limits",
            context={"errors": e.errors(include_url=False)},
        ) from e

    return _replace_slide(storyboard, slide.model_copy(update={"text": text}))
