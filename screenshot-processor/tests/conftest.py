import io

import pytest
from PIL import Image

from copywriter import RuleBasedCopyGenerator
from showcase.models import (
    Slide, SlideScreenshot, SlideText, Storyboard, StoryboardInput, UploadedScreenshot,
)
from showcase.renderer import ScreenshotRenderer
from showcase.templates import SlideType


def make_png(width=120, height=260, color=(200, 30, 30)) -> bytes:
    """Small solid-color screenshot."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def fast_renderer():
    # Low compression keeps full-size renders quick
    return ScreenshotRenderer(compress_level=1)


@pytest.fixture
def copy_generator():
    return RuleBasedCopyGenerator()


@pytest.fixture
def uploaded_screenshots():
    return tuple(UploadedScreenshot(id=f"shot-{i}", filename=f"shot-{i}.png") for i in range(1, 6))


@pytest.fixture
def storyboard_input(uploaded_screenshots):
    return StoryboardInput(
        app_name="MyApp",
        value_bullets=("Track habits", "Set reminders", "See your progress"),
        screenshots=uploaded_screenshots,
    )


@pytest.fixture
def sample_storyboard():
    """Storyboard as the assembler would build it for five screenshots."""
    plan = [
        (1, SlideType.HERO, "hero", "MyApp", "Built for modern teams"),
        (2, SlideType.FEATURE, "stack", "Track habits", "Designed to help you succeed"),
        (3, SlideType.FEATURE, "split", "Set reminders", "Experience set reminders"),
        (4, SlideType.FEATURE, "stack", "See your progress", "Everything you need, simplified"),
        (5, SlideType.CLOSING, "closing", "Get MyApp Today", "No credit card required"),
    ]
    slides = tuple(
        Slide(
            id=slide_id,
            type=slide_type,
            text=SlideText(headline=headline, subheadline=subheadline),
            screenshot=SlideScreenshot(screenshot_id=f"shot-{slide_id}", original_filename=f"shot-{slide_id}.png"),
            template_id=template_id,
        )
        for slide_id, slide_type, template_id, headline, subheadline in plan
    )
    return Storyboard(app_name="MyApp", slides=slides)
