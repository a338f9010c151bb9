"""
Domain constants and input validation.

Fixed business rules for storyboards, copy limits and export naming.
"""

from typing import Sequence

from .errors import StoryboardValidationError


# Locales. Only en-US for now; the tuple keeps room for more.
SUPPORTED_LOCALES = ("en-US",)
DEFAULT_LOCALE = "en-US"

# App Store previews are exactly five slides.
SLIDES_PER_STORYBOARD = 5

VALUE_BULLETS_MIN = 3
VALUE_BULLETS_MAX = 6

SCREENSHOTS_MIN = 1
SCREENSHOTS_MAX = 10

HEADLINE_MAX_LENGTH = 32
SUBHEADLINE_MAX_LENGTH = 60

APP_NAME_MAX_LENGTH = 50

GENERATOR_VERSION = "1.0"
MANIFEST_FILENAME = "manifest.json"

# Filename prefix per device platform
PLATFORM_TAGS = {
    "iPhone": "iphone",
    "iPad": "ipad",
}


def is_valid_locale(locale: str) -> bool:
    return locale in SUPPORTED_LOCALES


def generate_filename(platform: str, slide_number: int) -> str:
    """
    Build the deterministic export filename for one slide.

    Args:
        platform: Device platform ("iPhone" or "iPad")
        slide_number: 1-based slide number

    Returns:
        Filename like "iphone_01.png"

    Examples:
        >>> generate_filename("iPad", 3)
        'ipad_03.png'
    """
    if slide_number < 1 or slide_number > SLIDES_PER_STORYBOARD:
        raise StoryboardValidationError(
            f"Invalid slide number: {slide_number}. Must be 1-{SLIDES_PER_STORYBOARD}"
        )

    tag = PLATFORM_TAGS.get(platform)
    if tag is None:
        raise StoryboardValidationError(f"Unknown platform: {platform}")

    return f"{tag}_{slide_number:02d}.png"


def validate_storyboard_input(
    app_name: str,
    value_bullets: Sequence[str],
    screenshot_count: int,
    locale: str = DEFAULT_LOCALE,
) -> None:
    """
    Validate storyboard input constraints.

    Raises:
        StoryboardValidationError: With a message describing the first problem
    """
    if not app_name or not app_name.strip():
        raise StoryboardValidationError("App name is required")
    if len(app_name) > APP_NAME_MAX_LENGTH:
        raise StoryboardValidationError(
            f"App name must be {APP_NAME_MAX_LENGTH} characters or less"
        )

    if len(value_bullets) < VALUE_BULLETS_MIN:
        raise StoryboardValidationError(
            f"At least {VALUE_BULLETS_MIN} value bullets are required"
        )
    if len(value_bullets) > VALUE_BULLETS_MAX:
        raise StoryboardValidationError(
            f"Maximum {VALUE_BULLETS_MAX} value bullets allowed"
        )
    for index, bullet in enumerate(value_bullets):
        if not bullet or not bullet.strip():
            raise StoryboardValidationError(f"Value bullet #{index + 1} is empty")

    if screenshot_count < SCREENSHOTS_MIN:
        raise StoryboardValidationError(
            f"At least {SCREENSHOTS_MIN} screenshot is required"
        )
    if screenshot_count > SCREENSHOTS_MAX:
        raise StoryboardValidationError(
            f"Maximum {SCREENSHOTS_MAX} screenshots allowed"
        )

    if not is_valid_locale(locale):
        raise StoryboardValidationError(
            f"Unsupported locale: {locale}. Supported: {', '.join(SUPPORTED_LOCALES)}"
        )
