"""
Template registry.

Templates are data: text position, screenshot position and background.
The renderer reads them and never branches on template id, so new layouts
are added here without touching rendering code.
"""

import logging
from enum import Enum
from dataclasses import dataclass
from typing import Tuple, List, Optional

from .errors import ConfigurationError, TemplateNotFoundError
from .theme import COLORS, BACKGROUND_COLORS

logger = logging.getLogger(__name__)


class SlideType(str, Enum):
    HERO = "hero"          # slide 1: core promise
    FEATURE = "feature"    # slides 2-4: value bullets
    CLOSING = "closing"    # slide 5: call to action


class LayoutPrimitive(str, Enum):
    STACK = "stack"    # text above screenshot
    SPLIT = "split"    # asymmetric, left-aligned text
    HERO = "hero"      # large text over a full-bleed background


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class BackgroundType(str, Enum):
    SOLID = "solid"
    GRADIENT = "gradient"


@dataclass(frozen=True)
class TextPosition:
    align: TextAlign
    vertical_position: float   # % of canvas height from top
    max_width: float           # % of safe-area width


@dataclass(frozen=True)
class ScreenshotPosition:
    vertical_position: float   # % of canvas height from top
    width: float               # % of canvas width
    apply_frame: bool


@dataclass(frozen=True)
class BackgroundSpec:
    type: BackgroundType
    colors: Tuple[str, ...]

    @property
    def base_color(self) -> str:
        """Flat fill color. Gradients use their first stop."""
        return self.colors[0]


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    layout: LayoutPrimitive
    applicable_types: Tuple[SlideType, ...]
    text_position: TextPosition
    screenshot_position: ScreenshotPosition
    background: BackgroundSpec

    def applies_to(self, slide_type) -> bool:
        return SlideType(slide_type) in self.applicable_types


HERO_TEMPLATE = Template(
    id="hero",
    name="Hero Layout",
    layout=LayoutPrimitive.HERO,
    applicable_types=(SlideType.HERO,),
    text_position=TextPosition(align=TextAlign.CENTER, vertical_position=20, max_width=85),
    screenshot_position=ScreenshotPosition(vertical_position=45, width=70, apply_frame=True),
    background=BackgroundSpec(type=BackgroundType.GRADIENT, colors=BACKGROUND_COLORS["gradient"]["primary"]),
)

STACK_TEMPLATE = Template(
    id="stack",
    name="Stack Layout",
    layout=LayoutPrimitive.STACK,
    applicable_types=(SlideType.FEATURE,),
    text_position=TextPosition(align=TextAlign.CENTER, vertical_position=12, max_width=90),
    screenshot_position=ScreenshotPosition(vertical_position=35, width=65, apply_frame=True),
    background=BackgroundSpec(type=BackgroundType.SOLID, colors=(BACKGROUND_COLORS["solid"]["light"],)),
)

SPLIT_TEMPLATE = Template(
    id="split",
    name="Split Layout",
    layout=LayoutPrimitive.SPLIT,
    applicable_types=(SlideType.FEATURE,),
    text_position=TextPosition(align=TextAlign.LEFT, vertical_position=30, max_width=80),
    screenshot_position=ScreenshotPosition(vertical_position=25, width=45, apply_frame=True),
    background=BackgroundSpec(type=BackgroundType.SOLID, colors=(BACKGROUND_COLORS["solid"]["light"],)),
)

CLOSING_TEMPLATE = Template(
    id="closing",
    name="Closing Layout",
    layout=LayoutPrimitive.HERO,
    applicable_types=(SlideType.CLOSING,),
    text_position=TextPosition(align=TextAlign.CENTER, vertical_position=35, max_width=85),
    screenshot_position=ScreenshotPosition(vertical_position=70, width=50, apply_frame=False),
    background=BackgroundSpec(
        type=BackgroundType.GRADIENT,
        colors=(COLORS["primary"][700], COLORS["primary"][500]),
    ),
)

# Order matters: lookups return the first match
TEMPLATES: Tuple[Template, ...] = (
    HERO_TEMPLATE,
    STACK_TEMPLATE,
    SPLIT_TEMPLATE,
    CLOSING_TEMPLATE,
)

DEFAULT_TEMPLATE_BY_TYPE = {
    SlideType.HERO: "hero",
    SlideType.FEATURE: "stack",
    SlideType.CLOSING: "closing",
}


def get_template_by_id(template_id: str) -> Template:
    """
    Get template by id.

    Raises:
        TemplateNotFoundError: If the id is not in the catalog
    """
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    raise TemplateNotFoundError(f"Template not found: {template_id}")


def get_templates_for_slide_type(slide_type) -> List[Template]:
    """All templates applicable to a slide type, in catalog order."""
    slide_type = SlideType(slide_type)
    return [t for t in TEMPLATES if slide_type in t.applicable_types]


def get_default_template(slide_type) -> Template:
    return get_template_by_id(DEFAULT_TEMPLATE_BY_TYPE[SlideType(slide_type)])


def select_template(slide_type, template_id: Optional[str] = None) -> Template:
    """
    Select the template for a slide, honoring an optional override.

    Args:
        slide_type: Slide type the template must apply to
        template_id: Requested template id, if any

    Returns:
        The requested template when it exists and applies to the slide
        type, otherwise the slide type's default
    """
    slide_type = SlideType(slide_type)

    if template_id:
        try:
            template = get_template_by_id(template_id)
        except TemplateNotFoundError:
            logger.warning(f"Template '{template_id}' not found. Using default for '{slide_type.value}'.")
        else:
            if template.applies_to(slide_type):
                return template
            logger.warning(
                f"Template '{template_id}' not applicable for slide type '{slide_type.value}'. Using default."
            )

    return get_default_template(slide_type)


def validate_template_configuration(
    templates: Tuple[Template, ...] = TEMPLATES,
    defaults: Optional[dict] = None,
) -> None:
    """
    Check that every slide type has a template and an existing default.

    Called at startup. Arguments exist so tests can check broken catalogs.

    Raises:
        ConfigurationError: If the catalog is inconsistent
    """
    defaults = DEFAULT_TEMPLATE_BY_TYPE if defaults is None else defaults
    known_ids = {t.id for t in templates}

    for slide_type in SlideType:
        if not any(slide_type in t.applicable_types for t in templates):
            raise ConfigurationError(f"No templates available for slide type: {slide_type.value}")

        default_id = defaults.get(slide_type)
        if default_id not in known_ids:
            raise ConfigurationError(
                f"Default template '{default_id}' for slide type '{slide_type.value}' not found"
            )

    logger.info(f"Template configuration valid: {len(templates)} templates")


def get_template_options() -> List[dict]:
    """Get list of templates for client selection."""
    return [
        {
            "id": t.id,
            "name": t.name,
            "layout": t.layout.value,
            "applicable_types": [s.value for s in t.applicable_types],
            "background": {"type": t.background.type.value, "colors": list(t.background.colors)},
        }
        for t in TEMPLATES
    ]
