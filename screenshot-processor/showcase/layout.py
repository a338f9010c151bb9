"""
LayoutEngine - Slide geometry for screenshot rendering.

Handles:
1. Background color resolution (template color or brand override)
2. Screenshot size and position from template percentages
3. Safe text area from device safe margins
4. Headline / subheadline block placement and alignment

Pure arithmetic on dataclasses. The raster renderer and the SVG preview
both draw from the same SlideLayout, so they always agree.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .devices import DeviceTarget
from .templates import Template, TextAlign
from .theme import (
    DEVICE_FRAME, TEXT_BLOCK_GAP, TYPOGRAPHY,
    get_brand_color, get_responsive_font_size, is_valid_hex_color,
    round_half_up, text_colors_for_background,
)

logger = logging.getLogger(__name__)

# SVG-style text blocks are this many pixels taller than the font size
TEXT_BLOCK_PADDING = 10


@dataclass
class Box:
    """Axis-aligned rectangle in canvas pixels."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass
class ScreenshotPlacement:
    """Where the resized screenshot goes, plus its optional device frame."""
    box: Box
    framed: bool
    bezel: int = 0
    corner_radius: int = 0

    @property
    def outer_box(self) -> Box:
        """Screenshot plus bezel."""
        if not self.framed:
            return self.box
        return Box(
            x=self.box.x - self.bezel,
            y=self.box.y - self.bezel,
            width=self.box.width + self.bezel * 2,
            height=self.box.height + self.bezel * 2,
        )


@dataclass
class TextBlock:
    """A single line of text clipped to its block."""
    text: str
    box: Box
    font_size: int
    weight: str           # key into theme.FONT_WEIGHTS
    color: str
    align: TextAlign

    @property
    def anchor_x(self) -> int:
        """X of the text anchor, relative to the block's left edge."""
        if self.align == TextAlign.CENTER:
            return self.box.width // 2
        if self.align == TextAlign.RIGHT:
            return self.box.width
        return 0

    @property
    def baseline_y(self) -> int:
        """Baseline, relative to the block's top edge."""
        return self.font_size

    @property
    def svg_anchor(self) -> str:
        return {TextAlign.LEFT: "start", TextAlign.CENTER: "middle", TextAlign.RIGHT: "end"}[self.align]

    @property
    def pil_anchor(self) -> str:
        """Pillow anchor: horizontal l/m/r, vertical on the baseline."""
        return {TextAlign.LEFT: "ls", TextAlign.CENTER: "ms", TextAlign.RIGHT: "rs"}[self.align]


@dataclass
class SlideLayout:
    """Complete geometry for one slide on one device target."""
    canvas_width: int
    canvas_height: int
    background_color: str
    screenshot: ScreenshotPlacement
    text_area: Box
    headline: TextBlock
    subheadline: TextBlock
    template_id: str


class LayoutEngine:
    """
    Calculates slide geometry from a template and a device target.

    Features:
    - Screenshot always scaled to the template width, aspect preserved
    - Text kept inside the device safe margins
    - Fixed per-platform font scale, no runtime text measuring
    """

    def __init__(self, text_gap: int = TEXT_BLOCK_GAP):
        """
        Initialize layout engine.

        Args:
            text_gap: Pixels between headline block and subheadline block
        """
        self.text_gap = text_gap

    def resolve_background_color(self, template: Template, brand_color: Optional[str] = None) -> str:
        """
        Flat background color for a slide.

        Gradients degrade to their first stop. A valid brand color replaces
        either; an invalid one is ignored.
        """
        default = template.background.base_color
        if brand_color and not is_valid_hex_color(brand_color):
            logger.warning(f"Ignoring invalid brand color {brand_color!r}, using template color {default}")
        return get_brand_color(brand_color, default=default)

    def place_screenshot(
        self,
        target: DeviceTarget,
        template: Template,
        natural_size: Tuple[int, int],
    ) -> ScreenshotPlacement:
        """
        Size and position the screenshot.

        Args:
            target: Device target
            template: Slide template
            natural_size: (width, height) of the uploaded screenshot

        Returns:
            ScreenshotPlacement centered horizontally
        """
        natural_width, natural_height = natural_size
        if natural_width <= 0 or natural_height <= 0:
            raise ValueError(f"Invalid screenshot size: {natural_width}x{natural_height}")

        config = template.screenshot_position
        width = max(1, round_half_up(target.width * config.width / 100))
        height = max(1, round_half_up(natural_height * width / natural_width))
        x = round_half_up((target.width - width) / 2)
        y = round_half_up(target.height * config.vertical_position / 100)

        box = Box(x=x, y=y, width=width, height=height)

        if not config.apply_frame:
            return ScreenshotPlacement(box=box, framed=False)

        bezel = max(1, round_half_up(width * DEVICE_FRAME.bezel_ratio))
        corner_radius = round_half_up((width + bezel * 2) * DEVICE_FRAME.corner_ratio)
        return ScreenshotPlacement(box=box, framed=True, bezel=bezel, corner_radius=corner_radius)

    def calculate_text_area(self, target: DeviceTarget, template: Template) -> Box:
        """
        Text area inside the safe margins.

        Height is not bounded here; blocks set their own height.
        """
        config = template.text_position
        safe_left = target.safe_margin.left
        safe_right = target.width - target.safe_margin.right
        safe_width = safe_right - safe_left

        width = round_half_up(safe_width * config.max_width / 100)
        top = round_half_up(target.height * config.vertical_position / 100)

        if config.align == TextAlign.CENTER:
            left = round_half_up((target.width - width) / 2)
        elif config.align == TextAlign.RIGHT:
            left = safe_right - width
        else:
            left = safe_left

        return Box(x=left, y=top, width=width, height=0)

    def calculate_text_blocks(
        self,
        target: DeviceTarget,
        template: Template,
        headline: str,
        subheadline: str,
        background_color: str,
        area: Optional[Box] = None,
    ) -> Tuple[TextBlock, TextBlock]:
        """
        Headline and subheadline blocks, stacked with a fixed gap.

        Blocks are laid out inside `area`, computed from the template when
        not given.
        """
        area = area or self.calculate_text_area(target, template)
        align = template.text_position.align
        platform = target.platform.value
        palette = text_colors_for_background(background_color)

        headline_style = TYPOGRAPHY["headline"]
        subheadline_style = TYPOGRAPHY["subheadline"]
        headline_size = get_responsive_font_size(headline_style.font_size, platform, "headline")
        subheadline_size = get_responsive_font_size(subheadline_style.font_size, platform, "subheadline")

        headline_block = TextBlock(
            text=headline,
            box=Box(x=area.x, y=area.y, width=area.width, height=headline_size + TEXT_BLOCK_PADDING),
            font_size=headline_size,
            weight=headline_style.weight,
            color=palette["primary"],
            align=align,
        )

        subheadline_top = area.y + headline_size + self.text_gap
        subheadline_block = TextBlock(
            text=subheadline,
            box=Box(x=area.x, y=subheadline_top, width=area.width, height=subheadline_size + TEXT_BLOCK_PADDING),
            font_size=subheadline_size,
            weight=subheadline_style.weight,
            color=palette["secondary"],
            align=align,
        )

        return headline_block, subheadline_block

    def calculate_layout(
        self,
        target: DeviceTarget,
        template: Template,
        headline: str,
        subheadline: str,
        screenshot_size: Tuple[int, int],
        brand_color: Optional[str] = None,
    ) -> SlideLayout:
        """
        Calculate complete slide geometry.

        Args:
            target: Device target
            template: Template already chosen for the slide
            headline: Headline text
            subheadline: Subheadline text
            screenshot_size: Natural (width, height) of the screenshot
            brand_color: Optional "#RRGGBB" background override

        Returns:
            SlideLayout with all positioning information
        """
        background_color = self.resolve_background_color(template, brand_color)
        text_area = self.calculate_text_area(target, template)
        headline_block, subheadline_block = self.calculate_text_blocks(
            target, template, headline, subheadline, background_color, area=text_area
        )

        return SlideLayout(
            canvas_width=target.width,
            canvas_height=target.height,
            background_color=background_color,
            screenshot=self.place_screenshot(target, template, screenshot_size),
            text_area=text_area,
            headline=headline_block,
            subheadline=subheadline_block,
            template_id=template.id,
        )
