"""
SVG slide previews.

A lightweight wireframe of a slide (background, screenshot placeholder and
text) drawn from the same LayoutEngine geometry the raster renderer uses.
Clients can show it while the real PNG export is still pending.
"""

import logging
from typing import Optional, Tuple, Union

from .devices import DeviceTarget, get_device_target
from .layout import LayoutEngine, TextBlock
from .models import Slide
from .templates import get_template_by_id
from .theme import DEVICE_FRAME, FONT_FALLBACKS, FONT_FAMILY, FONT_WEIGHTS

logger = logging.getLogger(__name__)

_MARKUP_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape_markup(text: str) -> str:
    """
    Escape text for use inside SVG/XML markup.

    Examples:
        >>> escape_markup('Tom & "Jerry" <3')
        'Tom &amp; &quot;Jerry&quot; &lt;3'
    """
    for raw, escaped in _MARKUP_ESCAPES:  # "&" first
        text = text.replace(raw, escaped)
    return text


def _font_family() -> str:
    return ", ".join([FONT_FAMILY, *FONT_FALLBACKS])


def _text_element(block: TextBlock) -> str:
    # Nested <svg> clips the text to its block like the raster path does
    return (
        f'<svg x="{block.box.x}" y="{block.box.y}" width="{block.box.width}" height="{block.box.height}">'
        f'<text x="{block.anchor_x}" y="{block.baseline_y}" '
        f'font-family="{escape_markup(_font_family())}" font-size="{block.font_size}" '
        f'font-weight="{FONT_WEIGHTS[block.weight]}" fill="{block.color}" '
        f'text-anchor="{block.svg_anchor}">{escape_markup(block.text)}</text>'
        f'</svg>'
    )


def render_slide_svg(
    target: Union[DeviceTarget, str],
    slide: Slide,
    brand_color: Optional[str] = None,
    screenshot_size: Optional[Tuple[int, int]] = None,
    layout_engine: Optional[LayoutEngine] = None,
) -> str:
    """
    Render an SVG wireframe for one slide.

    Args:
        target: Device target, or its id
        slide: Slide to preview
        brand_color: Optional "#RRGGBB" background override
        screenshot_size: Natural screenshot size; the target's own aspect
            ratio is assumed when unknown
        layout_engine: Geometry calculator (default LayoutEngine())

    Returns:
        SVG document as a string
    """
    if isinstance(target, str):
        target = get_device_target(target)
    template = get_template_by_id(slide.template_id)
    engine = layout_engine or LayoutEngine()

    layout = engine.calculate_layout(
        target,
        template,
        headline=slide.text.headline,
        subheadline=slide.text.subheadline,
        screenshot_size=screenshot_size or target.size,
        brand_color=brand_color,
    )

    placement = layout.screenshot
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{layout.canvas_width}" '
        f'height="{layout.canvas_height}" viewBox="0 0 {layout.canvas_width} {layout.canvas_height}">',
        f'<rect width="100%" height="100%" fill="{layout.background_color}"/>',
    ]

    if placement.framed:
        outer = placement.outer_box
        parts.append(
            f'<rect x="{outer.x}" y="{outer.y}" width="{outer.width}" height="{outer.height}" '
            f'rx="{placement.corner_radius}" fill="{DEVICE_FRAME.bezel_color}"/>'
        )

    box = placement.box
    inner_radius = max(0, placement.corner_radius - placement.bezel) if placement.framed else 0
    parts.append(
        f'<rect x="{box.x}" y="{box.y}" width="{box.width}" height="{box.height}" '
        f'rx="{inner_radius}" fill="#e5e7eb" data-screenshot-id="{escape_markup(slide.screenshot.screenshot_id)}"/>'
    )

    parts.append(_text_element(layout.headline))
    parts.append(_text_element(layout.subheadline))
    parts.append("</svg>")

    logger.debug(f"SVG preview for slide {slide.id} on {target.id}")
    return "".join(parts)
