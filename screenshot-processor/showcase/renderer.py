"""
ScreenshotRenderer - Pillow-based slide composition.

Handles:
1. Decoding the uploaded screenshot
2. Creating the canvas with the slide background
3. Resizing and placing the screenshot (optionally inside a device frame)
4. Drawing headline and subheadline blocks
5. Encoding PNG and verifying exact output dimensions

Geometry comes from LayoutEngine; this module only draws.
"""

import io
import logging
import math
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont, UnidentifiedImageError

from .devices import DeviceTarget, get_device_target
from .errors import DimensionMismatchError, ScreenshotDecodeError
from .layout import LayoutEngine, ScreenshotPlacement, SlideLayout, TextBlock
from .models import RenderedImage, RenderMetadata, Slide
from .templates import get_template_by_id
from .theme import DEVICE_FRAME, FONT_FILES, round_half_up

logger = logging.getLogger(__name__)

# Tried in order when the bundled Inter files are missing
SYSTEM_FONTS = {
    "bold": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
        "C:\\Windows\\Fonts\\arialbd.ttf",
    ],
    "regular": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
        "C:\\Windows\\Fonts\\arial.ttf",
    ],
}


class ScreenshotRenderer:
    """
    Renders store screenshots using Pillow.

    Screenshots are never altered beyond resizing and masking; the input
    bytes are not kept after render() returns.
    """

    def __init__(
        self,
        fonts_dir: Optional[Union[str, Path]] = None,
        compress_level: int = 9,
        layout_engine: Optional[LayoutEngine] = None,
    ):
        """
        Initialize renderer.

        Args:
            fonts_dir: Directory holding the Inter font files
            compress_level: PNG zlib level, 0-9
            layout_engine: Geometry calculator (default LayoutEngine())
        """
        self.fonts_dir = Path(fonts_dir) if fonts_dir else None
        self.compress_level = compress_level
        self.layout_engine = layout_engine or LayoutEngine()
        self._fonts: Dict[Tuple[str, int], ImageFont.ImageFont] = {}

    def _get_font(self, weight: str, size: int) -> ImageFont.ImageFont:
        """Get font for a weight and pixel size, cached per instance."""
        key = (weight, size)
        if key in self._fonts:
            return self._fonts[key]

        candidates = []
        if self.fonts_dir:
            candidates.append(str(self.fonts_dir / FONT_FILES.get(weight, FONT_FILES["regular"])))
        system_key = "bold" if weight in ("bold", "semibold") else "regular"
        candidates.extend(SYSTEM_FONTS[system_key])

        font = None
        for path in candidates:
            try:
                font = ImageFont.truetype(path, size)
                break
            except OSError:
                continue

        if font is None:
            logger.warning(f"No TrueType font found for weight '{weight}', using Pillow default")
            font = ImageFont.load_default(size=size)

        self._fonts[key] = font
        return font

    def decode_screenshot(self, data: bytes) -> Image.Image:
        """
        Decode uploaded screenshot bytes.

        Raises:
            ScreenshotDecodeError: If the bytes are not a readable image
        """
        if not data:
            raise ScreenshotDecodeError("Screenshot is empty")
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
            raise ScreenshotDecodeError(
                "Screenshot could not be decoded",
                context={"reason": str(e), "size": len(data)},
            ) from e
        return image.convert("RGBA")

    def create_background(self, layout: SlideLayout) -> Image.Image:
        """Flat canvas in the slide background color."""
        return Image.new("RGB", (layout.canvas_width, layout.canvas_height), layout.background_color)

    def resize_screenshot(
        self,
        screenshot: Image.Image,
        placement: ScreenshotPlacement,
        canvas_height: Optional[int] = None,
    ) -> Image.Image:
        """
        Resize to the placement box. Enlarges when the upload is smaller.

        With canvas_height set, only the source rows that land on the canvas
        are resized, so a tall capture never becomes an oversized image.
        """
        box = placement.box
        visible = box.height if canvas_height is None else min(box.height, canvas_height - box.y)

        if visible < box.height:
            rows = min(screenshot.height, math.ceil(visible * screenshot.width / box.width))
            scaled = max(visible, round_half_up(rows * box.width / screenshot.width))
            top = screenshot.crop((0, 0, screenshot.width, rows))
            return top.resize((box.width, scaled), Image.Resampling.LANCZOS).crop((0, 0, box.width, visible))

        size = (box.width, box.height)
        if screenshot.size == size:
            return screenshot
        return screenshot.resize(size, Image.Resampling.LANCZOS)

    def apply_device_frame(
        self,
        canvas: Image.Image,
        screenshot: Image.Image,
        placement: ScreenshotPlacement,
    ) -> Image.Image:
        """
        Draw shadow and bezel, then paste the screenshot with rounded corners.

        Shapes running past the bottom of the canvas are cut there, with no
        rounded corners at the cut.

        Args:
            canvas: RGB canvas, modified in place
            screenshot: Resized RGBA screenshot, possibly cut at the canvas edge
            placement: Framed placement from LayoutEngine

        Returns:
            The canvas
        """
        outer = placement.outer_box
        style = DEVICE_FRAME
        radius = placement.corner_radius

        # Shadow: rounded rect blurred on its own padded layer
        pad = style.shadow_blur * 3
        shadow_top = outer.y - pad + style.shadow_offset
        shadow_height = min(outer.height + pad * 2, canvas.height - shadow_top)
        shadow_bottom = min(pad + outer.height - 1, shadow_height + radius)
        if shadow_height > 0 and shadow_bottom >= pad:
            shadow = Image.new("RGBA", (outer.width + pad * 2, shadow_height), (0, 0, 0, 0))
            ImageDraw.Draw(shadow).rounded_rectangle(
                [pad, pad, pad + outer.width - 1, shadow_bottom],
                radius=radius,
                fill=style.shadow_color,
            )
            shadow = shadow.filter(ImageFilter.GaussianBlur(style.shadow_blur))
            canvas.paste(shadow, (outer.x - pad, shadow_top), shadow)

        # Bezel
        ImageDraw.Draw(canvas).rounded_rectangle(
            [outer.x, outer.y, outer.right - 1, min(outer.bottom - 1, canvas.height + radius)],
            radius=radius,
            fill=style.bezel_color,
        )

        # Screen with inner rounded corners
        inner_radius = max(0, radius - placement.bezel)
        bottom = screenshot.height - 1
        if screenshot.height < placement.box.height:
            bottom += inner_radius
        mask = Image.new("L", screenshot.size, 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            [0, 0, screenshot.width - 1, bottom],
            radius=inner_radius,
            fill=255,
        )
        mask = ImageChops.multiply(mask, screenshot.getchannel("A"))
        canvas.paste(screenshot, (placement.box.x, placement.box.y), mask)
        return canvas

    def place_screenshot(
        self,
        canvas: Image.Image,
        screenshot: Image.Image,
        placement: ScreenshotPlacement,
    ) -> Image.Image:
        """Paste the screenshot, framed or bare. Anything past the canvas is clipped."""
        if placement.box.y >= canvas.height:
            return canvas
        resized = self.resize_screenshot(screenshot, placement, canvas.height)
        if placement.framed:
            return self.apply_device_frame(canvas, resized, placement)
        canvas.paste(resized, (placement.box.x, placement.box.y), resized)
        return canvas

    def render_text_block(self, canvas: Image.Image, block: TextBlock) -> Image.Image:
        """
        Draw one single-line text block.

        The text is drawn on a transparent layer the size of the block, so
        text wider than the block is clipped at its edges.
        """
        if not block.text:
            return canvas

        font = self._get_font(block.weight, block.font_size)
        layer = Image.new("RGBA", (block.box.width, block.box.height), (0, 0, 0, 0))
        ImageDraw.Draw(layer).text(
            (block.anchor_x, block.baseline_y),
            block.text,
            font=font,
            fill=block.color,
            anchor=block.pil_anchor,
        )
        canvas.paste(layer, (block.box.x, block.box.y), layer)
        return canvas

    def compose(self, layout: SlideLayout, screenshot: Image.Image) -> Image.Image:
        """Draw a complete slide: background, screenshot, then text on top."""
        canvas = self.create_background(layout)
        canvas = self.place_screenshot(canvas, screenshot, layout.screenshot)
        canvas = self.render_text_block(canvas, layout.headline)
        canvas = self.render_text_block(canvas, layout.subheadline)
        return canvas

    def encode_png(self, image: Image.Image, expected_size: Tuple[int, int]) -> bytes:
        """
        Encode PNG and check the encoded size.

        Raises:
            DimensionMismatchError: If the decoded PNG is not expected_size
        """
        buffer = io.BytesIO()
        image.save(buffer, format="PNG", compress_level=self.compress_level)
        data = buffer.getvalue()

        with Image.open(io.BytesIO(data)) as encoded:
            actual_size = encoded.size

        if actual_size != tuple(expected_size):
            raise DimensionMismatchError(
                f"Dimension mismatch: expected {expected_size[0]}x{expected_size[1]}, "
                f"got {actual_size[0]}x{actual_size[1]}",
                context={"expected": list(expected_size), "actual": list(actual_size)},
            )
        return data

    def render(
        self,
        target: Union[DeviceTarget, str],
        slide: Slide,
        screenshot_bytes: bytes,
        brand_color: Optional[str] = None,
    ) -> RenderedImage:
        """
        Render one slide for one device target.

        Args:
            target: Device target, or its id
            slide: Slide with text and template id
            screenshot_bytes: Encoded screenshot image
            brand_color: Optional "#RRGGBB" background override

        Returns:
            RenderedImage with PNG bytes of exactly target.width x target.height

        Raises:
            TemplateNotFoundError: Unknown slide.template_id
            DeviceTargetNotFoundError: Unknown target id
            ScreenshotDecodeError: Unreadable screenshot bytes
            DimensionMismatchError: Encoded PNG has the wrong size
        """
        if isinstance(target, str):
            target = get_device_target(target)
        template = get_template_by_id(slide.template_id)
        screenshot = self.decode_screenshot(screenshot_bytes)

        layout = self.layout_engine.calculate_layout(
            target,
            template,
            headline=slide.text.headline,
            subheadline=slide.text.subheadline,
            screenshot_size=screenshot.size,
            brand_color=brand_color,
        )

        canvas = self.compose(layout, screenshot)
        data = self.encode_png(canvas, target.size)

        logger.info(
            f"Rendered slide {slide.id} ({template.id}) for {target.id}: "
            f"{target.width}x{target.height}, {len(data)} bytes"
        )

        return RenderedImage(
            buffer=data,
            width=target.width,
            height=target.height,
            metadata=RenderMetadata(target_id=target.id, slide_id=slide.id, template_id=template.id),
        )
