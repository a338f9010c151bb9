"""
ShowcaseGenerator - Main orchestrator for screenshot export.

Combines:
- ScreenshotRenderer: one PNG per (device target, slide)
- ExportPackager: ZIP with manifest

Renders run sequentially; every render finishes before packaging starts.
"""

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, List, Optional, Sequence

from .devices import DEVICE_TARGETS, DeviceTarget
from .errors import ExportError
from .exporter import ExportPackager
from .models import ExportResult, RenderedSlideImage, Slide, Storyboard
from .renderer import ScreenshotRenderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScreenshotUpload:
    """Uploaded screenshot bytes with the name the client sent."""
    id: str
    filename: str
    data: bytes


def resolve_screenshot(slide: Slide, uploads: Sequence[ScreenshotUpload]) -> ScreenshotUpload:
    """
    Find the bytes for a slide's screenshot reference.

    Match order: screenshot id, original filename, filename stem, then the
    first upload.

    Raises:
        ExportError: If there are no uploads at all
    """
    if not uploads:
        raise ExportError("No screenshots uploaded for export")

    ref = slide.screenshot
    by_id: Dict[str, ScreenshotUpload] = {u.id: u for u in uploads}
    if ref.screenshot_id in by_id:
        return by_id[ref.screenshot_id]

    for upload in uploads:
        if upload.filename == ref.original_filename:
            return upload

    wanted_stem = PurePath(ref.original_filename).stem
    for upload in uploads:
        if PurePath(upload.filename).stem in (ref.screenshot_id, wanted_stem):
            return upload

    logger.warning(
        f"Slide {slide.id}: screenshot '{ref.screenshot_id}' ({ref.original_filename}) not uploaded, "
        f"using '{uploads[0].filename}'"
    )
    return uploads[0]


class ShowcaseGenerator:
    """
    Main orchestrator for store screenshot export.

    Workflow:
    1. Match each slide to its uploaded screenshot
    2. Render every slide for every device target
    3. Package PNGs and manifest into a ZIP
    """

    def __init__(
        self,
        renderer: Optional[ScreenshotRenderer] = None,
        packager: Optional[ExportPackager] = None,
    ):
        self.renderer = renderer or ScreenshotRenderer()
        self.packager = packager or ExportPackager()

    def render_all(
        self,
        storyboard: Storyboard,
        uploads: Sequence[ScreenshotUpload],
        brand_color: Optional[str] = None,
        targets: Sequence[DeviceTarget] = DEVICE_TARGETS,
    ) -> List[RenderedSlideImage]:
        """Render targets x slides, target-major."""
        rendered: List[RenderedSlideImage] = []
        for target in targets:
            for slide in storyboard.slides:
                upload = resolve_screenshot(slide, uploads)
                image = self.renderer.render(target, slide, upload.data, brand_color)
                rendered.append(RenderedSlideImage(target=target, slide_id=slide.id, buffer=image.buffer))
        return rendered

    def export(
        self,
        storyboard: Storyboard,
        uploads: Sequence[ScreenshotUpload],
        brand_color: Optional[str] = None,
        targets: Sequence[DeviceTarget] = DEVICE_TARGETS,
    ) -> ExportResult:
        """
        Render and package a storyboard.

        Args:
            storyboard: Storyboard to export
            uploads: Screenshot bytes referenced by the slides
            brand_color: Optional "#RRGGBB" background override
            targets: Device targets (default: all)

        Returns:
            ExportResult with the ZIP buffer and manifest

        Raises:
            ExportError: No screenshots or packaging failure
            RenderingError: A slide failed to render
        """
        if not targets:
            raise ExportError("At least one device target is required")

        logger.info(
            f"Exporting '{storyboard.app_name}': {len(storyboard.slides)} slides x {len(targets)} targets"
        )

        rendered = self.render_all(storyboard, uploads, brand_color, targets)
        return self.packager.export_as_zip(storyboard, targets, rendered)
