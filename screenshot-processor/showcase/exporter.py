"""
ExportPackager - ZIP packaging for rendered slides.

Archive layout:
    iphone_01.png ... iphone_05.png
    ipad_01.png ... ipad_05.png
    manifest.json   (always the last entry)
"""

import io
import logging
import zipfile
from typing import List, Optional, Sequence

from .constants import GENERATOR_VERSION, MANIFEST_FILENAME, generate_filename
from .devices import DeviceTarget
from .errors import ExportError
from .models import (
    ExportManifest, ExportResult, ManifestSlide, ManifestTarget,
    RenderedSlideImage, Storyboard, utc_timestamp,
)

logger = logging.getLogger(__name__)


def build_manifest(
    storyboard: Storyboard,
    targets: Sequence[DeviceTarget],
    rendered_images: Sequence[RenderedSlideImage],
    exported_at: Optional[str] = None,
) -> ExportManifest:
    """
    Summarize an export.

    Target file counts come from the rendered images, templates are listed
    once each in first-appearance order, slides in id order.
    """
    templates_used: List[str] = []
    for slide in storyboard.slides:
        if slide.template_id not in templates_used:
            templates_used.append(slide.template_id)

    return ExportManifest(
        app_name=storyboard.app_name,
        exported_at=exported_at or utc_timestamp(),
        locale=storyboard.locale,
        targets=[
            ManifestTarget(
                platform=target.platform.value,
                width=target.width,
                height=target.height,
                file_count=sum(1 for image in rendered_images if image.target.id == target.id),
            )
            for target in targets
        ],
        templates_used=templates_used,
        slides=[
            ManifestSlide(
                slide_id=slide.id,
                headline=slide.text.headline,
                subheadline=slide.text.subheadline,
                screenshot_id=slide.screenshot.screenshot_id,
                template_id=slide.template_id,
            )
            for slide in sorted(storyboard.slides, key=lambda s: s.id)
        ],
        generator_version=GENERATOR_VERSION,
    )


class ExportPackager:
    """Writes rendered images and the manifest into one ZIP buffer."""

    def __init__(self, compresslevel: int = 9):
        self.compresslevel = compresslevel

    def export_as_zip(
        self,
        storyboard: Storyboard,
        targets: Sequence[DeviceTarget],
        rendered_images: Sequence[RenderedSlideImage],
    ) -> ExportResult:
        """
        Package rendered images as a ZIP.

        Args:
            storyboard: Storyboard the images were rendered from
            targets: Device targets included in the export
            rendered_images: One entry per (target, slide)

        Returns:
            ExportResult with zip bytes, file count (images + manifest),
            size in bytes and the manifest

        Raises:
            ExportError: Duplicate filenames or a bad slide id
        """
        if not rendered_images:
            raise ExportError("Nothing to export: no rendered images")

        manifest = build_manifest(storyboard, targets, rendered_images)
        seen = set()

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=self.compresslevel) as archive:
            for image in rendered_images:
                try:
                    filename = generate_filename(image.target.platform.value, image.slide_id)
                except ValueError as e:
                    raise ExportError(str(e), context={"target": image.target.id, "slide_id": image.slide_id}) from e
                if filename in seen:
                    raise ExportError(f"Duplicate export entry: {filename}")
                seen.add(filename)
                archive.writestr(filename, image.buffer)

            archive.writestr(MANIFEST_FILENAME, manifest.to_json())

        data = buffer.getvalue()
        file_count = len(rendered_images) + 1

        logger.info(f"Packaged {file_count} files for '{storyboard.app_name}' ({len(data)} bytes)")

        return ExportResult(
            zip_buffer=data,
            file_count=file_count,
            size_bytes=len(data),
            manifest=manifest,
        )
