# Store Screenshot Module
# Deterministic composition: templates and geometry in code, Pillow for pixels
# Storyboard assembly lives in showcase.storyboard (depends on copywriter)

from .devices import DEVICE_TARGETS, DeviceTarget, DevicePlatform, get_device_target, get_device_options
from .templates import TEMPLATES, SlideType, select_template, validate_template_configuration, get_template_options
from .models import Storyboard, Slide, SlideText, RenderedImage, ExportManifest, ExportResult
from .layout import LayoutEngine
from .renderer import ScreenshotRenderer
from .exporter import ExportPackager, build_manifest
from .pipeline import ShowcaseGenerator, ScreenshotUpload
from .preview import render_slide_svg, escape_markup

__all__ = [
    "DEVICE_TARGETS",
    "DeviceTarget",
    "DevicePlatform",
    "get_device_target",
    "get_device_options",
    "TEMPLATES",
    "SlideType",
    "select_template",
    "validate_template_configuration",
    "get_template_options",
    "Storyboard",
    "Slide",
    "SlideText",
    "RenderedImage",
    "ExportManifest",
    "ExportResult",
    "LayoutEngine",
    "ScreenshotRenderer",
    "ExportPackager",
    "build_manifest",
    "ShowcaseGenerator",
    "ScreenshotUpload",
    "render_slide_svg",
    "escape_markup",
]
