"""
Exception hierarchy for the screenshot studio.

Configuration and invariant errors are defects and should surface loudly.
Validation and lookup errors describe bad caller input and carry enough
detail for the client to correct it.
"""

from typing import Optional, Dict, Any


class ShowcaseError(Exception):
    """Base exception for all studio errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self):
        if self.context:
            return f"{self.message} Context: {self.context}"
        return self.message


# === Configuration ===

class ConfigurationError(ShowcaseError):
    """Static catalog is inconsistent. Must prevent the service from starting."""
    pass


# === Catalog lookups ===

class CatalogLookupError(ShowcaseError, LookupError):
    """An id does not exist in one of the fixed catalogs."""
    pass


class TemplateNotFoundError(CatalogLookupError):
    """Template id is not in the template catalog."""
    pass


class DeviceTargetNotFoundError(CatalogLookupError):
    """Device target id or platform is not in the device catalog."""
    pass


# === Storyboard ===

class StoryboardValidationError(ShowcaseError, ValueError):
    """Caller input rejected before any storyboard is built or changed."""
    pass


class StoryboardInvariantError(ShowcaseError):
    """A storyboard broke the five-slide invariant. Indicates a bug."""
    pass


# === Rendering & export ===

class RenderingError(ShowcaseError):
    """A slide could not be rendered."""
    pass


class ScreenshotDecodeError(RenderingError):
    """Screenshot bytes are not a readable image."""
    pass


class DimensionMismatchError(RenderingError):
    """Rendered output does not match the device target's exact size."""
    pass


class ExportError(ShowcaseError):
    """Rendered images could not be packaged."""
    pass


# === Copy generation ===

class CopyGenerationError(ShowcaseError):
    """The copy generator failed or broke its length contract."""
    pass
