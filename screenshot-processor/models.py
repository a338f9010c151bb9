from pydantic import BaseModel, Field
from typing import Optional, List

from showcase.constants import DEFAULT_LOCALE
from showcase.models import Storyboard


class StoryboardResponse(BaseModel):
    """Assembled storyboard plus screenshot fallback warnings"""
    storyboard: Storyboard
    warnings: List[str] = Field(default_factory=list)
    copy_generator: str


class UpdateTextRequest(BaseModel):
    """Edit one slide's copy. Omitted fields keep their value."""
    storyboard: Storyboard
    slide_id: int
    headline: Optional[str] = None
    subheadline: Optional[str] = None


class UpdateScreenshotRequest(BaseModel):
    """Point one slide at a different uploaded screenshot"""
    storyboard: Storyboard
    slide_id: int
    screenshot_id: str
    filename: str


class PreviewRequest(BaseModel):
    """SVG wireframe for one slide on one device"""
    storyboard: Storyboard
    slide_id: int
    target_id: str = "iphone-6.7"
    brand_color: Optional[str] = None


class PreviewResponse(BaseModel):
    slide_id: int
    target_id: str
    width: int
    height: int
    svg: str


# ============== Options ==============

class OptionsResponse(BaseModel):
    """Device targets, templates and input limits for client forms"""
    devices: List[dict]
    templates: List[dict]
    locales: List[str] = Field(default_factory=lambda: [DEFAULT_LOCALE])
    limits: dict
