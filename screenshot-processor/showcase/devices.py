"""
Device target catalog for App Store screenshot exports.

Exact pixel sizes required by App Store Connect:
- iPhone 6.7" Display (1290x2796)
- iPad Pro 12.9" Display (2064x2752)
"""

from enum import Enum
from typing import Tuple, List
from dataclasses import dataclass

from .constants import PLATFORM_TAGS
from .errors import DeviceTargetNotFoundError


class DevicePlatform(str, Enum):
    """Platforms an export can target."""

    IPHONE = "iPhone"
    IPAD = "iPad"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass(frozen=True)
class SafeMargin:
    """Inset from each canvas edge that text must stay inside."""
    top: int
    right: int
    bottom: int
    left: int


@dataclass(frozen=True)
class DeviceTarget:
    """One exact export size with its safe margins."""
    id: str
    platform: DevicePlatform
    display_name: str
    width: int
    height: int
    orientation: Orientation
    safe_margin: SafeMargin

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def tag(self) -> str:
        """Filename prefix, e.g. "iphone"."""
        return platform_tag(self.platform)


DEVICE_TARGETS: Tuple[DeviceTarget, ...] = (
    DeviceTarget(
        id="iphone-6.7",
        platform=DevicePlatform.IPHONE,
        display_name='iPhone 6.7" Display',
        width=1290, height=2796,
        orientation=Orientation.PORTRAIT,
        safe_margin=SafeMargin(top=120, right=60, bottom=120, left=60),
    ),
    DeviceTarget(
        id="ipad-12.9",
        platform=DevicePlatform.IPAD,
        display_name='iPad Pro 12.9" Display',
        width=2064, height=2752,
        orientation=Orientation.PORTRAIT,
        safe_margin=SafeMargin(top=160, right=80, bottom=160, left=80),
    ),
)


def platform_tag(platform) -> str:
    """Lowercase filename tag for a platform ("iPhone" -> "iphone")."""
    value = platform.value if isinstance(platform, DevicePlatform) else str(platform)
    try:
        return PLATFORM_TAGS[value]
    except KeyError:
        raise DeviceTargetNotFoundError(f"No filename tag for platform: {value}")


def get_device_target(target_id: str) -> DeviceTarget:
    """
    Get device target by id.

    Raises:
        DeviceTargetNotFoundError: If the id is not in the catalog
    """
    for target in DEVICE_TARGETS:
        if target.id == target_id:
            return target
    raise DeviceTargetNotFoundError(f"Device target not found: {target_id}")


def get_device_target_for_platform(platform) -> DeviceTarget:
    """
    Get the device target for a platform.

    There is one target per platform, so the first match wins.
    """
    value = platform.value if isinstance(platform, DevicePlatform) else str(platform)
    for target in DEVICE_TARGETS:
        if target.platform.value == value:
            return target
    raise DeviceTargetNotFoundError(f"No device target for platform: {value}")


def get_device_options() -> List[dict]:
    """Get list of device targets for client selection."""
    return [
        {
            "id": target.id,
            "platform": target.platform.value,
            "name": target.display_name,
            "dimensions": f"{target.width}x{target.height}",
            "orientation": target.orientation.value,
            "safe_margin": {
                "top": target.safe_margin.top,
                "right": target.safe_margin.right,
                "bottom": target.safe_margin.bottom,
                "left": target.safe_margin.left,
            },
        }
        for target in DEVICE_TARGETS
    ]
