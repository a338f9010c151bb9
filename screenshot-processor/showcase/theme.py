"""
Theme tokens shared by the renderer and any client UI.

Fixed typography, color, spacing and margin values keep output
deterministic. A user brand color may replace the background color, nothing
else.
"""

import re
from dataclasses import dataclass
from typing import Tuple, Optional


# ============== Typography ==============

FONT_FAMILY = "Inter"
FONT_FALLBACKS = ("system-ui", "-apple-system", "sans-serif")

# Bundled font files, looked up inside the configured fonts directory
FONT_FILES = {
    "regular": "Inter-Regular.ttf",
    "medium": "Inter-Medium.ttf",
    "semibold": "Inter-SemiBold.ttf",
    "bold": "Inter-Bold.ttf",
}

FONT_WEIGHTS = {
    "regular": 400,
    "medium": 500,
    "semibold": 600,
    "bold": 700,
}


@dataclass(frozen=True)
class TypographyStyle:
    font_size: int
    line_height: int
    weight: str
    letter_spacing: float = 0.0

    @property
    def font_weight(self) -> int:
        return FONT_WEIGHTS[self.weight]


TYPOGRAPHY = {
    "headline": TypographyStyle(font_size=64, line_height=72, weight="bold", letter_spacing=-0.02),
    "subheadline": TypographyStyle(font_size=32, line_height=40, weight="medium", letter_spacing=-0.01),
    "app_name": TypographyStyle(font_size=28, line_height=36, weight="semibold"),
    "body": TypographyStyle(font_size=16, line_height=24, weight="regular"),
    "caption": TypographyStyle(font_size=14, line_height=20, weight="regular"),
}

# iPhone canvases are narrower, so text renders slightly smaller
TYPOGRAPHY_RESPONSIVE = {
    "iPhone": {"headline": 0.85, "subheadline": 0.9},
    "iPad": {"headline": 1.0, "subheadline": 1.0},
}

# Pixels between the headline block and the subheadline block
TEXT_BLOCK_GAP = 20


# ============== Colors ==============

COLORS = {
    "primary": {
        50: "#f0f9ff",
        100: "#e0f2fe",
        200: "#bae6fd",
        300: "#7dd3fc",
        400: "#38bdf8",
        500: "#0ea5e9",  # default brand color
        600: "#0284c7",
        700: "#0369a1",
        800: "#075985",
        900: "#0c4a6e",
    },
    "gray": {
        50: "#f9fafb",
        100: "#f3f4f6",
        200: "#e5e7eb",
        300: "#d1d5db",
        400: "#9ca3af",
        500: "#6b7280",
        600: "#4b5563",
        700: "#374151",
        800: "#1f2937",
        900: "#111827",
    },
    "white": "#ffffff",
    "black": "#000000",
    "success": "#10b981",
    "warning": "#f59e0b",
    "error": "#ef4444",
}

DEFAULT_BRAND_COLOR = COLORS["primary"][500]

# "light" = text for light backgrounds, "dark" = text for dark backgrounds
TEXT_COLORS = {
    "light": {
        "primary": COLORS["gray"][900],
        "secondary": COLORS["gray"][600],
        "tertiary": COLORS["gray"][400],
    },
    "dark": {
        "primary": COLORS["white"],
        "secondary": COLORS["gray"][200],
        "tertiary": COLORS["gray"][400],
    },
}

BACKGROUND_COLORS = {
    "solid": {
        "light": COLORS["white"],
        "dark": COLORS["gray"][900],
        "primary": COLORS["primary"][500],
    },
    "gradient": {
        "primary": (COLORS["primary"][600], COLORS["primary"][400]),
        "sunset": ("#ff6b6b", "#feca57"),
        "ocean": ("#667eea", "#764ba2"),
        "forest": ("#134e5e", "#71b280"),
    },
}


# ============== Spacing & shapes ==============

SPACING = {0: 0, 1: 4, 2: 8, 3: 12, 4: 16, 5: 20, 6: 24, 8: 32, 10: 40, 12: 48, 16: 64, 20: 80, 24: 96, 32: 128}

SAFE_MARGINS = {
    "iPhone": {"top": 120, "right": 60, "bottom": 120, "left": 60},
    "iPad": {"top": 160, "right": 80, "bottom": 160, "left": 80},
}

BORDER_RADIUS = {"none": 0, "sm": 4, "md": 8, "lg": 12, "xl": 16, "2xl": 24, "3xl": 32, "full": 9999}


@dataclass(frozen=True)
class DeviceFrameStyle:
    """Bezel and drop shadow drawn around framed screenshots."""
    bezel_color: str = COLORS["gray"][900]
    bezel_ratio: float = 0.025       # bezel width as a share of screenshot width
    corner_ratio: float = 0.08       # outer corner radius as a share of framed width
    shadow_color: Tuple[int, int, int, int] = (0, 0, 0, 64)
    shadow_offset: int = 25
    shadow_blur: int = 25


DEVICE_FRAME = DeviceFrameStyle()


# ============== Helpers ==============

_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def round_half_up(value: float) -> int:
    """Round .5 away from zero so pixel math matches across platforms."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def get_responsive_font_size(base_size: int, platform: str, text_type: str = "headline") -> int:
    """
    Scale a base font size for a device platform.

    Examples:
        >>> get_responsive_font_size(64, "iPhone", "headline")
        54
    """
    scale = TYPOGRAPHY_RESPONSIVE[platform][text_type]
    return round_half_up(base_size * scale)


def is_valid_hex_color(value: Optional[str]) -> bool:
    """Only full six-digit "#RRGGBB" values are accepted."""
    return bool(value) and bool(_HEX_COLOR_RE.match(value))


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """Parse "#RRGGBB" into an RGB tuple."""
    if not is_valid_hex_color(value):
        raise ValueError(f"Invalid hex color: {value}")
    value = value.lstrip("#")
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


def get_brand_color(user_color: Optional[str], default: str = DEFAULT_BRAND_COLOR) -> str:
    """Return the user color when it is valid hex, otherwise the default."""
    if user_color and is_valid_hex_color(user_color):
        return user_color
    return default


def is_light_color(value: str) -> bool:
    """Perceived brightness check used to pick dark or light text."""
    r, g, b = hex_to_rgb(value)
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return luminance > 0.6


def text_colors_for_background(background: str) -> dict:
    """Text palette that stays readable on the given background color."""
    return TEXT_COLORS["light"] if is_light_color(background) else TEXT_COLORS["dark"]
