import pytest

from showcase.theme import (
    DEFAULT_BRAND_COLOR, TEXT_COLORS, get_brand_color, get_responsive_font_size,
    hex_to_rgb, is_light_color, is_valid_hex_color, round_half_up, text_colors_for_background,
)


def test_responsive_font_sizes():
    assert get_responsive_font_size(64, "iPhone", "headline") == 54
    assert get_responsive_font_size(32, "iPhone", "subheadline") == 29
    assert get_responsive_font_size(64, "iPad", "headline") == 64
    assert get_responsive_font_size(32, "iPad", "subheadline") == 32


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(28.8) == 29


@pytest.mark.parametrize("value", ["#0ea5e9", "#FFFFFF", "#a1B2c3"])
def test_valid_hex_colors(value):
    assert is_valid_hex_color(value)


@pytest.mark.parametrize("value", ["#GGGGGG", "#fff", "0ea5e9", "", None, "#0ea5e9ff"])
def test_invalid_hex_colors(value):
    assert not is_valid_hex_color(value)


def test_hex_to_rgb():
    assert hex_to_rgb("#0ea5e9") == (14, 165, 233)
    with pytest.raises(ValueError):
        hex_to_rgb("#GGGGGG")


def test_brand_color_fallback():
    assert get_brand_color("#123456") == "#123456"
    assert get_brand_color("#GGGGGG") == DEFAULT_BRAND_COLOR
    assert get_brand_color(None, default="#ffffff") == "#ffffff"


def test_text_colors_follow_background():
    assert is_light_color("#ffffff")
    assert not is_light_color("#0369a1")
    assert text_colors_for_background("#ffffff") == TEXT_COLORS["light"]
    assert text_colors_for_background("#111827") == TEXT_COLORS["dark"]
