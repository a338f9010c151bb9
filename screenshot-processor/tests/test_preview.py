from xml.etree import ElementTree

import pytest

from showcase.errors import TemplateNotFoundError
from showcase.models import SlideText
from showcase.preview import escape_markup, render_slide_svg


def test_escape_markup_covers_all_special_characters():
    assert escape_markup("a & b") == "a &amp; b"
    assert escape_markup("<tag>") == "&lt;tag&gt;"
    assert escape_markup("\"quoted\" 'single'") == "&quot;quoted&quot; &apos;single&apos;"


def test_escape_markup_escapes_ampersand_once():
    assert escape_markup("&lt;") == "&amp;lt;"


def test_svg_is_well_formed_with_hostile_text(sample_storyboard):
    slide = sample_storyboard.get_slide(2).model_copy(update={
        "text": SlideText(headline='Fish & <Chips> "now"', subheadline="Tom's </svg> place"),
    })
    svg = render_slide_svg("iphone-6.7", slide)

    root = ElementTree.fromstring(svg)
    texts = [el.text for el in root.iter("{http://www.w3.org/2000/svg}text")]
    assert texts == ['Fish & <Chips> "now"', "Tom's </svg> place"]


def test_svg_dimensions_and_background(sample_storyboard):
    svg = render_slide_svg("ipad-12.9", sample_storyboard.get_slide(1), brand_color="#123456")
    root = ElementTree.fromstring(svg)

    assert root.get("width") == "2064"
    assert root.get("height") == "2752"
    background = root.find("{http://www.w3.org/2000/svg}rect")
    assert background.get("fill") == "#123456"


def test_svg_text_anchor_follows_template(sample_storyboard):
    split_svg = render_slide_svg("iphone-6.7", sample_storyboard.get_slide(3))
    stack_svg = render_slide_svg("iphone-6.7", sample_storyboard.get_slide(2))
    assert 'text-anchor="start"' in split_svg
    assert 'text-anchor="middle"' in stack_svg


def test_svg_unknown_template(sample_storyboard):
    slide = sample_storyboard.get_slide(1).model_copy(update={"template_id": "nope"})
    with pytest.raises(TemplateNotFoundError):
        render_slide_svg("iphone-6.7", slide)
