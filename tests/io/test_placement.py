import json

import pytest
from bs4 import BeautifulSoup

from iEdit.application.dtos import PlacementMetadata
from iEdit.errors import MetadataInvalidError
from iEdit.io.placement import build_markup, read_placement, replace_image


@pytest.fixture
def metadata():
    return PlacementMetadata(
        image_identifier="abc",
        crop_parameters={"x": 10, "y": 10, "x2": 40, "y2": 130, "w": 30, "h": 120},
        crop_aspect_ratio=4 / 3,
        transformations=[
            {"name": "modulate", "params": {"b": 120, "s": 80}},
            {"name": "crop", "params": {"x": 10, "y": 10, "width": 30, "height": 120}},
        ],
        original_width=1000,
        original_height=800,
    )


URL = "https://imbo.example.com/users/editor/images/abc.jpg?t[]=maxSize:width=552&t[]=rotate:angle=90"


def _soup(markup):
    return BeautifulSoup(markup, "html.parser")


def test_build_markup_wraps_image_in_div(metadata):
    root = _soup(build_markup(URL, metadata)).div

    img = root.img
    assert [child.name for child in root.children] == ["img"]
    assert img["src"] == URL
    assert img["data-image-identifier"] == "abc"
    assert json.loads(img["data-transformations"])[0]["name"] == "modulate"
    assert img["data-original-width"] == "1000"


def test_read_placement_restores_metadata(metadata):
    assert read_placement(build_markup(URL, metadata)) == metadata


def test_null_crop_is_preserved():
    metadata = PlacementMetadata(image_identifier="abc")

    restored = read_placement(build_markup(URL, metadata))

    assert restored.crop_parameters is None
    assert restored.crop_aspect_ratio is None
    assert restored.transformations == []
    assert restored.original_width is None


def test_read_placement_accepts_void_img_tag():
    markup = '<div class="image"><img src="x.jpg" data-image-identifier="abc" data-transformations="[]"></div>'

    restored = read_placement(markup)

    assert restored.image_identifier == "abc"
    assert restored.transformations == []


def test_read_placement_skips_decorative_images():
    markup = (
        '<p>Intro&nbsp;text<br><img src="logo.png"></p>'
        '<div><img src="x.jpg" data-image-identifier="abc" data-crop-aspect-ratio="1.5"></div>'
    )

    restored = read_placement(markup)

    assert restored.image_identifier == "abc"
    assert restored.crop_aspect_ratio == 1.5


def test_replace_image_keeps_surrounding_markup(metadata):
    original = (
        '<figure class="photo"><img data-image-identifier="old" src="old.jpg">'
        "<figcaption>Caption</figcaption></figure>"
    )

    root = _soup(replace_image(original, URL, metadata)).figure

    assert root["class"] == ["photo"]
    assert [child.name for child in root.children] == ["img", "figcaption"]
    assert root.img["data-image-identifier"] == "abc"
    assert root.figcaption.get_text() == "Caption"


def test_replace_image_keeps_entities_and_siblings(metadata):
    original = (
        '<div class="figure"><img src="old.jpg" data-image-identifier="old">'
        "<p>Caption&nbsp;text &amp; credits</p></div>"
    )

    replaced = replace_image(original, URL, metadata)

    root = _soup(replaced).find("div", class_="figure")
    assert root is not None
    assert root.p.get_text() == "Caption\xa0text & credits"
    assert read_placement(replaced) == metadata


def test_replace_image_without_image_inserts_fresh_reference(metadata):
    replaced = replace_image("<p>No picture here</p>", URL, metadata)

    assert "No picture" not in replaced
    assert read_placement(replaced) == metadata


def test_markup_without_image_yields_none():
    assert read_placement("<div><p>text</p></div>") is None
    assert read_placement("<div><img src='x.jpg'></div>") is None
    assert read_placement("") is None


def test_invalid_metadata_raises():
    markup = '<div><img data-image-identifier="abc" data-transformations="{&quot;a&quot;: 1}"></div>'

    with pytest.raises(MetadataInvalidError):
        read_placement(markup)


def test_empty_identifier_is_invalid():
    with pytest.raises(MetadataInvalidError):
        read_placement('<div><img data-image-identifier=""></div>')
