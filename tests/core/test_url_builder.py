import hashlib
import hmac

from iEdit.core.crop import CropRegion
from iEdit.core.url_builder import ImageUrl, build_url

HOST = "https://imbo.example.com"


def _base():
    return ImageUrl(HOST, "abc", "editor")


def test_preview_url_is_bounded_on_both_axes():
    url = build_url(_base(), {}, None, preview=True)

    assert url.operation_names() == ["maxSize"]
    assert url.find("maxSize").params == {"width": 924, "height": 693}
    assert url.format == "jpg"


def test_committed_url_has_width_cap_only():
    url = build_url(_base(), {}, None, preview=False)

    assert url.find("maxSize").params == {"width": 552}


def test_diff_entries_follow_in_order():
    url = build_url(
        _base(),
        {"modulate": {"brightness": 120, "saturation": 80}, "contrast": {"sharpen": 10}},
        None,
        preview=True,
    )

    assert url.operation_names() == ["maxSize", "modulate", "contrast"]
    assert url.find("modulate").params == {"b": 120, "s": 80}


def test_commit_example_ends_with_crop():
    url = build_url(
        _base(),
        {"modulate": {"brightness": 120, "saturation": 80}, "contrast": {"sharpen": 10}},
        CropRegion(10, 10, 40, 130),
        preview=False,
    )

    operations = url.operations
    assert operations[-1].name == "crop"
    assert operations[-1].params == {"x": 10, "y": 10, "width": 30, "height": 120}
    assert url.find("maxSize").params == {"width": 552}
    assert url.to_string() == (
        f"{HOST}/users/editor/images/abc.jpg"
        "?t[]=maxSize:width=552"
        "&t[]=modulate:b=120,s=80"
        "&t[]=contrast:sharpen=10"
        "&t[]=crop:x=10,y=10,width=30,height=120"
    )


def test_accidental_crop_is_dropped():
    url = build_url(_base(), {}, CropRegion(0, 0, 20, 100), preview=False)

    assert "crop" not in url.operation_names()


def test_base_url_is_not_mutated():
    base = _base().max_size(width=10).png()

    build_url(base, {"rotate": {"angle": 90}}, None, preview=True)

    assert base.operation_names() == ["maxSize"]
    assert base.format == "png"


def test_unknown_operations_are_appended_verbatim():
    url = build_url(_base(), {"sepia": {"threshold": 80}}, None, preview=True)

    assert url.find("sepia").to_descriptor() == "sepia:threshold=80"


def test_get_transformations_excludes_sizing():
    url = _base().max_size(width=552).rotate({"angle": 90}).crop(1, 2, 30, 40)

    assert url.get_transformations() == [
        {"name": "rotate", "params": {"angle": 90}},
        {"name": "crop", "params": {"x": 1, "y": 2, "width": 30, "height": 40}},
    ]


def test_url_without_operations_has_no_query():
    assert ImageUrl(HOST + "/", "abc").jpg().to_string() == f"{HOST}/images/abc.jpg"


def test_access_token_signs_the_url():
    url = ImageUrl(HOST, "abc", "editor", private_key="secret").jpg().rotate({"angle": 90})
    unsigned = f"{HOST}/users/editor/images/abc.jpg?t[]=rotate:angle=90"
    token = hmac.new(b"secret", unsigned.encode("utf-8"), hashlib.sha256).hexdigest()

    assert url.to_string() == f"{unsigned}&accessToken={token}"
