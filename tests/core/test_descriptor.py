from iEdit.core.descriptor import (
    TransformationDescriptor,
    descriptor_from_mapping,
    format_transformation,
    parse_transformation,
    parse_transformations,
)


def test_parse_modulate_with_short_keys():
    parsed = parse_transformation("modulate:b=120,s=90,h=100")

    assert parsed == TransformationDescriptor("modulate", {"b": 120, "s": 90, "h": 100})


def test_missing_equals_yields_empty_value():
    parsed = parse_transformation("border:color,width=3")

    assert parsed.params == {"color": "", "width": 3}


def test_name_without_params():
    parsed = parse_transformation("flipHorizontally")

    assert parsed.name == "flipHorizontally"
    assert parsed.params == {}


def test_values_keep_extra_separators():
    parsed = parse_transformation("watermark:img=a:b=c,x=1.5")

    assert parsed.params == {"img": "a:b=c", "x": 1.5}


def test_non_numeric_values_stay_strings():
    parsed = parse_transformation("canvas:mode=center,bg=ff0000")

    assert parsed.params == {"mode": "center", "bg": "ff0000"}


def test_parse_never_raises_on_garbage():
    parsed = parse_transformation(":,,=,=5")

    assert parsed.name == ""
    assert parsed.params == {}


def test_parse_transformations_skips_empty_strings():
    parsed = parse_transformations(["rotate:angle=90", "", "contrast:sharpen=2"])

    assert [item.name for item in parsed] == ["rotate", "contrast"]


def test_format_transformation_renders_integral_floats_as_ints():
    assert format_transformation("rotate", {"angle": 90.0}) == "rotate:angle=90"
    assert format_transformation("crop", {"x": 1, "y": 2.5}) == "crop:x=1,y=2.5"
    assert format_transformation("flipVertically", {}) == "flipVertically"


def test_descriptor_from_mapping():
    descriptor = descriptor_from_mapping({"name": "modulate", "params": {"b": 110}})

    assert descriptor.name == "modulate"
    assert descriptor.params == {"b": 110}
    assert descriptor.to_dict() == {"name": "modulate", "params": {"b": 110}}
