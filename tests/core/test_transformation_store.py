import pytest

from iEdit.core.descriptor import TransformationDescriptor, parse_transformation
from iEdit.core.diff import diff
from iEdit.core.transformations import DEFAULT_TRANSFORMATIONS, TransformationStore


@pytest.fixture
def store():
    return TransformationStore()


def test_initial_state_matches_defaults(store):
    assert store.get() == {
        "modulate": {"brightness": 100, "saturation": 100, "hue": 100},
        "contrast": {"sharpen": 0},
        "rotate": {"angle": 0},
    }


def test_snapshot_is_independent(store):
    snapshot = store.get()
    snapshot["modulate"]["brightness"] = 5

    assert store.value("modulate", "brightness") == 100


def test_defaults_are_immutable(store):
    with pytest.raises(TypeError):
        store.defaults["modulate"]["brightness"] = 1  # type: ignore[index]
    with pytest.raises(TypeError):
        DEFAULT_TRANSFORMATIONS["rotate"] = {}  # type: ignore[index]


def test_set_reports_changes(store):
    assert store.set("contrast", "sharpen", 4) is True
    assert store.set("contrast", "sharpen", 4) is False
    assert store.value("contrast", "sharpen") == 4


def test_set_normalises_rotation(store):
    store.set("rotate", "angle", -90)

    assert store.value("rotate", "angle") == 270


def test_modulate_descriptor_translates_short_keys_and_notifies(store):
    received = []
    store.parameter_changed.connect(lambda name, params: received.append((name, params)))

    store.apply_descriptor(parse_transformation("modulate:b=120,s=80,h=100"))

    assert store.get()["modulate"] == {"brightness": 120, "saturation": 80, "hue": 100}
    assert received == [("modulate", {"brightness": 120, "saturation": 80, "hue": 100})]


def test_modulate_missing_keys_fall_back_to_defaults(store):
    store.set("modulate", "hue", 50)

    store.apply_descriptor(parse_transformation("modulate:b=130"))

    assert store.get()["modulate"] == {"brightness": 130, "saturation": 100, "hue": 100}


def test_crop_descriptor_is_ignored(store):
    before = store.get()

    assert store.apply_descriptor(parse_transformation("crop:x=1,y=2,width=30,height=30")) is False
    assert store.get() == before


def test_unknown_operation_passes_through(store):
    store.apply_descriptor(TransformationDescriptor("sepia", {"threshold": 80}))

    assert store.get()["sepia"] == {"threshold": 80}
    assert diff(store.get(), store.defaults)["sepia"] == {"threshold": 80}


def test_rotate_descriptor_is_normalised(store):
    store.apply_descriptor(parse_transformation("rotate:angle=450"))

    assert store.value("rotate", "angle") == 90


def test_reset_restores_defaults_and_notifies(store):
    resets = []
    store.reset_performed.connect(lambda: resets.append(True))
    store.apply_descriptors(
        [parse_transformation("contrast:sharpen=3"), parse_transformation("rotate:angle=180")]
    )

    store.reset()

    assert diff(store.get(), store.defaults) == {}
    assert resets == [True]


def test_init_replaces_defaults():
    store = TransformationStore({"contrast": {"sharpen": 2}})

    assert store.get() == {"contrast": {"sharpen": 2}}
    store.set("contrast", "sharpen", 5)
    store.init({"rotate": {"angle": 0}})
    assert store.get() == {"rotate": {"angle": 0}}
