import math

import pytest

from touch_draw.features import Feature
from touch_draw.handle import OrthogonalMovementHandle
from touch_draw.overlays import (
    ButtonControl,
    DimensionOverlay,
    MemoryOverlayHost,
    OverlayLayer,
    SelectControl,
    basis_vector_rotation,
    fold_rotation,
)


@pytest.mark.parametrize(
    'basis, expected',
    [
        ((1.0, 0.0), 0.0),
        ((0.0, 1.0), math.pi / 2),
        ((0.6, 0.8), math.asin(0.8)),
        ((0.6, -0.8), 2 * math.pi - math.asin(0.8)),
    ],
)
def test_basis_vector_rotation(basis, expected):
    assert basis_vector_rotation(basis) == pytest.approx(expected)


@pytest.mark.parametrize('rotation', [0.0, 1.0, math.pi / 2, math.pi, 4.0, 2 * math.pi - 1e-6])
def test_fold_rotation_stays_in_first_quadrant(rotation):
    folded = fold_rotation(rotation)

    assert 0.0 <= folded < math.pi / 2


def test_overlay_rotation_tracks_view_unless_pinned():
    follows = DimensionOverlay("a", 0.2)
    pinned = DimensionOverlay("b", 0.2, rotate_with_view=False)

    assert follows.update_rotation(0.3) == pytest.approx(0.5)
    assert pinned.update_rotation(0.3) == pytest.approx(0.2)


@pytest.mark.parametrize('text, value', [('3', 3.0), ('-2.5', -2.5), ('.75', 0.75), ('10.', None)])
def test_set_text_parses_numeric_input(text, value):
    overlay = DimensionOverlay("scale")
    seen = []
    overlay.on("input", seen.append)

    overlay.set_text(text)

    if value is None:
        assert not overlay.valid
        assert seen == []
    else:
        assert overlay.valid
        assert seen == [value]


def test_lone_minus_sign_is_valid_but_not_a_number():
    overlay = DimensionOverlay("scale")
    seen = []
    overlay.on("input", seen.append)

    overlay.set_text("-")

    assert overlay.valid
    assert seen == []


def test_display_formats_four_decimals_unless_focused():
    overlay = DimensionOverlay("scale")

    overlay.display(1.23456)
    assert overlay.text == "1.2346"

    overlay.focus()
    overlay.display(9.0)
    assert overlay.text == "1.2346"


def test_visibility_changes_are_announced_once():
    overlay = DimensionOverlay("x-move")
    seen = []
    overlay.on("change:visible", seen.append)

    overlay.hide()
    overlay.hide()
    overlay.show()

    assert len(seen) == 2
    assert overlay.visible


def test_select_control_rejects_unknown_values():
    select = SelectControl("units", ["m", "ft"], "m")
    changes = []
    select.on("change:selection", changes.append)

    select.select("m")
    select.select("ft")

    assert changes == ["ft"]
    with pytest.raises(ValueError):
        select.select("yd")
    with pytest.raises(ValueError):
        SelectControl("units", ["m"], "ft")


def test_host_placement_is_idempotent():
    host = MemoryOverlayHost()
    overlay = DimensionOverlay("scale")
    button = ButtonControl("confirm-touch-draw", "ok")

    host.add_overlay(overlay)
    host.add_overlay(overlay)
    host.add_control(button)

    assert host.overlays == [overlay]
    assert host.find_control("confirm-touch-draw") is button
    assert host.find_control("missing") is None

    host.remove_control(button)
    host.remove_control(button)
    assert host.controls == []


def test_overlay_layer_splits_features_and_handles():
    layer = OverlayLayer()
    feature = Feature(None)
    handle = OrthogonalMovementHandle((0.0, 0.0), (1.0, 0.0))

    layer.add_all([feature, handle, feature])

    assert layer.items == [feature, handle]
    assert layer.features() == [feature]
    assert layer.handles() == [handle]

    revision = layer.revision
    layer.remove(feature)
    assert layer.revision == revision + 1
    assert feature not in layer
