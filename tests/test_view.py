import math

import pytest

from touch_draw.view import PointerEvent, StaticMapView


class _Marker:
    def __init__(self, geometry):
        self.geometry = geometry


def test_extent_of_unrotated_view():
    view = StaticMapView(center=(10.0, 20.0), resolution=0.5, size=(200, 100))

    assert view.calculate_extent() == pytest.approx((-40.0, -5.0, 60.0, 45.0))


def test_rotated_extent_bounds_the_rotated_frame():
    view = StaticMapView(center=(0.0, 0.0), resolution=1.0, size=(100, 100), rotation=math.pi / 4)

    half = 50.0 * math.sqrt(2.0)
    assert view.calculate_extent() == pytest.approx((-half, -half, half, half))


def test_pixel_y_grows_downwards():
    view = StaticMapView(center=(0.0, 0.0), resolution=1.0, size=(100, 100))

    assert view.get_pixel_from_coordinate((0.0, 0.0)) == pytest.approx((50.0, 50.0))
    assert view.get_pixel_from_coordinate((10.0, 10.0)) == pytest.approx((60.0, 40.0))


@pytest.mark.parametrize('rotation', [0.0, 0.3, math.pi / 2, 2.5])
def test_pixel_transforms_are_inverse(rotation):
    view = StaticMapView(center=(3.0, -7.0), resolution=0.25, size=(640, 480), rotation=rotation)

    coordinate = (12.5, 4.0)
    pixel = view.get_pixel_from_coordinate(coordinate)

    assert view.get_coordinate_from_pixel(pixel) == pytest.approx(coordinate)


def test_fit_shows_the_whole_extent():
    view = StaticMapView.fit((0.0, 0.0, 100.0, 50.0), size=(500, 500), padding=0.1)
    visible = view.calculate_extent()

    assert view.center == (50.0, 25.0)
    assert visible[0] <= 0.0 and visible[2] >= 100.0
    assert visible[1] <= 0.0 and visible[3] >= 50.0


def test_non_positive_resolution_is_rejected():
    with pytest.raises(ValueError):
        StaticMapView(center=(0.0, 0.0), resolution=0.0)


def test_feature_at_pixel_picks_the_nearest_within_tolerance():
    view = StaticMapView(center=(0.0, 0.0), resolution=1.0, size=(100, 100), hit_tolerance_px=10.0)
    near = _Marker((2.0, 0.0))
    nearer = _Marker((1.0, 0.0))
    far = _Marker((30.0, 0.0))

    assert view.feature_at_pixel((50.0, 50.0), [near, nearer, far]) is nearer
    assert view.feature_at_pixel((50.0, 10.0), [near, nearer, far]) is None


def test_feature_at_pixel_ties_go_to_the_first_candidate():
    view = StaticMapView(center=(0.0, 0.0), resolution=1.0, size=(100, 100), hit_tolerance_px=10.0)
    first = _Marker((1.0, 0.0))
    second = _Marker((1.0, 0.0))

    assert view.feature_at_pixel((50.0, 50.0), [first, second]) is first
    assert view.feature_at_pixel((50.0, 50.0), [second, first]) is second


def test_pointer_event_constructors_agree():
    view = StaticMapView(center=(0.0, 0.0), resolution=2.0, size=(100, 100))

    by_coordinate = PointerEvent.at_coordinate(view, (10.0, -4.0))
    by_pixel = PointerEvent.at_pixel(view, by_coordinate.pixel)

    assert by_pixel.coordinate == pytest.approx((10.0, -4.0))
