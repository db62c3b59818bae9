import math

import pytest

from touch_draw.clipping import crop_line_segment_by_extent, get_line_intersection

EXTENT = (0.0, 0.0, 10.0, 10.0)


def _on_segment(point, a, b, tol=1e-9):
    cross = (b[0] - a[0]) * (point[1] - a[1]) - (b[1] - a[1]) * (point[0] - a[0])
    if abs(cross) > tol:
        return False
    within_x = min(a[0], b[0]) - tol <= point[0] <= max(a[0], b[0]) + tol
    within_y = min(a[1], b[1]) - tol <= point[1] <= max(a[1], b[1]) + tol
    return within_x and within_y


@pytest.mark.parametrize(
    'p0, p1, p2, p3',
    [
        ((0.0, 0.0), (4.0, 4.0), (0.0, 4.0), (4.0, 0.0)),
        ((-1.0, 2.0), (7.0, 3.0), (3.0, -5.0), (2.0, 9.0)),
        ((0.0, 0.0), (10.0, 0.0), (5.0, 0.0), (5.0, 5.0)),
    ],
)
def test_intersection_lies_on_both_segments(p0, p1, p2, p3):
    point = get_line_intersection(p0, p1, p2, p3)

    assert point is not None
    assert _on_segment(point, p0, p1)
    assert _on_segment(point, p2, p3)


def test_parallel_segments_do_not_intersect():
    assert get_line_intersection((0.0, 0.0), (5.0, 0.0), (0.0, 1.0), (5.0, 1.0)) is None


def test_collinear_segments_do_not_intersect():
    assert get_line_intersection((0.0, 0.0), (5.0, 0.0), (1.0, 0.0), (7.0, 0.0)) is None


def test_non_crossing_segments_do_not_intersect():
    assert get_line_intersection((0.0, 0.0), (1.0, 1.0), (3.0, 0.0), (2.0, 1.5)) is None


def test_crop_is_identity_for_inside_segment():
    segment = ((1.0, 1.0), (9.0, 5.0))

    assert crop_line_segment_by_extent(segment, EXTENT) is segment


def test_crop_of_disjoint_segment_is_none():
    assert crop_line_segment_by_extent(((20.0, 20.0), (30.0, 25.0)), EXTENT) is None


def test_crop_of_outside_segment_missing_the_extent_is_none():
    # Bounding boxes overlap but the segment passes by the corner.
    assert crop_line_segment_by_extent(((8.0, 14.0), (14.0, 8.0)), EXTENT) is None


def test_crop_with_both_endpoints_outside_returns_edge_crossings():
    cropped = crop_line_segment_by_extent(((-5.0, 5.0), (15.0, 5.0)), EXTENT)

    assert cropped is not None
    assert sorted(cropped) == [(0.0, 5.0), (10.0, 5.0)]


@pytest.mark.parametrize(
    'segment, expected',
    [
        (((5.0, 5.0), (15.0, 5.0)), ((5.0, 5.0), (10.0, 5.0))),
        (((15.0, 5.0), (5.0, 5.0)), ((5.0, 5.0), (10.0, 5.0))),
        (((5.0, 5.0), (5.0, -5.0)), ((5.0, 5.0), (5.0, 0.0))),
    ],
)
def test_crop_with_one_endpoint_inside_keeps_it_first(segment, expected):
    cropped = crop_line_segment_by_extent(segment, EXTENT)

    assert cropped is not None
    assert cropped[0] == expected[0]
    assert math.isclose(cropped[1][0], expected[1][0], abs_tol=1e-12)
    assert math.isclose(cropped[1][1], expected[1][1], abs_tol=1e-12)
