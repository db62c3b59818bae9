import math

from touch_draw import extent


def test_bounding_extent_covers_all_coordinates():
    assert extent.bounding_extent([(1.0, 5.0), (-2.0, 3.0), (4.0, -1.0)]) == (-2.0, -1.0, 4.0, 5.0)


def test_empty_extent_is_inverted():
    empty = extent.create_empty()

    assert extent.is_empty(empty)
    assert extent.bounding_extent([]) == empty


def test_degenerate_extents_are_not_empty():
    # Bounding boxes of horizontal and vertical segments have zero width or height.
    assert not extent.is_empty((0.0, 0.0, 0.0, 10.0))
    assert not extent.is_empty((0.0, 5.0, 10.0, 5.0))


def test_contains_and_intersects_include_the_boundary():
    box = (0.0, 0.0, 10.0, 10.0)

    assert extent.contains_coordinate(box, (10.0, 0.0))
    assert not extent.contains_coordinate(box, (10.0001, 0.0))
    assert extent.intersects(box, (10.0, 10.0, 20.0, 20.0))
    assert not extent.intersects(box, (11.0, 0.0, 20.0, 20.0))


def test_size_center_and_diagonal():
    box = (0.0, 0.0, 30.0, 40.0)

    assert extent.get_size(box) == (30.0, 40.0)
    assert extent.get_center(box) == (15.0, 20.0)
    assert math.isclose(extent.get_diagonal_length(box), 50.0)


def test_buffer_grows_every_side():
    assert extent.buffer((0.0, 0.0, 1.0, 1.0), 2.0) == (-2.0, -2.0, 3.0, 3.0)


def test_corners():
    box = (0.0, 1.0, 2.0, 3.0)

    assert extent.get_bottom_left(box) == (0.0, 1.0)
    assert extent.get_bottom_right(box) == (2.0, 1.0)
    assert extent.get_top_left(box) == (0.0, 3.0)
    assert extent.get_top_right(box) == (2.0, 3.0)
    assert extent.equals(box, [0.0, 1.0, 2.0, 3.0])
