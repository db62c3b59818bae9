import math

import numpy as np
import pytest

from touch_draw.vector_math import (
    add_vectors,
    get_midpoint,
    get_orthogonal_basis_vector,
    get_planar_distance,
    is_finite_vector,
    scale_vector,
    subtract_vectors,
    translate_coordinates,
)


@pytest.mark.parametrize(
    'p0, p1',
    [
        ((0.0, 0.0), (10.0, 0.0)),
        ((0.0, 0.0), (0.0, 10.0)),
        ((1.0, 2.0), (4.0, 6.0)),
        ((1.0, 2.0), (-3.0, 5.0)),
        ((-7.5, 3.25), (2.0, -8.0)),
        ((100.0, 100.0), (99.0, 99.0)),
        ((5.0, 5.0), (5.0, -20.0)),
    ],
)
def test_basis_vector_is_unit_and_orthogonal(p0, p1):
    bx, by = get_orthogonal_basis_vector(p0, p1)
    dx, dy = p1[0] - p0[0], p1[1] - p0[1]

    assert math.isclose(math.hypot(bx, by), 1.0, rel_tol=1e-12)
    assert math.isclose(bx * dx + by * dy, 0.0, abs_tol=1e-9)


def test_basis_vector_for_horizontal_and_vertical_segments():
    assert get_orthogonal_basis_vector((0.0, 0.0), (2.0, 0.0)) == pytest.approx((0.0, 1.0))
    assert get_orthogonal_basis_vector((0.0, 0.0), (0.0, 2.0)) == pytest.approx((-1.0, 0.0))


def test_basis_vector_sign_flip_for_descending_segment():
    bx, by = get_orthogonal_basis_vector((0.0, 0.0), (1.0, -1.0))

    assert bx < 0
    assert by < 0


def test_basis_vector_of_zero_length_segment_is_nan():
    vector = get_orthogonal_basis_vector((3.0, 3.0), (3.0, 3.0))

    assert all(math.isnan(v) for v in vector)
    assert not is_finite_vector(vector)


def test_elementwise_helpers():
    assert scale_vector((1.5, -2.0), 2.0) == (3.0, -4.0)
    assert subtract_vectors((5.0, 1.0), (2.0, 4.0)) == (3.0, -3.0)
    assert add_vectors((5.0, 1.0), (2.0, 4.0)) == (7.0, 5.0)
    assert get_midpoint((0.0, 0.0), (4.0, -2.0)) == (2.0, -1.0)
    assert get_planar_distance((0.0, 0.0), (3.0, 4.0)) == 5.0


def test_translate_coordinates_broadcasts():
    ring = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]

    moved = translate_coordinates(ring, (2.0, -1.0))

    assert isinstance(moved, np.ndarray)
    assert moved.shape == (3, 2)
    assert moved.tolist() == [[2.0, -1.0], [3.0, -1.0], [3.0, 0.0]]
