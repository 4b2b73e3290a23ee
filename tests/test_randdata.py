import pytest

from xyutools.randdata import rand


def test_rand_in_range():
    values = [rand(10, 100) for _ in range(200)]
    assert all(10 <= value < 100 for value in values)


def test_rand_negative_min_is_clamped_to_zero():
    values = [rand(-5, 3) for _ in range(100)]
    assert all(0 <= value < 3 for value in values)


def test_rand_non_positive_max():
    with pytest.raises(ValueError):
        rand(0, 0)


def test_rand_empty_range():
    with pytest.raises(ValueError):
        rand(50, 50)