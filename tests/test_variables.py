"""
Tests for variable bound queries.
"""

import pytest

from modeling import InconsistentBoundDirection, Model, NoBound
from modeling.variables import (
    delete_lower_bound,
    delete_upper_bound,
    has_lower_bound,
    has_upper_bound,
    is_binary,
    is_integer,
    lower_bound,
    set_lower_bound,
    set_upper_bound,
    upper_bound,
)


@pytest.fixture
def model():
    return Model("bounds")


def test_free_variable_has_no_bounds(model):
    free_x = model.add_variable("free_x")
    assert not has_lower_bound(free_x)
    assert not has_upper_bound(free_x)
    with pytest.raises(NoBound):
        lower_bound(free_x)
    with pytest.raises(NoBound):
        upper_bound(free_x)


def test_keyword_bounds(model):
    keyword_x = model.add_variable("keyword_x", lower_bound=1, upper_bound=2)
    assert has_upper_bound(keyword_x)
    assert upper_bound(keyword_x) == 2
    assert lower_bound(keyword_x) == 1


def test_changing_bounds(model):
    x = model.add_variable("x", lower_bound=0, upper_bound=5)
    set_upper_bound(x, 10)
    set_lower_bound(x, 2)
    assert (lower_bound(x), upper_bound(x)) == (2, 10)

    with pytest.raises(InconsistentBoundDirection):
        set_lower_bound(x, 11)
    with pytest.raises(InconsistentBoundDirection):
        set_upper_bound(x, 1)

    delete_lower_bound(x)
    delete_upper_bound(x)
    assert not has_lower_bound(x) and not has_upper_bound(x)
    with pytest.raises(NoBound):
        delete_lower_bound(x)


def test_inconsistent_scalar_bounds(model):
    with pytest.raises(InconsistentBoundDirection):
        model.add_variable("x", lower_bound=3, upper_bound=1)


def test_variable_types(model):
    integer_x = model.add_variable("integer_x", integer=True)
    binary_x = model.add_variable("binary_x", binary=True)
    continuous = model.add_variable("continuous", lower_bound=0)

    assert is_integer(integer_x)
    assert not is_binary(integer_x)
    assert is_integer(binary_x)
    assert is_binary(binary_x)
    assert not is_integer(continuous)
    assert not is_binary(continuous)
