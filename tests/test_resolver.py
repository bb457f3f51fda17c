"""
Tests for resolving indexed declarations into containers.
"""

import pytest

from modeling.containers import (
    Bounds,
    ContainerKind,
    IndexSpec,
    classify,
    enumerate_tuples,
    resolve,
    span,
)
from modeling.errors import (
    EmptyDomain,
    InconsistentBoundDirection,
    KeyNotPresent,
    RepeatedIndexValue,
    UnboundIndexReference,
)


def test_one_based_axes_resolve_dense():
    """All axes contiguous from 1 and no filter give a dense array."""
    c = resolve([IndexSpec("i", span(1, 2)), IndexSpec("j", span(1, 3))])
    assert c.kind is ContainerKind.DENSE_ARRAY
    assert len(c) == 2 * 3
    assert c.shape == (2, 3)


def test_integer_domain_is_short_for_one_based_range():
    c = resolve([4])
    assert c.kind is ContainerKind.DENSE_ARRAY
    assert list(c.keys()) == [(1,), (2,), (3,), (4,)]


@pytest.mark.parametrize(
    "domain",
    [span(2, 3), span(1, 3, 2), ["red", "blue"], [1, 2, 3], range(0, 4)],
)
def test_regular_non_one_based_axes_resolve_axis_array(domain):
    c = resolve([span(1, 2), domain])
    assert c.kind is ContainerKind.AXIS_ARRAY
    assert len(c) == 2 * len(list(domain))


def test_triangular_indexing_counts_twelve_tuples():
    """i in 1:3, j in i:5 gives 5 + 4 + 3 tuples."""
    c = resolve([IndexSpec("i", span(1, 3)), IndexSpec("j", lambda i: span(i, 5))])
    assert c.kind is ContainerKind.SPARSE_MAPPING
    assert len(c) == 12
    assert (3, 3) in c
    assert (3, 2) not in c


def test_filter_keeps_exactly_matching_tuples():
    c = resolve(
        [IndexSpec("i", span(1, 2)), IndexSpec("j", span(1, 2))],
        condition=lambda i, j: i != j,
    )
    assert c.kind is ContainerKind.SPARSE_MAPPING
    assert list(c.keys()) == [(1, 2), (2, 1)]


def test_filter_count_matches_predicate():
    specs = [IndexSpec("i", span(1, 9))]
    c = resolve(specs, condition=lambda i: i % 3 == 0)
    assert len(c) == len([i for i in range(1, 10) if i % 3 == 0])
    assert list(c.keys()) == [(3,), (6,), (9,)]


def test_bound_expression_per_tuple():
    """Lower bound 2i + j evaluated for each tuple."""
    c = resolve(
        [IndexSpec("i", span(1, 2)), IndexSpec("j", span(1, 2))],
        lower=lambda i, j: 2 * i + j,
    )
    assert c[1, 1] == Bounds(3.0, None)
    assert c[2, 2].lower == 6.0
    assert c[2, 2].upper is None


def test_constant_bounds_apply_to_every_tuple():
    c = resolve([span(1, 3)], lower=0, upper=1)
    assert set(c.values()) == {Bounds(0.0, 1.0)}


def test_bound_function_may_return_none():
    c = resolve([IndexSpec("i", span(1, 2))], upper=lambda i: None if i == 1 else 5)
    assert c[1].upper is None
    assert c[2].upper == 5.0


def test_non_numeric_bound_is_rejected():
    with pytest.raises(TypeError):
        resolve([IndexSpec("i", span(1, 2))], lower=lambda i: "low")


def test_resolution_is_idempotent():
    def declare():
        return resolve(
            [IndexSpec("i", span(1, 3)), IndexSpec("j", lambda i: span(i, 5))],
            condition=lambda i, j: (i + j) % 2 == 0,
            lower=lambda i, j: i * j,
        )

    first, second = declare(), declare()
    assert first == second
    assert first.kind is second.kind


def test_sparse_lookup_miss_raises_key_not_present():
    c = resolve(
        [IndexSpec("i", span(1, 2)), IndexSpec("j", span(1, 2))],
        condition=lambda i, j: i != j,
    )
    with pytest.raises(KeyNotPresent):
        c[1, 1]
    assert c[1, 2] == Bounds()


def test_key_not_present_is_a_key_error():
    c = resolve([IndexSpec("i", span(1, 3))], condition=lambda i: i > 1)
    with pytest.raises(KeyError):
        c[1]


def test_bound_referencing_unknown_index_fails():
    with pytest.raises(UnboundIndexReference) as err:
        resolve([IndexSpec("i", span(1, 2))], lower=lambda k: k)
    assert err.value.name == "k"


def test_condition_referencing_unknown_index_fails():
    with pytest.raises(UnboundIndexReference):
        resolve([IndexSpec("i", span(1, 2))], condition=lambda i, j: i < j)


def test_dependent_domain_may_only_use_earlier_indices():
    with pytest.raises(UnboundIndexReference):
        resolve([IndexSpec("j", lambda i: span(i, 5)), IndexSpec("i", span(1, 3))])


def test_anonymous_axis_cannot_be_referenced():
    with pytest.raises(UnboundIndexReference):
        resolve([span(1, 3)], lower=lambda i: i)


def test_function_with_var_keyword_sees_all_indices():
    c = resolve(
        [IndexSpec("i", span(1, 3)), IndexSpec("j", span(1, 3))],
        condition=lambda **idx: idx["i"] < idx["j"],
    )
    assert list(c.keys()) == [(1, 2), (1, 3), (2, 3)]


def test_lower_above_upper_fails_with_offending_key():
    with pytest.raises(InconsistentBoundDirection) as err:
        resolve([IndexSpec("i", span(1, 3))], lower=lambda i: i, upper=2)
    assert err.value.key == (3,)
    assert err.value.lower == 3.0


def test_empty_domain_warns_by_default(caplog):
    c = resolve([IndexSpec("i", span(1, 0))], empty_domain="warn")
    assert c.kind is ContainerKind.DENSE_ARRAY
    assert len(c) == 0
    assert "is empty" in caplog.text


def test_empty_domain_can_be_an_error():
    with pytest.raises(EmptyDomain):
        resolve([IndexSpec("i", []), IndexSpec("j", span(1, 2))], empty_domain="error")


def test_empty_domain_can_be_ignored(caplog):
    c = resolve([[]], empty_domain="ignore")
    assert len(c) == 0
    assert "is empty" not in caplog.text


def test_unknown_empty_domain_policy_is_rejected():
    with pytest.raises(ValueError):
        resolve([IndexSpec("i", [])], empty_domain="raise")
    with pytest.raises(ValueError):
        resolve([IndexSpec("i", span(1, 2))], empty_domain="sometimes")


def test_dependent_axis_empty_everywhere_follows_the_policy(caplog):
    axes = [IndexSpec("i", span(1, 3)), IndexSpec("j", lambda i: span(i + 10, 5))]
    with pytest.raises(EmptyDomain):
        resolve(axes, empty_domain="error")

    c = resolve(axes, empty_domain="warn")
    assert c.kind is ContainerKind.SPARSE_MAPPING
    assert len(c) == 0
    assert "Domain of index 'j' is empty" in caplog.text


def test_dependent_axis_empty_for_some_outer_values_is_fine():
    """j in i:2 is empty only for i = 3."""
    c = resolve(
        [IndexSpec("i", span(1, 3)), IndexSpec("j", lambda i: span(i, 2))],
        empty_domain="error",
    )
    assert list(c.keys()) == [(1, 1), (1, 2), (2, 2)]


def test_filter_removing_everything_is_not_an_empty_domain():
    c = resolve([IndexSpec("i", span(1, 3))], condition=lambda i: i > 5, empty_domain="error")
    assert len(c) == 0


def test_repeated_domain_value_fails():
    with pytest.raises(RepeatedIndexValue):
        resolve([IndexSpec("color", ["red", "red"])])


def test_string_domain_is_rejected():
    with pytest.raises(TypeError):
        resolve([IndexSpec("color", "red")])


def test_build_creates_stored_entity():
    c = resolve(
        [IndexSpec("i", span(1, 2)), IndexSpec("j", span(1, 3))],
        upper=lambda i, j: 10 * i,
        build=lambda key, bounds: (sum(key), bounds.upper),
    )
    assert c[2, 3] == (5, 20.0)


def test_classify_looks_at_shape_only():
    assert classify([span(1, 5)]) is ContainerKind.DENSE_ARRAY
    assert classify([span(1, 5)], condition=lambda: True) is ContainerKind.SPARSE_MAPPING
    assert classify([span(0, 5)]) is ContainerKind.AXIS_ARRAY
    assert (
        classify([IndexSpec("i", span(1, 3)), IndexSpec("j", lambda i: span(1, i))])
        is ContainerKind.SPARSE_MAPPING
    )


def test_enumeration_is_lexicographic_with_lazy_inner_domains():
    tuples = list(
        enumerate_tuples([IndexSpec("i", span(1, 3)), IndexSpec("j", lambda i: span(1, i))])
    )
    assert tuples == [(1, 1), (2, 1), (2, 2), (3, 1), (3, 2), (3, 3)]


def test_repeated_index_name_is_rejected():
    with pytest.raises(Exception, match="used twice"):
        resolve([IndexSpec("i", span(1, 2)), IndexSpec("i", span(1, 2))])


def test_declaration_needs_an_index():
    with pytest.raises(ValueError):
        resolve([])
