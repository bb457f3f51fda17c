"""
Indexed declaration resolver.

Given the axes of a declaration, an optional filter and optional bounds,
decides which container kind to build and enumerates the index tuples
that go into it, together with each tuple's bound values.
"""

from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple
from config.config import Config, config
from modeling.containers.container import Bounds, ContainerKind, ResolvedContainer
from modeling.containers.index import (
    DomainKind,
    IndexFunction,
    IndexSpec,
    index_names,
    prepare_specs,
    scope_of,
)
from modeling.errors import EmptyDomain, InconsistentBoundDirection
from utils.logging import setup_logger
from utils.validation import ensure_numeric_bound

logger = setup_logger(__name__)

Builder = Callable[[Tuple[Any, ...], Bounds], Any]


def classify(index_specs: Iterable[Any], condition: Optional[Callable] = None) -> ContainerKind:
    """
    Decide the container kind from the shape of the axes alone.

    Args:
        index_specs: The declaration's axes.
        condition: Filter predicate, if any.

    Returns:
        ContainerKind: DENSE_ARRAY when every axis is a contiguous range from 1
        and there is no filter; SPARSE_MAPPING when there is a filter or a
        dependent (triangular) axis; AXIS_ARRAY otherwise.
    """
    specs = [s if isinstance(s, IndexSpec) else IndexSpec(None, s) for s in index_specs]

    if condition is not None or any(spec.is_dependent for spec in specs):
        return ContainerKind.SPARSE_MAPPING
    if all(spec.kind is DomainKind.ONE_BASED for spec in specs):
        return ContainerKind.DENSE_ARRAY
    return ContainerKind.AXIS_ARRAY


def _walk(
    specs: Sequence[IndexSpec],
    depth: int,
    prefix: List[Any],
    scope: Dict[str, Any],
    seen: Optional[List[int]] = None,
) -> Iterator[Tuple[Any, ...]]:
    if depth == len(specs):
        yield tuple(prefix)
        return

    spec = specs[depth]
    for value in spec.domain_for(scope):
        if seen is not None:
            seen[depth] += 1
        if spec.name is not None:
            scope[spec.name] = value
        prefix.append(value)
        yield from _walk(specs, depth + 1, prefix, scope, seen)
        prefix.pop()

    if spec.name is not None:
        scope.pop(spec.name, None)


def _iter_tuples(
    specs: Sequence[IndexSpec],
    condition: Optional[IndexFunction],
    seen: Optional[List[int]] = None,
) -> Iterator[Tuple[Any, ...]]:
    for key in _walk(specs, 0, [], {}, seen):
        if condition is None or condition(scope_of(specs, key)):
            yield key


def enumerate_tuples(
    index_specs: Iterable[Any], condition: Optional[Callable] = None
) -> Iterator[Tuple[Any, ...]]:
    """
    Enumerate index tuples in lexicographic order over the axes.

    Dependent axes are recomputed for every combination of the values
    before them. Tuples for which ``condition`` is false are skipped.
    """
    specs = prepare_specs(index_specs)
    condition_fn = None
    if condition is not None:
        condition_fn = IndexFunction(condition, index_names(specs), role="condition")
    return _iter_tuples(specs, condition_fn)


def _bound_evaluator(bound: Any, names: Sequence[str], which: str) -> Callable[[Dict[str, Any], tuple], Optional[float]]:
    if callable(bound):
        fn = IndexFunction(bound, names, role=f"{which} bound")
        return lambda scope, key: ensure_numeric_bound(fn(scope), which, key)

    value = ensure_numeric_bound(bound, which)
    return lambda scope, key: value


def _report_empty(spec: IndexSpec, policy: str) -> None:
    if policy == "error":
        raise EmptyDomain(spec.name)
    if policy == "warn":
        logger.warning(f"{EmptyDomain(spec.name)}; the container will have no entries")


def _check_empty_domains(specs: Sequence[IndexSpec], policy: str) -> None:
    for spec in specs:
        if spec.is_dependent or spec.values:
            continue
        _report_empty(spec, policy)


def _check_empty_dependent_domains(
    specs: Sequence[IndexSpec], seen: Sequence[int], policy: str
) -> None:
    # A dependent axis is empty when it produced no value for any outer tuple
    # that was actually reached.
    for depth, spec in enumerate(specs):
        if not spec.is_dependent or seen[depth]:
            continue
        if depth == 0 or seen[depth - 1]:
            _report_empty(spec, policy)
        return


def resolve(
    index_specs: Iterable[Any],
    condition: Optional[Callable] = None,
    lower: Any = None,
    upper: Any = None,
    build: Optional[Builder] = None,
    empty_domain: Optional[str] = None,
) -> ResolvedContainer:
    """
    Resolve an indexed declaration into a container.

    Args:
        index_specs: The declaration's axes, in order. Later axes may depend
            on earlier ones.
        condition: Filter predicate over index names.
        lower: Lower bound, a constant or a function of index names.
        upper: Upper bound, a constant or a function of index names.
        build: Called as ``build(key, bounds)`` for every surviving tuple to
            create the stored entity. Without it the ``Bounds`` are stored.
        empty_domain: "warn", "error" or "ignore"; defaults to the
            ``containers.empty_domain`` setting.

    Returns:
        ResolvedContainer: The realized container.

    Raises:
        UnboundIndexReference: A function refers to an index not in scope.
        EmptyDomain: An axis is empty and the policy is "error".
        InconsistentBoundDirection: A lower bound exceeds its upper bound.
    """
    specs = prepare_specs(index_specs)
    names = index_names(specs)
    policy = empty_domain or config.get_container_config()["empty_domain"]
    if policy not in Config.EMPTY_DOMAIN_POLICIES:
        raise ValueError(
            f"Unknown empty domain policy {policy!r}, expected one of {list(Config.EMPTY_DOMAIN_POLICIES)}"
        )

    condition_fn = None
    if condition is not None:
        condition_fn = IndexFunction(condition, names, role="condition")
    lower_of = _bound_evaluator(lower, names, "lower")
    upper_of = _bound_evaluator(upper, names, "upper")

    kind = classify(specs, condition)
    _check_empty_domains(specs, policy)

    entries: Dict[Tuple[Any, ...], Any] = {}
    seen = [0] * len(specs)
    for key in _iter_tuples(specs, condition_fn, seen):
        scope = scope_of(specs, key)
        bounds = Bounds(lower_of(scope, key), upper_of(scope, key))
        if (
            bounds.lower is not None
            and bounds.upper is not None
            and bounds.lower > bounds.upper
        ):
            raise InconsistentBoundDirection(key, bounds.lower, bounds.upper)
        entries[key] = build(key, bounds) if build is not None else bounds

    if not entries:
        _check_empty_dependent_domains(specs, seen, policy)

    axes = None
    if kind is not ContainerKind.SPARSE_MAPPING:
        axes = [spec.values for spec in specs]

    container = ResolvedContainer(kind, [spec.name for spec in specs], entries, axes)
    logger.debug(f"Resolved {len(specs)}-axis declaration into {container!r}")
    return container
