"""
Index specifications for indexed declarations.

An index specification is one axis of a declaration such as
``x[i = 1:3, j = i:5]``: a name that bound, filter and rule functions can
refer to, and a domain of values. Domains are either static (a ``range`` or
any finite iterable of hashable values) or dependent, in which case the
domain is a function of the values of earlier indices.
"""

import inspect
import numbers
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from modeling.errors import ModelingError, RepeatedIndexValue, UnboundIndexReference


class DomainKind(Enum):
    """Shape of an index domain, the only thing classification looks at."""

    ONE_BASED = "one_based"
    CONTIGUOUS = "contiguous"
    ORDERED = "ordered"
    DEPENDENT = "dependent"


def span(first: int, last: int, step: int = 1) -> range:
    """
    Inclusive integer range, so ``span(1, n)`` reads like ``1:n``.

    Args:
        first: First value.
        last: Last value (included when reachable with ``step``).
        step: Step between values, must be non-zero.

    Returns:
        range: The equivalent Python range.
    """
    if step == 0:
        raise ValueError("span step must not be zero")
    return range(first, last + (1 if step > 0 else -1), step)


class IndexFunction:
    """
    A user function whose parameters are index names.

    Parameter names are checked against the indices in scope when the
    function is wrapped; calling it passes each name's current value as a
    keyword argument. Parameters with defaults may be left unbound and a
    ``**kwargs`` parameter receives every index in scope.
    """

    def __init__(self, fn: Callable, in_scope: Sequence[str], role: str = "function"):
        self.fn = fn
        self.role = role
        self.names: List[str] = []
        self.takes_all = False
        self.in_scope = tuple(in_scope)

        try:
            signature = inspect.signature(fn)
        except (TypeError, ValueError) as e:
            raise TypeError(f"Cannot inspect the parameters of the {role} {fn!r}") from e

        for param in signature.parameters.values():
            if param.kind is inspect.Parameter.VAR_KEYWORD:
                self.takes_all = True
            elif param.kind is inspect.Parameter.VAR_POSITIONAL:
                continue
            elif param.kind is inspect.Parameter.POSITIONAL_ONLY:
                raise TypeError(
                    f"The {role} parameter {param.name!r} is positional-only; "
                    "index values are passed by name"
                )
            elif param.name in self.in_scope:
                self.names.append(param.name)
            elif param.default is inspect.Parameter.empty:
                raise UnboundIndexReference(param.name, self.in_scope)

    def __call__(self, scope: Dict[str, Any]) -> Any:
        if self.takes_all:
            return self.fn(**scope)
        return self.fn(**{name: scope[name] for name in self.names})

    def __repr__(self):
        return f"IndexFunction({self.role}, names={self.names})"


def _static_kind(domain: Any) -> DomainKind:
    if isinstance(domain, range):
        if domain.step == 1:
            return DomainKind.ONE_BASED if domain.start == 1 else DomainKind.CONTIGUOUS
    return DomainKind.ORDERED


def materialize_domain(name: Optional[str], domain: Any) -> Tuple[Any, ...]:
    """
    Turn a static domain into a tuple of distinct hashable values.

    Args:
        name: Index name, used in error messages.
        domain: A range or finite iterable.

    Returns:
        Tuple[Any, ...]: The domain values in order.

    Raises:
        TypeError: If the domain is not iterable, is a string, or holds unhashable values.
        RepeatedIndexValue: If a value appears twice.
    """
    if isinstance(domain, range):
        return tuple(domain)

    if isinstance(domain, (str, bytes)):
        raise TypeError(
            f"Domain of index {name!r} is a string; wrap it in a list to use it as a single label"
        )

    if isinstance(domain, numbers.Integral) and not isinstance(domain, bool):
        return tuple(span(1, int(domain)))

    try:
        values = tuple(domain)
    except TypeError as e:
        raise TypeError(f"Domain of index {name!r} is not iterable: {domain!r}") from e

    seen = set()
    for value in values:
        try:
            if value in seen:
                raise RepeatedIndexValue(name, value)
        except TypeError as e:
            raise TypeError(f"Index value {value!r} of {name!r} is not hashable") from e
        seen.add(value)

    return values


class IndexSpec:
    """
    One axis of an indexed declaration.

    Args:
        name: Identifier bound within bound, filter and rule functions, or
            None for an anonymous axis.
        domain: A ``range``, an integer ``n`` (short for ``span(1, n)``), a
            finite iterable of hashable values, or a callable over earlier
            index names returning one of those.
    """

    def __init__(self, name: Optional[str], domain: Any):
        if name is not None and not (isinstance(name, str) and name.isidentifier()):
            raise ValueError(f"Index name must be a Python identifier, got {name!r}")

        self.name = name
        self.domain = domain
        self.values: Optional[Tuple[Any, ...]] = None
        self.rule: Optional[IndexFunction] = None

        if callable(domain) and not isinstance(domain, range):
            if _has_parameters(domain):
                self.kind = DomainKind.DEPENDENT
                return
            domain = domain()

        self.kind = _static_kind(domain)
        if isinstance(domain, numbers.Integral) and not isinstance(domain, bool):
            self.kind = DomainKind.ONE_BASED
        self.values = materialize_domain(name, domain)

    @property
    def is_dependent(self) -> bool:
        return self.kind is DomainKind.DEPENDENT

    def bind(self, earlier: Sequence[str]) -> None:
        """Check a dependent domain only refers to indices declared before it."""
        if self.is_dependent:
            self.rule = IndexFunction(self.domain, earlier, role=f"domain of {self.name!r}")

    def domain_for(self, scope: Dict[str, Any]) -> Tuple[Any, ...]:
        """Domain values given the values of the earlier indices."""
        if not self.is_dependent:
            return self.values
        return materialize_domain(self.name, self.rule(scope))

    def __repr__(self):
        if self.is_dependent:
            return f"IndexSpec({self.name!r}, <dependent>)"
        return f"IndexSpec({self.name!r}, {self.domain!r})"


def _has_parameters(fn: Callable) -> bool:
    try:
        return len(inspect.signature(fn).parameters) > 0
    except (TypeError, ValueError):
        return False


def prepare_specs(index_specs: Iterable[Any]) -> List[IndexSpec]:
    """
    Normalize a declaration's axes and bind dependent domains.

    Plain domains become anonymous axes. Each dependent domain may only
    refer to the names of the axes before it.

    Raises:
        ValueError: If there are no axes.
        ModelingError: If an index name is used twice.
        UnboundIndexReference: If a dependent domain refers to an unknown index.
    """
    specs = [s if isinstance(s, IndexSpec) else IndexSpec(None, s) for s in index_specs]
    if not specs:
        raise ValueError("An indexed declaration needs at least one index")

    earlier: List[str] = []
    for spec in specs:
        spec.bind(earlier)
        if spec.name is not None:
            if spec.name in earlier:
                raise ModelingError(f"Index name {spec.name!r} is used twice")
            earlier.append(spec.name)

    return specs


def index_names(specs: Sequence[IndexSpec]) -> List[str]:
    """Names of the named axes, in declaration order."""
    return [spec.name for spec in specs if spec.name is not None]


def scope_of(specs: Sequence[IndexSpec], key: Tuple[Any, ...]) -> Dict[str, Any]:
    """Map index names to the values of one index tuple."""
    return {spec.name: value for spec, value in zip(specs, key) if spec.name is not None}
