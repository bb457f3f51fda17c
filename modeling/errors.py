"""
Exceptions raised by the modeling primer.
"""


class ModelingError(Exception):
    """Base class for all modeling errors."""


class UnboundIndexReference(ModelingError):
    """A bound, filter, rule or dependent domain names an index that is not in scope."""

    def __init__(self, name: str, in_scope=()):
        self.name = name
        self.in_scope = tuple(in_scope)
        scope = ", ".join(self.in_scope) if self.in_scope else "none"
        super().__init__(f"Reference to unbound index {name!r} (indices in scope: {scope})")


class EmptyDomain(ModelingError):
    """An index domain enumerates to zero elements."""

    def __init__(self, name):
        self.name = name
        label = repr(name) if name is not None else "<anonymous>"
        super().__init__(f"Domain of index {label} is empty")


class InconsistentBoundDirection(ModelingError):
    """A lower bound evaluated greater than the upper bound."""

    def __init__(self, key, lower: float, upper: float):
        self.key = key
        self.lower = lower
        self.upper = upper
        super().__init__(f"Lower bound {lower} exceeds upper bound {upper} at index {key}")


class KeyNotPresent(ModelingError, KeyError):
    """Lookup of an index tuple that the container does not hold."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"Index {key} is not present in the container")

    def __str__(self):
        return self.args[0]


class RepeatedIndexValue(ModelingError):
    """A static domain lists the same value twice."""

    def __init__(self, name, value):
        self.name = name
        self.value = value
        super().__init__(f"Repeated value {value!r} in domain of index {name!r}")


class DuplicateName(ModelingError):
    """A variable or constraint name is already registered with the model."""


class NoBound(ModelingError):
    """Queried a bound that the variable does not have."""


class DimensionMismatch(ModelingError):
    """Matrix data does not line up with the variables it multiplies."""


class OptimizeNotCalled(ModelingError):
    """Queried a solution before the model was optimized."""
