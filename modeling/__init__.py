"""
Core module for the modeling primer.

Indexed containers for collections of decision variables and constraints,
and a small model facade over pulp.
"""

from modeling.containers import (
    Bounds,
    ContainerKind,
    DomainKind,
    IndexSpec,
    ResolvedContainer,
    classify,
    enumerate_tuples,
    resolve,
    span,
)
from modeling.errors import (
    DimensionMismatch,
    DuplicateName,
    EmptyDomain,
    InconsistentBoundDirection,
    KeyNotPresent,
    ModelingError,
    NoBound,
    OptimizeNotCalled,
    RepeatedIndexValue,
    UnboundIndexReference,
)
from modeling.model import Model, ResultStatus, Sense, TerminationStatus, dot

__all__ = [
    "Bounds",
    "ContainerKind",
    "DimensionMismatch",
    "DomainKind",
    "DuplicateName",
    "EmptyDomain",
    "InconsistentBoundDirection",
    "IndexSpec",
    "KeyNotPresent",
    "Model",
    "ModelingError",
    "NoBound",
    "OptimizeNotCalled",
    "RepeatedIndexValue",
    "ResolvedContainer",
    "ResultStatus",
    "Sense",
    "TerminationStatus",
    "UnboundIndexReference",
    "classify",
    "dot",
    "enumerate_tuples",
    "resolve",
    "span",
]
