"""
Containers for indexed collections of variables and constraints.
"""

from modeling.containers.container import Bounds, ContainerKind, ResolvedContainer
from modeling.containers.index import DomainKind, IndexFunction, IndexSpec, span
from modeling.containers.resolver import classify, enumerate_tuples, resolve

__all__ = [
    "Bounds",
    "ContainerKind",
    "DomainKind",
    "IndexFunction",
    "IndexSpec",
    "ResolvedContainer",
    "classify",
    "enumerate_tuples",
    "resolve",
    "span",
]
