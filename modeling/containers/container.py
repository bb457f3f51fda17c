"""
Resolved containers for indexed declarations.
"""

import numbers
import numpy as np
import pandas as pd
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple
from modeling.errors import KeyNotPresent, ModelingError


class ContainerKind(Enum):
    """How a declaration's entities are stored and looked up."""

    DENSE_ARRAY = "DenseArray"
    AXIS_ARRAY = "AxisArray"
    SPARSE_MAPPING = "SparseMapping"


@dataclass(frozen=True)
class Bounds:
    """Lower and upper bound evaluated for one index tuple. None means unbounded."""

    lower: Optional[float] = None
    upper: Optional[float] = None


class ResolvedContainer:
    """
    The collection produced by resolving one indexed declaration.

    A single class tagged with its ``kind``. ``DENSE_ARRAY`` and
    ``AXIS_ARRAY`` keep entities in a numpy object array: dense containers
    are addressed by one-based integer offsets, axis containers through a
    label to offset map per axis. ``SPARSE_MAPPING`` keeps a dict holding
    only the index tuples that survived filtering.

    Entries can be reassigned but the set of keys never changes.
    """

    __hash__ = None

    def __init__(
        self,
        kind: ContainerKind,
        names: Sequence[Optional[str]],
        entries: Dict[Tuple[Any, ...], Any],
        axes: Optional[Sequence[Sequence[Any]]] = None,
    ):
        """
        Args:
            kind: Container kind.
            names: Index name of each axis (None for anonymous axes).
            entries: Entity for each index tuple, in enumeration order.
            axes: Ordered domain of each axis; required for dense and axis kinds.
        """
        self.kind = kind
        self.names = tuple(names)
        self._data: Optional[Dict[Tuple[Any, ...], Any]] = None
        self._array: Optional[np.ndarray] = None
        self._axes: Optional[Tuple[Tuple[Any, ...], ...]] = None
        self._offsets: List[Dict[Any, int]] = []

        if kind is ContainerKind.SPARSE_MAPPING:
            self._data = dict(entries)
            return

        if axes is None or len(axes) != len(self.names):
            raise ModelingError(f"{kind.value} needs one domain per axis")

        self._axes = tuple(tuple(axis) for axis in axes)
        self._offsets = [
            {label: pos for pos, label in enumerate(axis)} for axis in self._axes
        ]
        self._array = np.empty(tuple(len(axis) for axis in self._axes), dtype=object)
        for key, entity in entries.items():
            self._array[self._locate(key)] = entity

    @property
    def ndim(self) -> int:
        return len(self.names)

    @property
    def axes(self) -> Optional[Tuple[Tuple[Any, ...], ...]]:
        """Axis domains for dense and axis kinds; None for sparse mappings."""
        return self._axes

    @property
    def shape(self) -> Optional[Tuple[int, ...]]:
        return None if self._array is None else self._array.shape

    def _normalize_key(self, key: Any) -> Tuple[Any, ...]:
        if not isinstance(key, tuple):
            key = (key,)
        if len(key) != self.ndim:
            raise KeyNotPresent(key)
        return key

    def _locate(self, key: Tuple[Any, ...]) -> Tuple[int, ...]:
        if self.kind is ContainerKind.DENSE_ARRAY:
            offsets = []
            for label, size in zip(key, self._array.shape):
                if (
                    isinstance(label, bool)
                    or not isinstance(label, numbers.Integral)
                    or not 1 <= label <= size
                ):
                    raise KeyNotPresent(key)
                offsets.append(int(label) - 1)
            return tuple(offsets)

        try:
            return tuple(
                offsets[label] for offsets, label in zip(self._offsets, key)
            )
        except (KeyError, TypeError):
            raise KeyNotPresent(key) from None

    def __getitem__(self, key: Any) -> Any:
        key = self._normalize_key(key)
        if self.kind is ContainerKind.SPARSE_MAPPING:
            try:
                return self._data[key]
            except (KeyError, TypeError):
                raise KeyNotPresent(key) from None
        return self._array[self._locate(key)]

    def __setitem__(self, key: Any, value: Any) -> None:
        key = self._normalize_key(key)
        if self.kind is ContainerKind.SPARSE_MAPPING:
            if key not in self._data:
                raise KeyNotPresent(key)
            self._data[key] = value
        else:
            self._array[self._locate(key)] = value

    def __contains__(self, key: Any) -> bool:
        try:
            self[key]
        except KeyNotPresent:
            return False
        return True

    def keys(self) -> Iterator[Tuple[Any, ...]]:
        """Index tuples in enumeration order."""
        if self.kind is ContainerKind.SPARSE_MAPPING:
            yield from self._data.keys()
            return
        for offsets in np.ndindex(*self._array.shape):
            yield tuple(axis[pos] for axis, pos in zip(self._axes, offsets))

    def values(self) -> Iterator[Any]:
        for key in self.keys():
            yield self[key]

    def items(self) -> Iterator[Tuple[Tuple[Any, ...], Any]]:
        for key in self.keys():
            yield key, self[key]

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        return self.keys()

    def __len__(self) -> int:
        if self.kind is ContainerKind.SPARSE_MAPPING:
            return len(self._data)
        return int(self._array.size)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ResolvedContainer):
            return NotImplemented
        return (
            self.kind is other.kind
            and self.names == other.names
            and self._axes == other._axes
            and list(self.items()) == list(other.items())
        )

    def map(self, fn: Callable[[Any], Any]) -> "ResolvedContainer":
        """New container of the same kind and keys holding ``fn(entity)``."""
        return self.map_items(lambda key, value: fn(value))

    def map_items(self, fn: Callable[[Tuple[Any, ...], Any], Any]) -> "ResolvedContainer":
        """Like ``map`` but calls ``fn(key, entity)``."""
        entries = {key: fn(key, value) for key, value in self.items()}
        return ResolvedContainer(self.kind, self.names, entries, self._axes)

    def to_numpy(self) -> np.ndarray:
        """Copy of the underlying object array (dense and axis kinds only)."""
        if self._array is None:
            raise ModelingError("A SparseMapping has no array form")
        return self._array.copy()

    def to_series(self, name: Optional[str] = None) -> pd.Series:
        """
        Entities as a pandas Series indexed by the index tuples.

        One-dimensional containers get a flat index, others a MultiIndex
        whose level names are the index names.
        """
        keys = list(self.keys())
        values = [self[key] for key in keys]

        if self.ndim == 1:
            index = pd.Index([key[0] for key in keys], name=self.names[0])
        else:
            levels = [list(level) for level in zip(*keys)] or [[] for _ in self.names]
            index = pd.MultiIndex.from_arrays(levels, names=list(self.names))

        if not values:
            return pd.Series(values, index=index, name=name, dtype=object)
        return pd.Series(values, index=index, name=name)

    def __repr__(self):
        if self.kind is ContainerKind.SPARSE_MAPPING:
            return f"SparseMapping with {len(self)} entries over {self.names}"
        dims = " x ".join(str(n) for n in self._array.shape)
        return f"{self.kind.value} {dims} over {self.names}"
