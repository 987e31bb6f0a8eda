from __future__ import annotations

import itertools
import logging
import numbers
import operator
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import DEFAULT_CONFIG, TensorConfig
from .exceptions import (
    DuplicateLegError,
    MissingLegError,
    PositionError,
    ShapeError,
    UnknownLegError,
)
from .legs import Leg, LegLike, LegRegistry, default_registry, raw_leg

logger = logging.getLogger(__name__)

Position = Tuple[int, ...]
LegMapping = Mapping
Key = Union[Sequence[int], int, LegMapping]


def _prod(values: Sequence[int]) -> int:
    result = 1
    for value in values:
        result *= int(value)
    return int(result)


def _row_major_strides(extents: Sequence[int]) -> Position:
    strides = [1] * len(extents)
    for axis in range(len(extents) - 2, -1, -1):
        strides[axis] = strides[axis + 1] * extents[axis + 1]
    return tuple(strides)


def _as_extent(value: Any) -> int:
    try:
        extent = operator.index(value)
    except TypeError:
        raise ShapeError(f"Extent {value!r} is not an integer") from None
    if extent < 0:
        raise ShapeError(f"Extent {extent} is negative")
    return int(extent)


def _as_position(position: Any) -> Position:
    if isinstance(position, np.ndarray):
        position = position.tolist()
    if not isinstance(position, (tuple, list)):
        position = (position,)
    try:
        return tuple(int(operator.index(coord)) for coord in position)
    except TypeError:
        raise PositionError(f"Position {position!r} must contain integers") from None


def _duplicates(legs: Sequence[Leg]) -> List[Leg]:
    seen = set()
    dupes: List[Leg] = []
    for leg in legs:
        if leg in seen and leg not in dupes:
            dupes.append(leg)
        seen.add(leg)
    return dupes


_NUMERIC_KINDS = {"i", "f", "c"}


def _value_kind(value: Any) -> Optional[str]:
    if isinstance(value, (bool, np.bool_)):
        return "b"
    if isinstance(value, numbers.Integral):
        return "i"
    if isinstance(value, numbers.Real):
        return "f"
    if isinstance(value, numbers.Complex):
        return "c"
    if isinstance(value, str):
        return "U"
    if isinstance(value, bytes):
        return "S"
    return None


def _infer_dtype(values: List[Any], dtype: Any, fallback: np.dtype) -> np.dtype:
    if dtype is not None:
        return np.dtype(dtype)
    if not values:
        return fallback
    # Only numeric kinds may be promoted to a common dtype; any other mix
    # would coerce values (True -> 1, 1 -> "1"), so those stay objects.
    kinds = {_value_kind(value) for value in values}
    if None in kinds or (len(kinds) > 1 and not kinds <= _NUMERIC_KINDS):
        return np.dtype(object)
    try:
        arr = np.asarray(values)
    except (ValueError, OverflowError):
        return np.dtype(object)
    if arr.ndim != 1:
        return np.dtype(object)
    return arr.dtype


def _fill(buffer: np.ndarray, values: Sequence[Any]) -> None:
    for k, value in enumerate(values):
        buffer[k] = value


class Tensor:
    """Dense tensor whose axes are addressed by :class:`Leg` identity.

    The buffer is a flat row-major ``numpy.ndarray`` (last axis fastest).
    Elements can be addressed by position, ``t[1, 2, 3]`` or ``t[(1, 2, 3)]``,
    or by a leg-keyed mapping, ``t[{Up: 1, Down: 2, Left: 3}]``, which does not
    depend on the order the legs were declared in.
    """

    def __init__(
        self,
        extents: Sequence[int],
        legs: Sequence[LegLike],
        dtype: Any = None,
        *,
        registry: Optional[LegRegistry] = None,
        config: Optional[TensorConfig] = None,
    ):
        self.config = (config if config is not None else DEFAULT_CONFIG).normalized()
        self.registry = registry if registry is not None else default_registry()
        extents = tuple(_as_extent(extent) for extent in extents)
        legs = tuple(self.registry.resolve(leg) for leg in legs)
        if len(extents) != len(legs):
            raise ShapeError(
                f"Got {len(extents)} extents but {len(legs)} legs",
                extents=extents,
            )
        dupes = _duplicates(legs)
        if dupes and not self.config.allow_duplicate_legs:
            names = ", ".join(self.registry.display(leg) for leg in dupes)
            raise DuplicateLegError(f"Duplicate legs in tensor: {names}", extents=extents)

        self.extents: Position = extents
        self.legs: Tuple[Leg, ...] = legs
        self.rank = len(extents)
        self.size = _prod(extents)
        self.dtype = np.dtype(dtype) if dtype is not None else self.config.dtype
        self.data = np.zeros(self.size, dtype=self.dtype)
        self._strides = _row_major_strides(extents)
        self._has_duplicates = bool(dupes)
        logger.debug(
            "Created tensor extents=%s legs=%s dtype=%s",
            list(extents),
            self.leg_names(),
            self.dtype,
        )

    # Construction helpers -------------------------------------------------

    @classmethod
    def from_numpy(
        cls,
        array: Any,
        legs: Sequence[LegLike],
        *,
        registry: Optional[LegRegistry] = None,
        config: Optional[TensorConfig] = None,
    ) -> "Tensor":
        arr = np.asarray(array)
        tensor = cls(arr.shape, legs, arr.dtype, registry=registry, config=config)
        tensor.data[...] = arr.reshape(-1)
        return tensor

    def _like(self, dtype: Any = None) -> "Tensor":
        return Tensor(
            self.extents,
            self.legs,
            self.dtype if dtype is None else dtype,
            registry=self.registry,
            config=self.config,
        )

    def copy(self) -> "Tensor":
        result = self._like()
        result.data[...] = self.data
        return result

    def to_numpy(self) -> np.ndarray:
        return self.data.reshape(self.extents).copy()

    # Index arithmetic -----------------------------------------------------

    @property
    def strides(self) -> Position:
        return self._strides

    def flat_index(self, position: Any) -> int:
        position = _as_position(position)
        if len(position) != self.rank:
            raise PositionError(
                f"Expected {self.rank} coordinates, got {len(position)}",
                position=position,
            )
        index = 0
        for axis, (coord, extent) in enumerate(zip(position, self.extents)):
            if self.config.check_bounds and not 0 <= coord < extent:
                raise PositionError(
                    f"Coordinate {coord} outside extent {extent}",
                    position=position,
                    axis=axis,
                )
            index = index * extent + coord
        if not 0 <= index < self.size:
            raise PositionError(
                f"Flat index {index} outside buffer of size {self.size}",
                position=position,
            )
        return index

    def unravel(self, flat: int) -> Position:
        flat = int(operator.index(flat))
        if not 0 <= flat < self.size:
            raise PositionError(f"Flat index {flat} outside buffer of size {self.size}")
        position = []
        for extent in reversed(self.extents):
            flat, coord = divmod(flat, extent)
            position.append(coord)
        return tuple(reversed(position))

    def positions(self) -> Iterator[Position]:
        """Yield every position in storage order."""
        return itertools.product(*(range(extent) for extent in self.extents))

    def axis_of(self, leg: LegLike) -> int:
        resolved = self._lookup_leg(leg)
        if resolved is not None:
            for axis, candidate in enumerate(self.legs):
                if candidate == resolved:
                    return axis
        raise UnknownLegError(f"Tensor has no leg {leg!r}", unknown=(leg,))

    def _lookup_leg(self, leg: LegLike) -> Optional[Leg]:
        # Names are resolved read-only so lookups never grow the registry.
        if isinstance(leg, Leg):
            return leg
        if isinstance(leg, str):
            return self.registry.lookup(leg)
        if isinstance(leg, int) and not isinstance(leg, bool):
            return raw_leg(leg)
        return None

    def position_of(self, mapping: LegMapping) -> Position:
        if self._has_duplicates:
            raise DuplicateLegError(
                "Leg-keyed access is ambiguous on a tensor with duplicate legs",
                extents=self.extents,
            )
        resolved: Dict[Leg, int] = {}
        unknown: List[Any] = []
        for key, coord in mapping.items():
            leg = self._lookup_leg(key)
            if leg is None:
                unknown.append(key)
            elif leg in resolved:
                raise DuplicateLegError(
                    f"Mapping names leg {self.registry.display(leg)} more than once",
                    extents=self.extents,
                )
            else:
                resolved[leg] = coord
        missing = [leg for leg in self.legs if leg not in resolved]
        if missing:
            names = ", ".join(self.registry.display(leg) for leg in missing)
            raise MissingLegError(f"Mapping is missing legs: {names}", missing=missing)
        if not self.config.allow_extra_legs:
            own = set(self.legs)
            unknown.extend(leg for leg in resolved if leg not in own)
            if unknown:
                names = ", ".join(str(key) for key in unknown)
                raise UnknownLegError(f"Mapping names legs not in tensor: {names}", unknown=unknown)
        return tuple(resolved[leg] for leg in self.legs)

    def _flat_for(self, key: Key) -> int:
        if isinstance(key, Mapping):
            return self.flat_index(self.position_of(key))
        return self.flat_index(key)

    # Element access -------------------------------------------------------

    def __getitem__(self, key: Key) -> Any:
        return self.data[self._flat_for(key)]

    def __setitem__(self, key: Key, value: Any) -> None:
        self.data[self._flat_for(key)] = value

    def get(self, key: Key) -> Any:
        return self[key]

    def set(self, key: Key, value: Any) -> None:
        self[key] = value

    # Bulk operations ------------------------------------------------------

    def _assign(self, values: Sequence[Any]) -> None:
        staged = np.empty_like(self.data)
        _fill(staged, values)
        self.data[...] = staged

    def generate(self, producer: Callable[[], Any]) -> "Tensor":
        """Overwrite every element, in storage order, with ``producer()``."""
        for k in range(self.size):
            self.data[k] = producer()
        return self

    def map_in_place(self, fn: Callable[[Any], Any]) -> "Tensor":
        values = [fn(value) for value in self.data.tolist()]
        self._assign(values)
        return self

    def map_to_new(self, fn: Callable[[Any], Any], dtype: Any = None) -> "Tensor":
        values = [fn(value) for value in self.data.tolist()]
        result = self._like(_infer_dtype(values, dtype, self.dtype))
        _fill(result.data, values)
        return result

    def zip_in_place(self, fn: Callable[[Any, Any], Any], other: "Tensor") -> "Tensor":
        _check_zip(self, other, self.config)
        values = [fn(x, y) for x, y in zip(self.data.tolist(), other.data.tolist())]
        self._assign(values)
        return self

    @staticmethod
    def zip_to_new(
        fn: Callable[[Any, Any], Any],
        a: "Tensor",
        b: "Tensor",
        dtype: Any = None,
    ) -> "Tensor":
        """Combine ``a`` and ``b`` flat-index-wise into a tensor shaped like ``a``."""
        _check_zip(a, b, a.config)
        values = [fn(x, y) for x, y in zip(a.data.tolist(), b.data.tolist())]
        result = a._like(_infer_dtype(values, dtype, a.dtype))
        _fill(result.data, values)
        return result

    # Presentation ---------------------------------------------------------

    def leg_names(self) -> List[str]:
        return [self.registry.display(leg) for leg in self.legs]

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Any]:
        return iter(self.data)

    def __repr__(self) -> str:
        return (
            f"Tensor(extents={list(self.extents)}, legs={self.leg_names()}, "
            f"dtype={self.dtype.name})"
        )


zip_to_new = Tensor.zip_to_new


def _check_zip(a: Tensor, b: Tensor, config: TensorConfig) -> None:
    if a.size != b.size:
        raise ShapeError(
            f"Binary transform needs equal element counts, got {a.size} and {b.size}",
            extents=a.extents,
            other=b.extents,
        )
    if config.zip_check == "shape" and (a.extents != b.extents or a.legs != b.legs):
        raise ShapeError(
            "Binary transform needs matching extents and leg order",
            extents=a.extents,
            other=b.extents,
        )


def _format_value(value: Any) -> str:
    if isinstance(value, (float, np.floating)):
        return format(value, "g")
    return str(value)


def format_tensor(tensor: Tensor, order: Optional[Sequence[LegLike]] = None) -> str:
    """Render ``tensor`` through leg-keyed reads, walking legs in ``order``.

    The last leg varies along a row, the second to last separates groups
    with ``", "``, and every combination of the remaining legs gets its own
    line.
    """
    axes = range(tensor.rank) if order is None else [tensor.axis_of(leg) for leg in order]
    legs = tuple(tensor.legs[axis] for axis in axes)
    extents = tuple(tensor.extents[axis] for axis in axes)
    if len(set(axes)) != len(axes) or len(axes) != tensor.rank:
        raise ShapeError("Display order must name every leg exactly once", extents=tensor.extents)
    if not legs:
        return _format_value(tensor[()])

    def read(position: Sequence[int]) -> str:
        return _format_value(tensor[dict(zip(legs, position))])

    if len(legs) == 1:
        return " ".join(read((k,)) for k in range(extents[0]))

    lines = []
    for head in itertools.product(*(range(extent) for extent in extents[:-2])):
        groups = []
        for j in range(extents[-2]):
            groups.append(" ".join(read(head + (j, k)) for k in range(extents[-1])))
        lines.append(", ".join(groups))
    return "\n".join(lines)
