from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple


class LegTensorError(Exception):
    """Base class for legtensor-specific exceptions."""


class ShapeError(LegTensorError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        extents: Optional[Sequence[int]] = None,
        other: Optional[Sequence[int]] = None,
    ):
        detail = _format_extents(extents, other)
        super().__init__(f"{message}{detail}")
        self.extents = tuple(extents) if extents is not None else None
        self.other = tuple(other) if other is not None else None


class DuplicateLegError(ShapeError):
    pass


class PositionError(LegTensorError, IndexError):
    def __init__(
        self,
        message: str,
        *,
        position: Optional[Sequence[int]] = None,
        axis: Optional[int] = None,
    ):
        detail = ""
        if position is not None:
            detail = f" (position {tuple(position)}"
            if axis is not None:
                detail += f", axis {axis}"
            detail += ")"
        super().__init__(f"{message}{detail}")
        self.position = tuple(position) if position is not None else None
        self.axis = axis


class MissingLegError(LegTensorError, KeyError):
    def __init__(self, message: str, *, missing: Iterable = ()):
        super().__init__(message)
        self.message = message
        self.missing: Tuple = tuple(missing)

    def __str__(self) -> str:
        return self.message


class UnknownLegError(LegTensorError, KeyError):
    def __init__(self, message: str, *, unknown: Iterable = ()):
        super().__init__(message)
        self.message = message
        self.unknown: Tuple = tuple(unknown)

    def __str__(self) -> str:
        return self.message


def _format_extents(
    extents: Optional[Sequence[int]],
    other: Optional[Sequence[int]],
) -> str:
    if extents is None:
        return ""
    if other is None:
        return f" (extents {list(extents)})"
    return f" (extents {list(extents)} vs {list(other)})"
