from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

logger = logging.getLogger(__name__)

UNNAMED_PREFIX = "UserDefinedLeg"


@dataclass(frozen=True, order=True)
class Leg:
    """Identity of a tensor axis.

    Equality, hashing and ordering only look at ``id``; ``name`` is a display
    hint attached by the registry that allocated the identity.
    """

    id: int
    name: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.name if self.name is not None else f"{UNNAMED_PREFIX}{self.id}"

    def __repr__(self) -> str:
        if self.name is None:
            return f"Leg({self.id})"
        return f"Leg({self.id}, {self.name!r})"


LegLike = Union[Leg, str, int]


def raw_leg(leg_id: int) -> Leg:
    """Build an identity from an integer without touching any registry."""
    if isinstance(leg_id, bool) or not isinstance(leg_id, int):
        raise TypeError(f"Leg id must be an int, got {type(leg_id).__name__}")
    return Leg(int(leg_id))


class LegRegistry:
    """Bidirectional name <-> id table with on-demand allocation.

    A registry is an ordinary object: create one per session and pass it to
    the tensors that should share leg names, or rely on
    :func:`default_registry` for process-wide names. Allocation is guarded by a
    lock so concurrent callers always see a bijection.
    """

    def __init__(self, first_id: int = 0):
        self._first_id = int(first_id)
        self._next_id = self._first_id
        self._name_to_id: Dict[str, int] = {}
        self._id_to_name: Dict[int, str] = {}
        self._lock = threading.Lock()

    def identity_for_name(self, name: str) -> Leg:
        if not isinstance(name, str):
            raise TypeError(f"Leg name must be a string, got {type(name).__name__}")
        with self._lock:
            leg_id = self._name_to_id.get(name)
            if leg_id is None:
                leg_id = self._next_id
                self._next_id += 1
                self._name_to_id[name] = leg_id
                self._id_to_name[leg_id] = name
                logger.debug("Allocated leg %r with id %d", name, leg_id)
        return Leg(leg_id, name)

    leg = identity_for_name

    def __call__(self, name: str) -> Leg:
        return self.identity_for_name(name)

    @staticmethod
    def identity_from_raw(leg_id: int) -> Leg:
        return raw_leg(leg_id)

    def lookup(self, name: str) -> Optional[Leg]:
        with self._lock:
            leg_id = self._name_to_id.get(name)
        if leg_id is None:
            return None
        return Leg(leg_id, name)

    def name_of(self, leg_id: int) -> Optional[str]:
        with self._lock:
            return self._id_to_name.get(int(leg_id))

    def display(self, leg: Leg) -> str:
        name = self.name_of(leg.id)
        if name is not None:
            return name
        return str(leg)

    def resolve(self, leg: LegLike) -> Leg:
        if isinstance(leg, Leg):
            return leg
        if isinstance(leg, str):
            return self.identity_for_name(leg)
        if isinstance(leg, int) and not isinstance(leg, bool):
            return raw_leg(leg)
        raise TypeError(f"Cannot interpret {leg!r} as a leg")

    def names(self) -> List[str]:
        with self._lock:
            return [self._id_to_name[i] for i in sorted(self._id_to_name)]

    def reset(self) -> None:
        with self._lock:
            count = len(self._name_to_id)
            self._name_to_id.clear()
            self._id_to_name.clear()
            self._next_id = self._first_id
        logger.debug("Reset leg registry (%d names dropped)", count)

    def __contains__(self, item: object) -> bool:
        with self._lock:
            if isinstance(item, Leg):
                return item.id in self._id_to_name
            return item in self._name_to_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._name_to_id)

    def __iter__(self) -> Iterator[Leg]:
        with self._lock:
            items = sorted(self._id_to_name.items())
        return iter([Leg(leg_id, name) for leg_id, name in items])

    def __repr__(self) -> str:
        return f"LegRegistry(size={len(self)})"


_DEFAULT_REGISTRY: Optional[LegRegistry] = None
_DEFAULT_LOCK = threading.Lock()


def default_registry() -> LegRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _DEFAULT_REGISTRY
    with _DEFAULT_LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = LegRegistry()
        return _DEFAULT_REGISTRY


def leg(name: str, registry: Optional[LegRegistry] = None) -> Leg:
    if registry is None:
        registry = default_registry()
    return registry.identity_for_name(name)


def display(value: Leg, registry: Optional[LegRegistry] = None) -> str:
    if registry is None:
        registry = default_registry()
    return registry.display(value)
