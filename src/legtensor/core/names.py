from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from .legs import Leg, LegRegistry, default_registry

DIRECTIONS = (
    "Phy",
    "Left",
    "Right",
    "Up",
    "Down",
    "LeftUp",
    "LeftDown",
    "RightUp",
    "RightDown",
)
SUFFIXES = ("",) + tuple(str(n) for n in range(1, 10))


def predefined_leg_names() -> List[str]:
    # Directional legs first, then Leg0..Leg9 and Leg10..Leg99.
    names = [f"{direction}{suffix}" for suffix in SUFFIXES for direction in DIRECTIONS]
    names.extend(f"Leg{prefix}{digit}" for prefix in SUFFIXES for digit in range(10))
    return names


class LegNamespace:
    """Attribute access to a fixed set of registered legs (``legs.Up``)."""

    def __init__(self, legs: Dict[str, Leg]):
        self._legs = dict(legs)

    def __getattr__(self, name: str) -> Leg:
        try:
            return self.__dict__["_legs"][name]
        except KeyError:
            raise AttributeError(f"No predefined leg named {name!r}") from None

    def __getitem__(self, name: str) -> Leg:
        return self._legs[name]

    def __contains__(self, name: object) -> bool:
        return name in self._legs

    def __iter__(self) -> Iterator[str]:
        return iter(self._legs)

    def __len__(self) -> int:
        return len(self._legs)

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._legs))

    def as_dict(self) -> Dict[str, Leg]:
        return dict(self._legs)


def register_predefined(registry: Optional[LegRegistry] = None) -> LegNamespace:
    if registry is None:
        registry = default_registry()
    return LegNamespace({name: registry.identity_for_name(name) for name in predefined_leg_names()})
