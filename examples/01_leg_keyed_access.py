"""Fill a rank-3 tensor with a counter and read it back by leg name."""

from __future__ import annotations

import itertools

from legtensor import LegRegistry, Tensor, format_tensor, register_predefined


def main() -> None:
    registry = LegRegistry()
    legs = register_predefined(registry)

    t = Tensor([2, 3, 4], [legs.Up, legs.Down, legs.Left], registry=registry)
    counter = itertools.count()
    t.generate(lambda: next(counter))

    # Axis order in the mapping does not matter.
    assert t[{legs.Left: 3, legs.Down: 2, legs.Up: 1}] == 23
    print(format_tensor(t))
    print()
    print(format_tensor(t, order=[legs.Left, legs.Down, legs.Up]))


if __name__ == "__main__":
    main()
