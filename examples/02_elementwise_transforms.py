"""Elementwise transforms on tensors that share leg identities."""

from __future__ import annotations

import numpy as np

from legtensor import LegRegistry, Tensor, TensorConfig, zip_to_new


def main() -> None:
    registry = LegRegistry()
    config = TensorConfig(zip_check="shape")
    rng = np.random.default_rng(0)

    a = Tensor([3, 2], ["Phy", "Right"], registry=registry, config=config)
    a.generate(rng.standard_normal)
    b = a.map_to_new(lambda x: x * x)
    b.zip_in_place(lambda x, y: x - y, a)
    norms = zip_to_new(lambda x, y: (x * x + y * y) ** 0.5, a, b)

    labels = norms.map_to_new(lambda x: "big" if x > 1.0 else "small", dtype=object)
    for position in labels.positions():
        print(position, round(float(norms[position]), 3), labels[position])


if __name__ == "__main__":
    main()
