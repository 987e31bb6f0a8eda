from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np

_ZIP_CHECKS = {"size", "shape"}


@dataclass
class TensorConfig:
    """
    Validation switches shared by every tensor built with the same config.

    Key behaviors:
    * ``check_bounds`` rejects coordinates outside ``[0, extent)`` before the
      flat index is computed. With it off, a coordinate past its extent
      wraps into the next axis (``(0, 3)`` on ``[2, 3]`` reads ``(1, 0)``);
      only a flat index outside the buffer is still rejected.
    * ``allow_duplicate_legs`` accepts repeated legs at construction; leg-keyed
      access on such a tensor still fails.
    * ``allow_extra_legs`` lets leg-keyed mappings carry legs the tensor does
      not have (they are ignored).
    * ``zip_check`` selects the binary transform precondition: ``"size"`` only
      compares element counts, ``"shape"`` also requires equal extents and leg
      order.
    """

    check_bounds: bool = True
    allow_duplicate_legs: bool = False
    allow_extra_legs: bool = True
    zip_check: str = "size"  # "size" | "shape"
    default_dtype: str = "float64"

    def normalized(self) -> "TensorConfig":
        zip_check = (self.zip_check or "size").lower()
        if zip_check not in _ZIP_CHECKS:
            raise ValueError(f"Unsupported zip check: {self.zip_check}")
        try:
            dtype = np.dtype(self.default_dtype or "float64")
        except TypeError as exc:
            raise ValueError(f"Unsupported default dtype: {self.default_dtype}") from exc
        return replace(
            self,
            check_bounds=bool(self.check_bounds),
            allow_duplicate_legs=bool(self.allow_duplicate_legs),
            allow_extra_legs=bool(self.allow_extra_legs),
            zip_check=zip_check,
            default_dtype=dtype.name,
        )

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.default_dtype)


DEFAULT_CONFIG = TensorConfig()
