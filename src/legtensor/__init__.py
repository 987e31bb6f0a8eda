from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _load_version

from .core.config import TensorConfig
from .core.exceptions import (
    DuplicateLegError,
    LegTensorError,
    MissingLegError,
    PositionError,
    ShapeError,
    UnknownLegError,
)
from .core.legs import Leg, LegRegistry, default_registry, display, leg, raw_leg
from .core.names import LegNamespace, predefined_leg_names, register_predefined
from .core.tensor import Tensor, format_tensor, zip_to_new

try:
    __version__ = _load_version("legtensor")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Tensor",
    "TensorConfig",
    "Leg",
    "LegRegistry",
    "LegNamespace",
    "default_registry",
    "display",
    "leg",
    "raw_leg",
    "predefined_leg_names",
    "register_predefined",
    "format_tensor",
    "zip_to_new",
    "LegTensorError",
    "ShapeError",
    "DuplicateLegError",
    "PositionError",
    "MissingLegError",
    "UnknownLegError",
    "__version__",
]
