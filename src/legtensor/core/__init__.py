"""Core modules for legtensor."""

__all__ = [
    "config",
    "exceptions",
    "legs",
    "names",
    "tensor",
]
