"""Setuptools build hooks for legtensor."""

from __future__ import annotations

from setuptools import setup

# Metadata lives in pyproject.toml; the package is pure Python, so the default
# command classes are kept and wheels come out as ``py3-none-any``.
setup()
