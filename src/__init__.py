# src/__init__.py — v1
"""Content-originality assessment: own-corpus and web similarity checks."""

from originality.version import __version__

__all__ = ["__version__"]
