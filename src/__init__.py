# src/__init__.py — v1
"""varletmeta — versioned Varlet UI component metadata with a durable local cache."""

from varletmeta.version import __version__

__all__ = ["__version__"]
