"""Exceptions raised by coldwave."""

from __future__ import annotations


class ColdwaveError(Exception):
    """Base class for all coldwave errors."""


class InvalidPathError(ColdwaveError, ValueError):
    """Raised when an album path has fewer than two segments."""


class EngineError(ColdwaveError):
    """Raised by a playback engine when an item cannot be loaded."""
