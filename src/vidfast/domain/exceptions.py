"""Provider exceptions."""

from __future__ import annotations


class VidFastError(Exception):
    """Base class for all provider errors."""


class InvalidLinkDataError(VidFastError):
    """Raised when a link-data string cannot be decoded into a MediaRef."""


class ConfigError(VidFastError):
    """Raised when the configuration cannot be loaded."""
