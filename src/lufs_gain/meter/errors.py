"""Errors raised by the loudness meter."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a meter is constructed or reconfigured with invalid parameters."""


class BufferSizeError(ValueError):
    """Raised when fed sample data does not cover the requested frame count."""
