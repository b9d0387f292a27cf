"""Errors raised while loading the options file and its environment values."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when the options file is unreadable or a source cannot be resolved."""


class MissingConfigurationError(ConfigurationError):
    """Raised when a required environment variable (or ``${NAME}`` value) is unset or blank."""
