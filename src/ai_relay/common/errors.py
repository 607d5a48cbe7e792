"""Error types shared by the relay."""
from __future__ import annotations


class RelayError(Exception):
    """Base class for relay errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RelayError):
    """Client supplied insufficient input. Rendered as HTTP 400."""


class GenerationError(RelayError):
    """The provider call failed (auth, quota, safety block, network). Rendered as HTTP 500."""


class ConfigError(RelayError):
    """Process configuration is unusable; raised at startup only."""
