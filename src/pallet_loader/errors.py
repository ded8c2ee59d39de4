"""Exceptions raised by the pallet loader."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Pallet, settings or request values that cannot produce valid geometry."""

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.details = details or [message]
