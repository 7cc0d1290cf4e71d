"""Error types shared by the ingestion and cross-posting services."""

from __future__ import annotations


class TransportError(RuntimeError):
    """Network failure or non-2xx response from an external API."""

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ConfigurationMissing(ValueError):
    """A required credential or setting is not configured."""
