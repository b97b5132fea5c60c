"""Errors surfaced by the asset search layer."""

from typing import Optional


class ConfigurationError(Exception):
    """Provider credential or selection is missing. Raised before any network call."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ProviderRequestFailed(Exception):
    """Upstream provider call failed (transport error or non-2xx response)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code or 500
        super().__init__(f"[{self.status_code}] {message}")
