"""Error taxonomy for Character Keeper.

Every error a request can produce derives from `KeeperError` and carries
the HTTP status it maps to. Routers raise these; the exception handler
registered in `keeper_lib.main` renders them as the `{"error": ...}`
envelope. `ConfigurationError` is startup-only and never reaches a request.
"""
from __future__ import annotations


class KeeperError(Exception):
    status_code: int = 500
    default_message: str = "internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(KeeperError):
    status_code = 400
    default_message = "invalid request"


class NotFoundError(KeeperError):
    status_code = 404
    default_message = "not found"


class SerializationError(KeeperError):
    default_message = "failed to serialize data"


class CorruptDataError(KeeperError):
    default_message = "corrupted data in storage"


class BackendError(KeeperError):
    default_message = "storage backend unavailable"


class UpstreamError(KeeperError):
    status_code = 502
    default_message = "failed to fetch url"


class ReadError(KeeperError):
    default_message = "failed to read response"


class ConfigurationError(Exception):
    """Raised while building the application when it cannot be configured."""
