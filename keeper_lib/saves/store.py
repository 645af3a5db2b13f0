"""DocumentStore: key-addressed character saves with a 30 day TTL.

Documents are opaque JSON values. Each one lives in the backing engine
under `user_save:<key>` and every save replaces the previous value and
restarts its expiry.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from keeper_lib.errors import CorruptDataError, NotFoundError, SerializationError, ValidationError
from keeper_lib.storage.interfaces import EngineProtocol
from keeper_lib.storage.serializer import JSONSerializer, Serializer
from keeper_lib.util import utc_now

logger = logging.getLogger(__name__)

KEY_PREFIX = "user_save:"
MIN_KEY_LENGTH = 3
MAX_KEY_LENGTH = 50
SAVE_TTL = timedelta(days=30)


def storage_key(key: str) -> str:
    return f"{KEY_PREFIX}{key}"


@dataclass(frozen=True)
class SaveResult:
    key: str
    saved_at: datetime


@dataclass(frozen=True)
class LoadResult:
    key: str
    data: Any
    loaded_at: datetime


def _require_key(key: Optional[str]) -> str:
    if not isinstance(key, str) or not key:
        raise ValidationError("key parameter is required")
    return key


def validate_save_key(key: Optional[str]) -> str:
    """Return `key` if it may be used for a save, else raise ValidationError."""
    key = _require_key(key)
    if len(key) < MIN_KEY_LENGTH:
        raise ValidationError(f"key must be at least {MIN_KEY_LENGTH} characters")
    if len(key) > MAX_KEY_LENGTH:
        raise ValidationError(f"key must be {MAX_KEY_LENGTH} characters or less")
    return key


class DocumentStore:
    """Service responsible for saving, loading and deleting documents.

    The engine is injected at construction and shared for the life of the
    process. All engine operations are single-key, so no locking happens
    here.
    """

    def __init__(
        self,
        engine: EngineProtocol,
        serializer: Optional[Serializer] = None,
        clock: Optional[Callable[[], datetime]] = None,
        ttl: timedelta = SAVE_TTL,
    ):
        self._engine = engine
        self._serializer = serializer or JSONSerializer()
        self._clock = clock or utc_now
        self._ttl_seconds = int(ttl.total_seconds())

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def save(self, key: str, document: Any) -> SaveResult:
        key = validate_save_key(key)
        # Encode before touching the engine so a bad document never
        # disturbs the value already stored.
        try:
            payload = self._serializer.dump(document)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"failed to serialize data: {e}") from e

        self._engine.set(storage_key(key), payload, self._ttl_seconds)
        logger.debug("Saved %d bytes under key %s", len(payload), key)
        return SaveResult(key=key, saved_at=self._clock())

    def load(self, key: str) -> LoadResult:
        key = _require_key(key)
        payload = self._engine.get(storage_key(key))
        if payload is None:
            raise NotFoundError("save key not found")
        try:
            data = self._serializer.load(payload)
        except ValueError as e:
            logger.error("Stored document for key %s failed to decode: %s", key, e)
            raise CorruptDataError("corrupted data in storage") from e
        return LoadResult(key=key, data=data, loaded_at=self._clock())

    def delete(self, key: str) -> bool:
        """Remove the document. Return False if there was nothing to remove."""
        key = _require_key(key)
        removed = self._engine.delete(storage_key(key)) > 0
        if removed:
            logger.debug("Deleted save %s", key)
        else:
            logger.debug("Delete requested for missing save %s", key)
        return removed
