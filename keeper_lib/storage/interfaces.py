from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class EngineProtocol(Protocol):
    """Engine protocol mirroring `keeper_lib.storage.KeyValueEngine`.

    Implementations should follow the semantics documented on the abstract
    base class in `keeper_lib.storage.base` (None for missing keys, delete
    count instead of KeyError, BackendError on failure).
    """

    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None: ...

    def delete(self, key: str) -> int: ...

    def ping(self) -> bool: ...

    def close(self) -> None: ...
