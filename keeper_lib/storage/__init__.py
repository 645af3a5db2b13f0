"""Storage abstraction package for Character Keeper."""
from typing import Optional

from .base import KeyValueEngine
from .memory_backend import MemoryEngine
from .redis_backend import RedisEngine
from .serializer import JSONSerializer, Serializer


def create_engine(backend: str = "redis", url: Optional[str] = None, **options) -> KeyValueEngine:
    """Create the key-value engine named by `backend`.

    - backend: 'redis' (requires `url`) or 'memory'
    - options: passed through to the engine constructor (`timeout` for
      redis, `clock` for memory)
    """
    if backend == "memory":
        return MemoryEngine(**options)
    if backend == "redis":
        return RedisEngine.from_url(url or "", **options)
    raise ValueError(f"unknown storage backend: {backend!r}")


__all__ = [
    "KeyValueEngine",
    "MemoryEngine",
    "RedisEngine",
    "JSONSerializer",
    "Serializer",
    "create_engine",
]
