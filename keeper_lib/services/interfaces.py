"""Central re-exports for package-local Protocols.

The canonical definitions live beside their implementations in each
package; they are collected here for discoverability.
"""
from typing import Any, Protocol, runtime_checkable

from keeper_lib.storage.interfaces import EngineProtocol


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    def save(self, key: str, document: Any) -> Any: ...

    def load(self, key: str) -> Any: ...

    def delete(self, key: str) -> bool: ...


@runtime_checkable
class FetcherProtocol(Protocol):
    def fetch(self, url: str) -> Any: ...


__all__ = [
    "EngineProtocol",
    "DocumentStoreProtocol",
    "FetcherProtocol",
]
