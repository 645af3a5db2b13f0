"""Services package: DI container and cross-cutting interfaces."""
from .container import ServiceContainer
from .interfaces import (
    DocumentStoreProtocol,
    EngineProtocol,
    FetcherProtocol,
)

__all__ = [
    "ServiceContainer",
    "DocumentStoreProtocol",
    "EngineProtocol",
    "FetcherProtocol",
]
