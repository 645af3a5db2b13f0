"""Application factory for the Character Keeper FastAPI app.

This module exposes `create_app(config: Config) -> FastAPI` which performs
all setup (logging, config loading, engine construction, service
composition, middleware and router registration). Nothing happens at
import time so tests can construct isolated apps.

To create an app for production or local runs:

    from keeper_lib.main import create_app, Config
    app = create_app(Config())

Engine construction failures surface as `ConfigurationError` from
`create_app`, before any request is served.
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from keeper_lib.errors import KeeperError
from keeper_lib.logging_config import configure_logging
from keeper_lib.storage import KeyValueEngine

HTTP_ERROR_MESSAGES = {
    404: 'not found',
    405: 'method not allowed',
}


@dataclass
class Config:
    storage_backend: str = "redis"
    # If None, read UPSTASH_REDIS_URL from the environment / .env
    redis_url: Optional[str] = None
    config_path: Optional[Path] = None
    # If None, check the feature flag in the server config
    enable_brotli: Optional[bool] = None
    configure_logging: bool = True


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message}, headers=headers)


def create_app(config: Config, engine: Optional[KeyValueEngine] = None, fetch_session: Any = None) -> FastAPI:
    """Create and return a configured FastAPI application.

    `engine` and `fetch_session` may be supplied by callers (tests) to skip
    building the real Redis client or `requests.Session`.
    """
    from keeper_lib.config.config import load_server_config
    server_cfg = load_server_config(config.config_path)

    if config.configure_logging:
        logger = configure_logging(server_cfg.log_level)
    else:
        logger = logging.getLogger(__name__)

    if engine is None:
        from keeper_lib.bootstrap import bootstrap_engine
        engine = bootstrap_engine(config.storage_backend, server_cfg, logger, redis_url=config.redis_url)

    # Compose services
    from keeper_lib.saves.store import DocumentStore
    document_store = DocumentStore(engine)

    from keeper_lib.proxy.fetcher import CharacterFetcher
    character_fetcher = CharacterFetcher(
        session=fetch_session,
        timeout=server_cfg.fetch_timeout_seconds,
        max_bytes=server_cfg.fetch_max_bytes,
    )

    from keeper_lib.services import ServiceContainer
    container = ServiceContainer()
    container.register_singleton("engine", engine)
    container.register_singleton("document_store", document_store)
    container.register_singleton("character_fetcher", character_fetcher)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        logger.info("Shutting down; closing engine and fetch session")
        character_fetcher.close()
        engine.close()

    app = FastAPI(title="Character Keeper", lifespan=lifespan)
    app.state.container = container

    # Register middleware. The last one added runs outermost, so CORS
    # headers land on every response, compressed or not.
    enable_brotli = config.enable_brotli if config.enable_brotli is not None else server_cfg.has_feature_flag('keeper_use_brotli')
    if enable_brotli:
        logger.info("Brotli compression middleware is enabled")
        from keeper_lib.middleware import BrotliCompression
        app.add_middleware(BrotliCompression)

    from keeper_lib.middleware.cors import CORSPolicy, apply_cors_headers
    app.add_middleware(CORSPolicy, allowed_origins=server_cfg.allowed_origins)

    # Exception handlers
    @app.exception_handler(KeeperError)
    async def keeper_error_handler(request: Request, exc: KeeperError):
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
        return error_response(exc.status_code, message, headers=getattr(exc, 'headers', None))

    # Starlette serves this one from ServerErrorMiddleware, outside CORSPolicy.
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return apply_cors_headers(request, error_response(500, 'internal error'), server_cfg.allowed_origins)

    # Router registration: import routers here to avoid import-time side-effects
    from keeper_lib.saves.api import router as saves_router
    from keeper_lib.proxy.api import router as proxy_router
    from keeper_lib.server.api import router as server_router

    app.include_router(saves_router, prefix='/api')
    app.include_router(proxy_router, prefix='/api')
    app.include_router(server_router, prefix='')

    return app
