"""Bootstrap helpers for Character Keeper startup.

Builds the key-value engine once, before the application serves traffic,
and verifies it is reachable. Factoring this out keeps `keeper_lib.main`
focused on composing services and building the FastAPI application.
"""
from typing import Optional

from keeper_lib.config.config import ServerConfig, resolve_redis_url
from keeper_lib.errors import ConfigurationError
from keeper_lib.storage import KeyValueEngine, create_engine


def bootstrap_engine(backend: str, server_cfg: ServerConfig, logger, redis_url: Optional[str] = None) -> KeyValueEngine:
    """Create the engine named by `backend` and check that it answers.

    Raises ConfigurationError when the connection string is missing or
    unparsable, or when the engine does not answer a ping.
    """
    if backend == "memory":
        logger.info("Using in-memory engine; saves will not survive a restart")
        return create_engine("memory")

    url = resolve_redis_url(redis_url)
    try:
        engine = create_engine(backend, url=url, timeout=server_cfg.redis_timeout_seconds)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    if not engine.ping():
        engine.close()
        raise ConfigurationError("failed to connect to redis")
    logger.info("Successfully connected to redis")
    return engine
