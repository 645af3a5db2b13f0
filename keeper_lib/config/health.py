"""Server health utilities.

Provides a simple `get_health` function returning server status,
start time, uptime in seconds and the engine's reachability.
"""
from datetime import datetime, timezone
import os
import time

# record process start time at import
_START_TIME = time.time()


def get_health(engine=None) -> dict:
    """Return a dict representing server health.

    Fields:
    - status: 'ok' or 'error'
    - start_time: ISO 8601 UTC timestamp when the process started
    - uptime_seconds: integer seconds since start
    - version: contents of the VERSION file, or 'unknown'
    - engine: 'ok', 'unreachable' or None when no engine was given
    """
    now = time.time()
    uptime = int(now - _START_TIME)
    start_dt = datetime.fromtimestamp(_START_TIME, tz=timezone.utc)

    version = "unknown"
    version_file = os.path.join(os.path.dirname(__file__), "../../VERSION")
    if os.path.exists(version_file):
        with open(version_file, "r") as f:
            version = f.read().strip()

    engine_state = None
    if engine is not None:
        engine_state = "ok" if engine.ping() else "unreachable"

    return {
        "status": "error" if engine_state == "unreachable" else "ok",
        "start_time": start_dt.isoformat(),
        "uptime_seconds": uptime,
        "version": version,
        "engine": engine_state,
    }
