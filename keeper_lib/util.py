from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def rfc3339(ts: datetime) -> str:
    """Format `ts` as an RFC 3339 timestamp with second precision.

    Naive datetimes are assumed to be UTC. UTC is rendered with a `Z`
    suffix (e.g. "2024-05-01T12:30:00Z").
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    out = ts.isoformat(timespec="seconds")
    if out.endswith("+00:00"):
        out = out[:-6] + "Z"
    return out
