from typing import Any, Protocol
import json


class Serializer(Protocol):
    """Serialize/deserialize documents for engines that store bytes.

    Implementations should be symmetric: `dump` -> bytes, `load` <- bytes.
    """

    def dump(self, value: Any) -> bytes: ...

    def load(self, data: bytes) -> Any: ...


class JSONSerializer:
    """Compact UTF-8 JSON.

    `dump` raises TypeError/ValueError for values JSON cannot represent
    (including NaN and infinities); `load` raises ValueError on bytes that
    are not UTF-8 JSON.
    """

    def dump(self, value: Any) -> bytes:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")

    def load(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))
