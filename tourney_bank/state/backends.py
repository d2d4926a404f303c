"""Key-value backends for the ledger stores."""
import json
from typing import Any, Optional, Protocol

from tourney_bank.config import config
from tourney_bank.utils.logger import get_logger

logger = get_logger(__name__)


class KeyValueBackend(Protocol):
    """Operations the stores need from a backend."""

    def get_json(self, key: str) -> Optional[Any]: ...

    def set_json(self, key: str, value: Any) -> None: ...

    def delete(self, *keys: str) -> None: ...

    def exists(self, key: str) -> bool: ...

    def keys(self, prefix: str) -> list[str]: ...


class MemoryBackend:
    """In-process backend; values are kept JSON-encoded like in Redis."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get_json(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        if value is None:
            return None
        return json.loads(value)

    def set_json(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)

    def exists(self, key: str) -> bool:
        return key in self._data

    def keys(self, prefix: str) -> list[str]:
        return [key for key in self._data if key.startswith(prefix)]


def create_backend(kind: Optional[str] = None) -> KeyValueBackend:
    """Create the backend selected in configuration.

    Args:
        kind: "memory" or "redis"; defaults to config.store_backend.

    Returns:
        A ready-to-use backend.

    Raises:
        ValueError: If the backend kind is unknown.
    """
    kind = (kind or config.store_backend).lower()
    if kind == "memory":
        return MemoryBackend()
    if kind == "redis":
        from tourney_bank.state.redis_client import redis_client

        redis_client.connect()
        return redis_client
    raise ValueError(f"Unknown store backend: {kind}")
