"""
psycopg adapter registration for the non-builtin types `Value` exchanges.

psycopg adapts most variants out of the box. Two need help:
- hstore: an extension type whose oid differs per database, so its TypeInfo
  is fetched once per connection target and registered on every connection
- jsonb parameters: Jsonb payloads are already JSON text and must be sent
  verbatim with the jsonb type instead of being dumped again
"""
import logging
import threading
import time
from typing import Any

import cachetools
from psycopg.types import TypeInfo
from psycopg.types.hstore import register_hstore
from psycopg.types.json import Jsonb

from pgrow.adapters.type_conversion import WireType

logger = logging.getLogger(__name__)

_MISSING = object()


def _passthrough(text: str) -> str:
    return text


def to_wire(value: Any, wire_type: WireType | None) -> Any:
    """Wrap an encoded value so psycopg sends it with the requested type."""
    if wire_type is WireType.JSONB:
        return Jsonb(value, dumps=_passthrough)
    return value


class AdapterRegistry:
    """Caches hstore type information per connection target.

    Thread-safe; the cache key is the libpq conninfo, so two configurations
    that reach the same database share one lookup. Entries expire after
    `ttl` seconds, so an extension installed later is picked up.
    """

    def __init__(self, maxsize: int = 100, ttl: int = 300, timer=time.monotonic) -> None:
        self._hstore = cachetools.TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        self._lock = threading.RLock()

    def _cached(self, key: str) -> Any:
        with self._lock:
            return self._hstore.get(key, _MISSING)

    def _store(self, key: str, info: TypeInfo | None) -> None:
        with self._lock:
            self._hstore[key] = info
        if info is None:
            logger.debug('hstore extension not installed, hstore values disabled')

    def postgres(self, connection: Any, key: str) -> None:
        """Register hstore adapters on a blocking connection."""
        info = self._cached(key)
        if info is _MISSING:
            info = TypeInfo.fetch(connection, 'hstore')
            self._store(key, info)
        if info is not None:
            register_hstore(info, connection)

    async def postgres_async(self, connection: Any, key: str) -> None:
        """Register hstore adapters on an asyncio connection."""
        info = self._cached(key)
        if info is _MISSING:
            info = await TypeInfo.fetch(connection, 'hstore')
            self._store(key, info)
        if info is not None:
            register_hstore(info, connection)

    def clear(self) -> None:
        with self._lock:
            self._hstore.clear()


_registry = AdapterRegistry()


def get_adapter_registry() -> AdapterRegistry:
    """Get the adapter registry."""
    return _registry
