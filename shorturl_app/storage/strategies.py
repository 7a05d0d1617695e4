"""
Storage strategies using Strategy Pattern.
Allows switching between record backends (Redis, In-Memory) without the
service layer ever knowing which one is in use.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Optional
import logging

from redis.exceptions import RedisError

from shorturl_app.exceptions import BackendFault
from shorturl_app.models.record import Record

logger = logging.getLogger("shorturl.storage")


class StorageStrategy(ABC):
    """
    Abstract base class for record storage.

    This is the Strategy Pattern interface - one get/set contract with
    interchangeable implementations chosen at startup.

    All methods are async because storage operations may involve network I/O.
    Existence is always presence-of-key, never truthiness of the stored value.
    """

    async def connect(self) -> None:
        """Prepare the backend. Called once at startup, before serving."""

    async def close(self) -> None:
        """Release backend resources. Called once at shutdown."""

    @abstractmethod
    async def get(self, identifier: str) -> Optional[Record]:
        """
        Get a record.

        Args:
            identifier: Record key

        Returns:
            The record, or None if the key is absent

        Raises:
            BackendFault: if the backend fails or the stored value is corrupt
        """
        pass

    @abstractmethod
    async def exists(self, identifier: str) -> bool:
        """Check if a record is stored under identifier."""
        pass

    @abstractmethod
    async def set(self, identifier: str, record: Record) -> bool:
        """
        Store a record, replacing any existing one.

        Returns:
            True if successful
        """
        pass

    @abstractmethod
    async def create(self, identifier: str, record: Record) -> bool:
        """
        Store a record only if identifier is free.

        Returns:
            True if the record was written, False if the key already existed
        """
        pass

    @abstractmethod
    async def increment_visits(self, identifier: str) -> Optional[Record]:
        """
        Atomically add one to the visit counter.

        Returns:
            The updated record, or None if the key is absent
        """
        pass


class RedisStorage(StorageStrategy):
    """
    Redis storage over a single shared async connection.

    Each record is one string key holding `{"url": ..., "visits": ...}`.
    Visit increments run server-side in a Lua script, so concurrent
    redirects on the same key cannot lose updates.
    """

    INCREMENT_SCRIPT = """
local raw = redis.call('GET', KEYS[1])
if not raw then
  return nil
end
local record = cjson.decode(raw)
record['visits'] = (tonumber(record['visits']) or 0) + 1
local encoded = cjson.encode(record)
redis.call('SET', KEYS[1], encoded, 'KEEPTTL')
return encoded
"""

    def __init__(self, redis_client):
        """
        Initialize Redis storage.

        Args:
            redis_client: redis.asyncio.Redis instance (decode_responses=True)
        """
        self.redis = redis_client
        self._increment = redis_client.register_script(self.INCREMENT_SCRIPT)

    async def connect(self) -> None:
        """Ping the server; failure here aborts startup."""
        try:
            await self.redis.ping()
        except RedisError as e:
            raise BackendFault(f"cannot connect to redis: {e}", e) from e
        logger.info("[+] Redis DB connected")

    async def close(self) -> None:
        await self.redis.aclose()

    async def get(self, identifier: str) -> Optional[Record]:
        try:
            raw = await self.redis.get(identifier)
        except RedisError as e:
            raise BackendFault(f"redis get failed: {e}", e) from e
        if raw is None:
            return None
        return self._decode(identifier, raw)

    async def exists(self, identifier: str) -> bool:
        try:
            return bool(await self.redis.exists(identifier))
        except RedisError as e:
            raise BackendFault(f"redis exists failed: {e}", e) from e

    async def set(self, identifier: str, record: Record) -> bool:
        try:
            return bool(await self.redis.set(identifier, record.to_storage()))
        except RedisError as e:
            raise BackendFault(f"redis set failed: {e}", e) from e

    async def create(self, identifier: str, record: Record) -> bool:
        try:
            # SET NX replies None when the key is already taken
            return bool(await self.redis.set(identifier, record.to_storage(), nx=True))
        except RedisError as e:
            raise BackendFault(f"redis set failed: {e}", e) from e

    async def increment_visits(self, identifier: str) -> Optional[Record]:
        try:
            raw = await self._increment(keys=[identifier])
        except RedisError as e:
            raise BackendFault(f"redis increment failed: {e}", e) from e
        if raw is None:
            return None
        return self._decode(identifier, raw)

    @staticmethod
    def _decode(identifier: str, raw) -> Record:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return Record.from_storage(identifier, raw)
        except ValueError as e:
            raise BackendFault(f"corrupt record for id '{identifier}'", e) from e


class InMemoryStorage(StorageStrategy):
    """
    In-process storage using an ordered dict.

    Pros:
    - Very fast (no network overhead)
    - No external dependencies
    - Good for development and testing

    Cons:
    - Not shared between processes
    - Lost on restart

    Operations never await, so each one runs to completion on the event
    loop without interleaving; that is what makes increment_visits atomic.
    With max_keys > 0 the least recently used record is evicted when full.
    """

    def __init__(self, max_keys: int = 0):
        """
        Initialize in-memory storage.

        Args:
            max_keys: Capacity limit, 0 for unlimited
        """
        self.max_keys = max_keys
        self._records: "OrderedDict[str, Record]" = OrderedDict()

    async def connect(self) -> None:
        logger.info("[+] In-memory storage")

    async def get(self, identifier: str) -> Optional[Record]:
        record = self._records.get(identifier)
        if record is None:
            return None
        self._records.move_to_end(identifier)
        return record.model_copy()

    async def exists(self, identifier: str) -> bool:
        return identifier in self._records

    async def set(self, identifier: str, record: Record) -> bool:
        self._store(identifier, record)
        return True

    async def create(self, identifier: str, record: Record) -> bool:
        if identifier in self._records:
            return False
        self._store(identifier, record)
        return True

    async def increment_visits(self, identifier: str) -> Optional[Record]:
        record = self._records.get(identifier)
        if record is None:
            return None
        updated = record.model_copy(update={"visits": record.visits + 1})
        self._store(identifier, updated)
        return updated.model_copy()

    def __len__(self) -> int:
        return len(self._records)

    def _store(self, identifier: str, record: Record) -> None:
        self._records[identifier] = record.model_copy(update={"id": identifier})
        self._records.move_to_end(identifier)
        if self.max_keys > 0:
            while len(self._records) > self.max_keys:
                evicted, _ = self._records.popitem(last=False)
                logger.debug(f"Evicted id '{evicted}' (capacity {self.max_keys})")
