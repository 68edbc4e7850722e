"""
Session-scoped cart storage.

Carts are keyed by a session id so concurrent operators never share a cart.
MemoryCartStore keeps carts in-process; RedisCartStore shares them between
workers and expires idle carts after CART_TTL_SECONDS.
"""

import json
import logging
from threading import Lock
from typing import Callable, Optional, TypeVar

from ...config import CART_BACKEND, CART_TTL_SECONDS
from ...exceptions import NotFound
from ..catalog.schemas import SizeTier
from .schemas import CartLine, ItemType

logger = logging.getLogger(__name__)

T = TypeVar("T")


def merge_line(lines: list[CartLine], line: CartLine) -> CartLine:
    """Add line to lines, merging quantity into an existing (id, type, size) match"""
    for existing in lines:
        if existing.key() == line.key():
            existing.quantity += line.quantity
            return existing
    lines.append(line)
    return line


def remove_one_unit(
    lines: list[CartLine], item_id, item_type: ItemType, size: Optional[SizeTier] = None
) -> Optional[CartLine]:
    """
    Decrement the first matching line by one, dropping it at zero.

    Returns the remaining line, or None if it was removed. Raises NotFound
    when nothing matches.
    """
    for index, existing in enumerate(lines):
        if existing.matches(item_id, item_type, size):
            if existing.quantity > 1:
                existing.quantity -= 1
                return existing
            del lines[index]
            return None
    raise NotFound("Item not found in cart")


class CartStore:
    """Base cart store; subclasses provide _read and _update"""

    def _read(self, session_id: str) -> list[CartLine]:
        raise NotImplementedError

    def _update(self, session_id: str, mutate: Callable[[list[CartLine]], T]) -> T:
        raise NotImplementedError

    def add(self, session_id: str, line: CartLine) -> CartLine:
        return self._update(session_id, lambda lines: merge_line(lines, line))

    def remove_one(
        self, session_id: str, item_id, item_type: ItemType, size: Optional[SizeTier] = None
    ) -> Optional[CartLine]:
        return self._update(
            session_id, lambda lines: remove_one_unit(lines, item_id, item_type, size)
        )

    def clear(self, session_id: str) -> None:
        self._update(session_id, lambda lines: lines.clear())

    def snapshot(self, session_id: str) -> list[CartLine]:
        """Current lines in insertion order (copies, safe to keep)"""
        return [line.model_copy() for line in self._read(session_id)]


class MemoryCartStore(CartStore):
    def __init__(self):
        self._carts: dict[str, list[CartLine]] = {}
        self._lock = Lock()

    def _read(self, session_id: str) -> list[CartLine]:
        with self._lock:
            return list(self._carts.get(session_id, []))

    def _update(self, session_id: str, mutate: Callable[[list[CartLine]], T]) -> T:
        with self._lock:
            lines = [line.model_copy() for line in self._carts.get(session_id, [])]
            result = mutate(lines)
            if lines:
                self._carts[session_id] = lines
            else:
                self._carts.pop(session_id, None)
            return result


class RedisCartStore(CartStore):
    """Carts stored as JSON lists under cart:<session_id>, updated with WATCH/MULTI"""

    def __init__(self, client, ttl_seconds: int = CART_TTL_SECONDS, prefix: str = "cart"):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}:{session_id}"

    @staticmethod
    def _decode(raw) -> list[CartLine]:
        if not raw:
            return []
        return [CartLine.model_validate(item) for item in json.loads(raw)]

    @staticmethod
    def _encode(lines: list[CartLine]) -> str:
        return json.dumps([line.model_dump(mode="json") for line in lines])

    def _read(self, session_id: str) -> list[CartLine]:
        return self._decode(self.client.get(self._key(session_id)))

    def _update(self, session_id: str, mutate: Callable[[list[CartLine]], T]) -> T:
        key = self._key(session_id)

        def transaction(pipe):
            lines = self._decode(pipe.get(key))
            result = mutate(lines)
            pipe.multi()
            if lines:
                pipe.setex(key, self.ttl_seconds, self._encode(lines))
            else:
                pipe.delete(key)
            return result

        return self.client.transaction(transaction, key, value_from_callable=True)


_cart_store: Optional[CartStore] = None


def get_cart_store() -> CartStore:
    """Process-wide cart store for the configured backend"""
    global _cart_store
    if _cart_store is None:
        if CART_BACKEND == "redis":
            from ...redis_client import get_redis_client

            _cart_store = RedisCartStore(get_redis_client())
            logger.info("🛒 Using Redis cart store")
        else:
            _cart_store = MemoryCartStore()
            logger.info("🛒 Using in-memory cart store")
    return _cart_store
