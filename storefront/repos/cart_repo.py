# storefront/repos/cart_repo.py
"""
Cart persistence port and its adapters.

The cart store only talks to ``load()`` / ``save(items)``. Adapters raise
their own I/O errors; the store decides what to do with them.
"""
import json
import os
from pathlib import Path
from typing import List, Protocol

import redis

from storefront.domain.schemas import CartItem
from storefront.utils.retry import redis_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartStorage(Protocol):
    def load(self) -> List[CartItem]: ...

    def save(self, items: List[CartItem]) -> None: ...


def dump_items(items: List[CartItem]) -> str:
    return json.dumps([item.model_dump() for item in items])


def parse_items(raw: str | None) -> List[CartItem]:
    """
    Decode a serialised cart. Entries that do not validate (missing id,
    quantity below 1) are dropped so one bad line cannot poison the cart.
    """
    if not raw:
        return []

    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored cart is not a list")

    items: List[CartItem] = []
    seen = set()
    for entry in data:
        try:
            item = CartItem.model_validate(entry)
        except ValueError as e:
            logger.warning(f"Dropping invalid cart entry {entry!r}: {e}")
            continue
        if item.id in seen:
            logger.warning(f"Dropping duplicate cart entry for product {item.id}")
            continue
        seen.add(item.id)
        items.append(item)
    return items


class InMemoryCartStorage:
    def __init__(self, raw: str | None = None):
        self.raw = raw

    def load(self) -> List[CartItem]:
        return parse_items(self.raw)

    def save(self, items: List[CartItem]) -> None:
        self.raw = dump_items(items)


class FileCartStorage:
    """JSON document on disk, keyed the same way the browser keyed localStorage."""

    def __init__(self, path: str, key: str = "kb_cart"):
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as fh:
            doc = json.load(fh)
        return doc if isinstance(doc, dict) else {}

    def load(self) -> List[CartItem]:
        return parse_items(self._read_document().get(self.key))

    def save(self, items: List[CartItem]) -> None:
        try:
            doc = self._read_document()
        except ValueError as e:
            #unreadable document is overwritten, the in-memory cart wins
            logger.warning(f"Replacing unreadable cart file {self.path}: {e}")
            doc = {}
        doc[self.key] = dump_items(items)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        #write-then-rename, a crash mid-write leaves the old cart intact
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(doc, fh)
        os.replace(tmp, self.path)


class RedisCartStorage:
    def __init__(self, url: str, key: str = "kb_cart", client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(url, decode_responses=True)
        self.key = key

    @redis_retry()
    def load(self) -> List[CartItem]:
        return parse_items(self.redis.get(self.key))

    @redis_retry()
    def save(self, items: List[CartItem]) -> None:
        self.redis.set(self.key, dump_items(items))


def build_storage(backend: str, path: str, key: str, redis_url: str) -> CartStorage:
    if backend == "memory":
        return InMemoryCartStorage()
    if backend == "redis":
        return RedisCartStorage(redis_url, key=key)
    if backend == "file":
        return FileCartStorage(path, key=key)
    raise ValueError(f"Unknown cart storage backend: {backend}")
