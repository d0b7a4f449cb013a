import asyncio
import copy
import json
import logging
import os
import re
import threading
from contextlib import asynccontextmanager
from typing import Any, Callable

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)

LOCK_POLL_INTERVAL = 0.01


class LocalStorage:
    """
    Small key-value store keeping one JSON document per key on disk.

    Failures are logged and never raised: reads fall back to the caller's
    default and writes are dropped, so a broken disk degrades to "no history"
    instead of breaking an interview.
    """

    def __init__(self, storage_dir: str = "storage"):
        self.storage_dir = storage_dir
        # Requests run on separate threads with their own event loops
        self._lock = threading.Lock()
        self._ensure_storage_dir()

    def _ensure_storage_dir(self):
        if not os.path.exists(self.storage_dir):
            os.makedirs(self.storage_dir)

    def _path(self, key: str) -> str:
        safe_key = re.sub(r'[^A-Za-z0-9_.-]', '_', key)
        return os.path.join(self.storage_dir, f"{safe_key}.json")

    @asynccontextmanager
    async def _locked(self):
        # Poll instead of blocking a worker thread, so a cancelled waiter never ends up owning the lock
        while not self._lock.acquire(blocking=False):
            await asyncio.sleep(LOCK_POLL_INTERVAL)
        try:
            yield
        finally:
            self._lock.release()

    async def _read(self, key: str, default: Any) -> Any:
        path = self._path(key)
        if not await aiofiles.os.path.exists(path):
            return default
        try:
            async with aiofiles.open(path, 'r', encoding='utf-8') as f:
                content = await f.read()
            return json.loads(content)
        except Exception as e:
            logger.error(f"Error reading storage key '{key}': {e}")
            return default

    async def _write(self, key: str, value: Any):
        path = self._path(key)
        try:
            serialized = json.dumps(value, indent=2)
            async with aiofiles.open(path, 'w', encoding='utf-8') as f:
                await f.write(serialized)
        except Exception as e:
            logger.error(f"Error writing storage key '{key}': {e}")

    async def get_item(self, key: str, default: Any = None) -> Any:
        async with self._locked():
            return await self._read(key, default)

    async def set_item(self, key: str, value: Any):
        async with self._locked():
            current = await self._read(key, None)
            if current == value:
                logger.debug(f"Storage key '{key}' unchanged, skipping write")
                return
            await self._write(key, value)

    async def update(self, key: str, fn: Callable[[Any], Any], default: Any = None) -> Any:
        """Read-modify-write a key while holding the store lock."""
        async with self._locked():
            current = await self._read(key, default)
            updated = fn(copy.deepcopy(current))
            if updated != current:
                await self._write(key, updated)
            return updated
