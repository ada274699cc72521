# emltrust/services/storage.py
import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

import redis.asyncio as redis

from ..config import settings

logger = logging.getLogger("emltrust.storage")


class MemoryBackend:
    """Process-local key-value backend; nothing survives a restart."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileBackend:
    """
    Key-value backend persisted as one JSON object on disk. Writes go to a
    temp file in the same directory and are swapped in with os.replace.
    """

    def __init__(self, path: str):
        self._path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, str]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self._path.parent), prefix=".history-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self._path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise

    def _set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _delete(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    async def _run(self, fn, *args):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, lambda: fn(*args))

    async def get(self, key: str) -> Optional[str]:
        data = await self._run(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        await self._run(self._set, key, value)

    async def delete(self, key: str) -> None:
        await self._run(self._delete, key)


class RedisBackend:
    def __init__(self, url: str):
        self._url = url
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = redis.from_url(self._url, decode_responses=True)
        return self._client

    async def get(self, key: str) -> Optional[str]:
        return await self._get_client().get(key)

    async def set(self, key: str, value: str) -> None:
        await self._get_client().set(key, value)

    async def delete(self, key: str) -> None:
        await self._get_client().delete(key)

    async def close(self) -> None:
        if self._client is not None:
            try:
                await self._client.aclose()
            except Exception as e:
                logger.debug("Redis close failed: %s", e)
            self._client = None


_backend = None


def get_backend():
    """Lazy backend creation: Redis when REDIS_URL is set, a JSON file otherwise."""
    global _backend
    if _backend is None:
        if settings.REDIS_URL:
            logger.info("History backend: redis %s", settings.REDIS_URL)
            _backend = RedisBackend(settings.REDIS_URL)
        else:
            logger.info("History backend: file %s", settings.HISTORY_PATH)
            _backend = FileBackend(settings.HISTORY_PATH)
    return _backend


async def close_backend() -> None:
    global _backend
    if isinstance(_backend, RedisBackend):
        await _backend.close()
    _backend = None
