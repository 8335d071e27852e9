"""Async key-value persistence with pluggable storage backends.

`KeyValueStore` serializes values as JSON text and never raises to its
callers: a failed save is logged and dropped, a failed load returns the
caller's fallback. Backend I/O runs on a single worker thread so writes are
applied in the order they were issued.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
import functools
import json
import os
from pathlib import Path
import re
from typing import Any, Callable, TypeVar

from loguru import logger
from PySide6.QtCore import QByteArray, QSettings

from core.services.interfaces import StorageBackend

T = TypeVar("T")

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class MemoryBackend:
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, text: str) -> None:
        self.items[key] = text

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileBackend:
    """Stores each key as `<directory>/<key>.json`."""

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)

    def _path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._dir / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, text: str) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return


class QSettingsBackend:
    """Stores values through Qt's `QSettings` in an INI file.

    Text is written as a byte array so JSON punctuation survives the INI
    value syntax unchanged.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)

    def _open(self) -> QSettings:
        return QSettings(self._path, QSettings.Format.IniFormat)

    def get_item(self, key: str) -> str | None:
        value = self._open().value(key)
        if value is None:
            return None
        if isinstance(value, (QByteArray, bytes, bytearray)):
            return bytes(value).decode("utf-8")
        return str(value)

    def set_item(self, key: str, text: str) -> None:
        qs = self._open()
        qs.setValue(key, QByteArray(text.encode("utf-8")))
        qs.sync()
        if qs.status() != QSettings.Status.NoError:
            raise OSError(f"QSettings write failed for {key}: {qs.status()}")

    def remove_item(self, key: str) -> None:
        qs = self._open()
        qs.remove(key)
        qs.sync()


class KeyValueStore:
    """Async JSON get/set over a `StorageBackend`."""

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="kv-store")

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, *args))

    async def save(self, key: str, value: Any) -> None:
        """Serialize `value` and store it under `key`; failures are logged only."""
        try:
            text = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as ex:
            logger.warning("Cannot serialize value for {}: {}", key, ex)
            return
        try:
            await self._run(self._backend.set_item, key, text)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Storage write failed for {}: {}", key, ex)

    async def load(self, key: str, fallback: Any) -> Any:
        """Return the value saved under `key`, or `fallback` if absent/unreadable."""
        try:
            text = await self._run(self._backend.get_item, key)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Storage read failed for {}: {}", key, ex)
            return fallback
        if not text:
            return fallback
        try:
            return json.loads(text)
        except ValueError as ex:
            logger.warning("Malformed stored value for {}: {}", key, ex)
            return fallback

    async def remove(self, key: str) -> None:
        try:
            await self._run(self._backend.remove_item, key)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Storage remove failed for {}: {}", key, ex)

    def close(self) -> None:
        """Finish queued backend work and stop the worker thread."""
        self._executor.shutdown(wait=True)
