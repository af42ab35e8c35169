"""Local filesystem cache backend."""

import asyncio
from datetime import UTC, datetime
from pathlib import Path

from src.modules.streams.domain.exceptions import (
    CacheNotFoundError,
    CacheReadError,
    CacheWriteError,
)
from src.modules.streams.domain.ports import CacheBackend, CacheBlob


class FileCacheBackend(CacheBackend):
    """Store blobs as files; last-modified is the file mtime.

    ``path`` is either a directory (the key names a file inside it) or,
    when it has a suffix, the blob file itself regardless of the key.
    """

    name = "file"

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def resolve(self, key: str) -> Path:
        if self.path.suffix:
            return self.path
        return self.path / key

    async def get(self, key: str) -> CacheBlob:
        return await asyncio.to_thread(self._read, self.resolve(key))

    async def put(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, self.resolve(key), data)

    @staticmethod
    def _read(path: Path) -> CacheBlob:
        try:
            stat = path.stat()
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise CacheNotFoundError(str(path)) from e
        except OSError as e:
            raise CacheReadError(f"Cannot read {path}: {e}") from e
        return CacheBlob(
            data=data,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
        )

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise CacheWriteError(f"Cannot write {path}: {e}") from e
