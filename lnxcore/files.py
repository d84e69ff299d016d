"""A file wrapper whose ``flush`` also forces the data onto disk."""

from __future__ import annotations

import os
from typing import BinaryIO


def _sync_data(fd: int) -> None:
    sync = getattr(os, "fdatasync", None) or os.fsync
    sync(fd)


class SyncOnFlushFile:
    """Wraps a binary file so that ``flush`` flushes buffers and syncs the data."""

    def __init__(self, inner: BinaryIO) -> None:
        self._inner = inner

    @property
    def closed(self) -> bool:
        return self._inner.closed

    def fileno(self) -> int:
        return self._inner.fileno()

    def write(self, data: bytes) -> int:
        return self._inner.write(data)

    def flush(self) -> None:
        self._inner.flush()
        _sync_data(self._inner.fileno())

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._inner.seek(offset, whence)

    def read(self, size: int = -1) -> bytes:
        return self._inner.read(size)

    def close(self) -> None:
        self._inner.close()

    def __enter__(self) -> "SyncOnFlushFile":
        return self

    def __exit__(self, *args) -> None:
        self.close()