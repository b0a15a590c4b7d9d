# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Storage backends for session snapshots.

The game state machine only needs ``read(path) -> bytes`` and
``write(path, data)``.  ``FileDataAccess`` stores snapshots on the local
filesystem; tests can pass any object with the same two methods.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from loguru import logger

from .snapshot import PersistenceError


class PersistenceIOError(PersistenceError):
    """Reading or writing the underlying storage failed."""

    def __init__(self, path: str | Path, reason: Exception | str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Snapshot I/O failed for {self.path}: {reason}")


class DataAccess(Protocol):
    def read(self, path: str | Path) -> bytes:
        ...

    def write(self, path: str | Path, data: bytes) -> None:
        ...


class FileDataAccess:
    """Reads and writes snapshots as files, relative paths under *base_dir*."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else None

    def resolve(self, path: str | Path) -> Path:
        p = Path(path).expanduser()
        if self._base_dir is not None and not p.is_absolute():
            p = self._base_dir / p
        return p

    def read(self, path: str | Path) -> bytes:
        p = self.resolve(path)
        try:
            data = p.read_bytes()
        except OSError as e:
            logger.warning(f"Snapshot read failed: {p} ({e})")
            raise PersistenceIOError(p, e) from e
        logger.info(f"Snapshot read: {p} ({len(data)} bytes)")
        return data

    def write(self, path: str | Path, data: bytes) -> None:
        p = self.resolve(path)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)
        except OSError as e:
            logger.warning(f"Snapshot write failed: {p} ({e})")
            raise PersistenceIOError(p, e) from e
        logger.info(f"Snapshot saved: {p} ({len(data)} bytes)")
