"""Explicitly scoped pool of asset tables shared by a rendering job."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import TypeAlias

from vce.assets import AssetTable
from vce.runtime.phase_timing import (
    PHASE_ASSET_INDEX,
    log_phase_completed,
    log_phase_failed,
    log_phase_started,
)
from vce.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

AssetTableFactory: TypeAlias = Callable[[Path], AssetTable]


class ResourcePoolClosedError(RuntimeError):
    """Raised when a closed pool is asked for a resource."""


class ResourcePool:
    """Reference-counted asset tables keyed by static root.

    A table is built on first ``acquire`` and dropped once every holder has
    released it. ``close`` drops everything; the pool cannot be reused after.
    """

    def __init__(self, factory: AssetTableFactory = AssetTable.from_directory) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._tables: dict[Path, AssetTable] = {}
        self._holders: dict[Path, int] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def acquire(self, root: Path) -> AssetTable:
        """Returns the table for ``root``, building it if nobody holds it yet.

        Raises:
            ResourcePoolClosedError: If the pool has been closed.
        """
        key = root.resolve()
        with self._lock:
            if self._closed:
                raise ResourcePoolClosedError("Resource pool is closed.")
            table = self._tables.get(key)
            if table is None:
                started_at = log_phase_started(logger, phase_name=PHASE_ASSET_INDEX)
                try:
                    table = self._factory(key)
                except OSError:
                    log_phase_failed(logger, phase_name=PHASE_ASSET_INDEX, started_at=started_at)
                    raise
                log_phase_completed(logger, phase_name=PHASE_ASSET_INDEX, started_at=started_at)
                self._tables[key] = table
            self._holders[key] = self._holders.get(key, 0) + 1
            return table

    def release(self, root: Path) -> None:
        """Drops one hold on ``root``; the table is discarded with the last one.

        Raises:
            KeyError: If ``root`` is not currently held.
        """
        key = root.resolve()
        with self._lock:
            if key not in self._holders:
                raise KeyError(f"Asset table for {key} is not held.")
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._tables[key]
                logger.debug("Asset table released for %s.", key)

    @contextmanager
    def lease(self, root: Path) -> Iterator[AssetTable]:
        """Holds the table for ``root`` for the duration of a ``with`` block."""
        table = self.acquire(root)
        try:
            yield table
        finally:
            self.release(root)

    def held(self) -> tuple[Path, ...]:
        with self._lock:
            return tuple(sorted(self._tables))

    def close(self) -> None:
        with self._lock:
            if self._holders:
                logger.debug(
                    "Closing resource pool with %s table(s) still held.",
                    len(self._holders),
                )
            self._tables.clear()
            self._holders.clear()
            self._closed = True

    def __enter__(self) -> ResourcePool:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
