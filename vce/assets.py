"""Immutable static-asset lookup shared by every worker of a rendering job."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from vce.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


class MissingAssetError(LookupError):
    """Raised when a frame references an asset absent from the asset table."""


def normalize_ref(ref: str) -> str:
    """Normalizes an asset reference to a relative POSIX path."""
    cleaned = ref.strip().replace("\\", "/").lstrip("/")
    return PurePosixPath(cleaned).as_posix() if cleaned else ""


@dataclass(frozen=True)
class AssetTable:
    """Precomputed mapping from asset references to resolved file paths.

    Lookups are synchronous and never touch the filesystem, so resolving an
    asset gives the same answer on every worker.
    """

    root: Path
    _entries: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_refs(cls, root: Path, refs: Iterable[str]) -> AssetTable:
        """Builds a table from explicit references relative to ``root``."""
        entries = {
            normalize_ref(ref): (root / normalize_ref(ref)).as_posix()
            for ref in refs
            if normalize_ref(ref)
        }
        return cls(root=root, _entries=entries)

    @classmethod
    def from_directory(cls, root: Path) -> AssetTable:
        """Scans ``root`` once and indexes every regular file below it.

        Raises:
            FileNotFoundError: If ``root`` is not a directory.
        """
        if not root.is_dir():
            raise FileNotFoundError(f"Asset root is not a directory: {root}")
        entries = {
            path.relative_to(root).as_posix(): path.as_posix()
            for path in sorted(root.rglob("*"))
            if path.is_file()
        }
        logger.info("Indexed %s static assets under %s", len(entries), root)
        return cls(root=root, _entries=entries)

    def __contains__(self, ref: object) -> bool:
        return isinstance(ref, str) and normalize_ref(ref) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, ref: str) -> str:
        """Returns the resolved path for ``ref``.

        Raises:
            MissingAssetError: If ``ref`` is not part of the table.
        """
        key = normalize_ref(ref)
        try:
            return self._entries[key]
        except KeyError as err:
            raise MissingAssetError(
                f"Asset {ref!r} is not available under {self.root}"
            ) from err
