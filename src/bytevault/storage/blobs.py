"""
bytevault.storage.blobs

Filesystem-backed blob store.

Responsibilities:
- Stream uploads into hidden temporary files inside the storage directory.
- Publish a finished temporary file under its final name with a rename.
- Stash/restore blobs so deletes can be rolled back.
"""

from __future__ import annotations

import asyncio
import os
import uuid
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from pathlib import Path

TEMP_PREFIX = ".upload-"
TRASH_PREFIX = ".trash-"


class BlobStore:
    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> None:
        self._root.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        if not name or name != Path(name).name or name.startswith("."):
            raise ValueError(f"invalid blob name: {name!r}")
        return self._root / name

    async def receive(self, chunks: AsyncIterator[bytes]) -> tuple[Path, int]:
        """
        Drain `chunks` into a new temporary file.

        Returns the temp path and byte count. The temp file is removed if the
        stream fails or the task is cancelled part way.
        """

        temp = self._root / f"{TEMP_PREFIX}{uuid.uuid4().hex}"
        fh = await asyncio.to_thread(open, temp, "xb")
        size = 0
        try:
            async for chunk in chunks:
                if chunk:
                    await asyncio.to_thread(fh.write, chunk)
                    size += len(chunk)
            await asyncio.to_thread(_flush_and_sync, fh)
        except BaseException:
            fh.close()
            self.discard(temp)
            raise
        fh.close()
        return temp, size

    def publish(self, temp: Path, name: str) -> Path:
        target = self.path_for(name)
        if target.exists():
            raise FileExistsError(str(target))
        os.replace(temp, target)
        return target

    def modified_at(self, name: str) -> datetime:
        mtime = self.path_for(name).stat().st_mtime
        return datetime.fromtimestamp(mtime, tz=UTC).replace(tzinfo=None)

    def stash(self, name: str) -> Path | None:
        """Move a blob aside; returns None when the blob is already gone."""
        source = self.path_for(name)
        stashed = self._root / f"{TRASH_PREFIX}{uuid.uuid4().hex}-{name}"
        try:
            os.replace(source, stashed)
        except FileNotFoundError:
            return None
        return stashed

    def restore(self, stashed: Path, name: str) -> None:
        os.replace(stashed, self.path_for(name))

    def discard(self, path: Path | None) -> None:
        if path is not None:
            path.unlink(missing_ok=True)

    def published(self) -> list[Path]:
        """Every non-hidden file, i.e. blobs stored under a final name."""
        return [p for p in self._root.iterdir() if p.is_file() and not p.name.startswith(".")]

    def leftovers(self) -> tuple[list[Path], list[tuple[Path, str]]]:
        """Temp files and stashed blobs (with their original names) left by a dead process."""
        temps: list[Path] = []
        stashed: list[tuple[Path, str]] = []
        for entry in self._root.iterdir():
            if entry.name.startswith(TEMP_PREFIX):
                temps.append(entry)
            elif entry.name.startswith(TRASH_PREFIX):
                # .trash-<32 hex>-<name>
                stashed.append((entry, entry.name[len(TRASH_PREFIX) + 33 :]))
        return temps, stashed


def _flush_and_sync(fh) -> None:
    fh.flush()
    os.fsync(fh.fileno())


# --- Module Notes -----------------------------------------------------------
# Hidden prefixes keep in-flight and stashed files out of any directory-based
# view; the index is still the only source of truth for what exists.
