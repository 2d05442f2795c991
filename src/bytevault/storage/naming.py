"""
bytevault.storage.naming

Derived object names.

Responsibilities:
- Reduce client-supplied filenames to a safe basename.
- Hand out strictly increasing millisecond markers across threads and tasks.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from pathlib import PurePosixPath

# Filesystems cap names at 255 bytes; leave room for the "<marker>-" prefix and
# the ".trash-<hex>-" stash prefix.
MAX_ORIGINAL_NAME_BYTES = 200


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def safe_basename(original_name: str | None) -> str:
    # Treat backslashes as separators too so Windows-style paths lose their directories.
    name = PurePosixPath((original_name or "").replace("\\", "/")).name.strip()
    name = name.lstrip(".")
    if not name:
        return "upload"
    # Trim on a character boundary so multi-byte names stay valid UTF-8.
    return name.encode("utf-8")[:MAX_ORIGINAL_NAME_BYTES].decode("utf-8", "ignore")


class NameAllocator:
    """
    `<marker>-<basename>` names where each marker is larger than the last.

    The marker tracks wall-clock milliseconds but never repeats or goes
    backwards; callers arriving in the same millisecond get the next integer.
    """

    def __init__(self, *, clock_ms: Callable[[], int] = _now_ms, floor: int = 0) -> None:
        self._clock_ms = clock_ms
        self._last = floor
        self._lock = threading.Lock()

    def seed(self, marker: int) -> None:
        with self._lock:
            self._last = max(self._last, marker)

    def next_marker(self) -> int:
        with self._lock:
            self._last = max(self._clock_ms(), self._last + 1)
            return self._last

    def derive(self, original_name: str | None) -> tuple[int, str]:
        marker = self.next_marker()
        return marker, f"{marker}-{safe_basename(original_name)}"
