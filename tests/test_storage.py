"""
tests.test_storage

Name derivation, keyed locks and the filesystem blob store.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from bytevault.storage.blobs import BlobStore
from bytevault.storage.locks import KeyedLocks
from bytevault.storage.naming import MAX_ORIGINAL_NAME_BYTES, NameAllocator, safe_basename


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("report.txt", "report.txt"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\me\\notes.md", "notes.md"),
        (".bashrc", "bashrc"),
        ("", "upload"),
        (None, "upload"),
        ("dir/", "dir"),
    ],
)
def test_safe_basename(raw: str | None, expected: str) -> None:
    assert safe_basename(raw) == expected


def test_safe_basename_caps_encoded_length() -> None:
    capped = safe_basename("\u00e9" * 150 + ".txt")
    assert 0 < len(capped.encode("utf-8")) <= MAX_ORIGINAL_NAME_BYTES
    assert set(capped) == {"\u00e9"}
    assert safe_basename("a" * 300) == "a" * MAX_ORIGINAL_NAME_BYTES


def test_markers_never_repeat_on_a_frozen_clock() -> None:
    names = NameAllocator(clock_ms=lambda: 1_000)

    with ThreadPoolExecutor(max_workers=8) as pool:
        derived = list(pool.map(lambda _: names.derive("same.txt"), range(800)))

    assert len({name for _, name in derived}) == 800
    assert sorted(m for m, _ in derived) == list(range(1_000, 1_800))


def test_markers_do_not_go_backwards() -> None:
    ticks = iter([5_000, 4_000, 4_500, 9_000])
    names = NameAllocator(clock_ms=lambda: next(ticks))
    assert [names.next_marker() for _ in range(4)] == [5_000, 5_001, 5_002, 9_000]


def test_seed_raises_the_floor() -> None:
    names = NameAllocator(clock_ms=lambda: 10)
    names.seed(500)
    assert names.derive("a.bin") == (501, "501-a.bin")


@pytest.mark.asyncio
async def test_keyed_locks_serialize_one_key_only() -> None:
    locks = KeyedLocks()
    order: list[str] = []

    async def work(key: str, tag: str) -> None:
        async with locks.hold(key):
            order.append(f"{tag}-in")
            await asyncio.sleep(0.01)
            order.append(f"{tag}-out")

    await asyncio.gather(work("a", "first"), work("a", "second"), work("b", "other"))

    a_events = [e for e in order if not e.startswith("other")]
    assert a_events == ["first-in", "first-out", "second-in", "second-out"]
    assert order.index("other-in") < order.index("first-out")
    assert len(locks) == 0


async def _chunks(*parts: bytes):
    for part in parts:
        yield part


@pytest.mark.asyncio
async def test_receive_then_publish(tmp_path: Path) -> None:
    blobs = BlobStore(tmp_path)
    temp, size = await blobs.receive(_chunks(b"ab", b"", b"c"))
    assert size == 3
    assert temp.name.startswith(".upload-")

    path = blobs.publish(temp, "1-x.txt")
    assert path.read_bytes() == b"abc"
    assert not temp.exists()


@pytest.mark.asyncio
async def test_receive_discards_temp_on_broken_stream(tmp_path: Path) -> None:
    async def broken():
        yield b"partial"
        raise ConnectionResetError("client went away")

    blobs = BlobStore(tmp_path)
    with pytest.raises(ConnectionResetError):
        await blobs.receive(broken())
    assert list(tmp_path.iterdir()) == []


def test_stash_restore_and_leftovers(tmp_path: Path) -> None:
    blobs = BlobStore(tmp_path)
    (tmp_path / "1-a.txt").write_bytes(b"a")

    stashed = blobs.stash("1-a.txt")
    assert stashed is not None and not (tmp_path / "1-a.txt").exists()
    assert blobs.leftovers() == ([], [(stashed, "1-a.txt")])

    blobs.restore(stashed, "1-a.txt")
    assert (tmp_path / "1-a.txt").read_bytes() == b"a"
    assert blobs.stash("missing") is None


@pytest.mark.parametrize("bad", ["", "../x", "a/b", ".upload-123"])
def test_path_for_rejects_unsafe_names(tmp_path: Path, bad: str) -> None:
    with pytest.raises(ValueError):
        BlobStore(tmp_path).path_for(bad)
