# topmark:header:start
#
#   project      : SpanMark
#   file         : test_source_cache.py
#   file_relpath : tests/source/test_source_cache.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for `spanmark.source.cache.SourceCache`."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import pytest

from spanmark.core.errors import FileMissingError, SourceCollisionError, SourceIOError
from spanmark.source.cache import SourceCache
from spanmark.source.identity import SourceID, SourceKind, SourcePath
from spanmark.source.text import SourceText

if TYPE_CHECKING:
    from pathlib import Path


def test_insert_is_idempotent_for_identical_text() -> None:
    """Registering the same name and text twice yields one entry."""
    cache = SourceCache()

    first: SourceID = cache.insert_text("main.py", "print(1)\n")
    second: SourceID = cache.insert_text("main.py", "print(1)\n")

    assert first == second
    assert len(cache) == 1
    assert first in cache


def test_insert_rejects_different_text_under_same_name() -> None:
    """A second text under an existing name is a collision unless replaced."""
    cache = SourceCache()
    file_id: SourceID = cache.insert_text("main.py", "a\n")

    with pytest.raises(SourceCollisionError) as excinfo:
        cache.insert_text("main.py", "b\n")
    assert excinfo.value.file == file_id

    assert cache.insert_text("main.py", "b\n", replace=True) == file_id
    assert cache.fetch(file_id).text == "b\n"


def test_anonymous_sources_are_keyed_by_content() -> None:
    """Unnamed buffers with different content get different ids."""
    cache = SourceCache()

    a: SourceID = cache.insert_anonymous("x")
    b: SourceID = cache.insert_anonymous("y")

    assert a != b
    assert cache.insert_anonymous("x") == a
    assert cache.display_name(a) == "<anonymous>"


def test_fetch_and_get_for_unknown_id() -> None:
    """`fetch` raises, `get` returns None, `display_name` falls back to the id."""
    cache = SourceCache()
    unknown: SourceID = SourceID.from_path(SourcePath.snippet("nowhere"))

    with pytest.raises(FileMissingError) as excinfo:
        cache.fetch(unknown)

    assert excinfo.value.file == unknown
    assert cache.get(unknown) is None
    assert cache.source_path(unknown) is None
    assert cache.display_name(unknown) == str(unknown)


def test_insert_file_registers_a_local_path(tmp_path: Path) -> None:
    """Files are registered under their local path."""
    path = tmp_path / "lib.rs"
    path.write_text("fn f() {}\n", encoding="utf-8")
    cache = SourceCache()

    file_id: SourceID = cache.insert_file(path)

    source_path = cache.source_path(file_id)
    assert source_path is not None
    assert source_path.kind is SourceKind.LOCAL
    assert cache.fetch(file_id).line_count == 2


def test_insert_file_propagates_io_errors(tmp_path: Path) -> None:
    """Unreadable files surface as `SourceIOError`."""
    with pytest.raises(SourceIOError):
        SourceCache().insert_file(tmp_path / "missing.rs")


def test_set_source_path_relabels_without_rekeying() -> None:
    """Relabeling changes the display name only."""
    cache = SourceCache()
    file_id: SourceID = cache.insert_text("tmp-1234", "x\n")

    assert cache.set_source_path(file_id, SourcePath.local("src/x.py"))
    assert cache.display_name(file_id) == "src/x.py"
    assert cache.fetch(file_id).path == SourcePath.snippet("tmp-1234")

    other: SourceID = SourceID.from_path(SourcePath.snippet("other"))
    assert not cache.set_source_path(other, SourcePath.local("y"))


def test_iteration_in_insertion_order() -> None:
    """Iterating yields ids in registration order."""
    cache = SourceCache()
    ids: list[SourceID] = [cache.insert_text(name, name) for name in ("c", "a", "b")]

    assert list(cache) == ids


def test_concurrent_insertions_are_serialized() -> None:
    """Parallel registrations of overlapping names leave one entry per name."""
    cache = SourceCache()
    names: list[str] = [f"file{i % 10}" for i in range(200)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids: list[SourceID] = list(pool.map(lambda n: cache.insert_text(n, n), names))

    assert len(cache) == 10
    assert len(set(ids)) == 10


def test_insert_accepts_prebuilt_source() -> None:
    """`insert` accepts any `SourceText`."""
    cache = SourceCache()
    source = SourceText("body", SourcePath.remote("https://example.com/a.txt"))

    file_id: SourceID = cache.insert(source)

    assert cache.display_name(file_id) == "https://example.com/a.txt"
