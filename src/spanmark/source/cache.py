# topmark:header:start
#
#   project      : SpanMark
#   file         : cache.py
#   file_relpath : src/spanmark/source/cache.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Registry of source buffers keyed by `SourceID`.

The cache is the single owner of `SourceText` instances; diagnostics, labels
and spans only carry a `SourceID` and are resolved against the cache at render
time.

Thread-safety:
    Insertions and relabeling take an internal ``RLock``. Once populated, the
    cache can be shared read-only between threads without locking.
"""

from __future__ import annotations

from threading import RLock
from typing import TYPE_CHECKING

from spanmark.config.logging import get_logger
from spanmark.core.errors import FileMissingError, SourceCollisionError
from spanmark.source.identity import SourceID, SourcePath
from spanmark.source.text import SourceText

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from spanmark.config.logging import SpanmarkLogger

logger: SpanmarkLogger = get_logger(__name__)


class SourceCache:
    """Mapping from `SourceID` to `SourceText`.

    Registration is idempotent: inserting the same text under the same path
    returns the existing id. Registering a *different* text under an existing
    identity raises `SourceCollisionError` unless ``replace=True`` is given.
    """

    def __init__(self) -> None:
        self._lock: RLock = RLock()
        self._sources: dict[SourceID, SourceText] = {}
        # Display path per id; may diverge from the text's own path via set_source_path
        self._paths: dict[SourceID, SourcePath] = {}

    # ------------------------------------------------------------- insertion

    def insert(self, source: SourceText, *, replace: bool = False) -> SourceID:
        """Register a source buffer.

        Args:
            source (SourceText): The buffer to register.
            replace (bool): Overwrite a different buffer already registered
                under the same identity.

        Returns:
            SourceID: Identity of the registered buffer.

        Raises:
            SourceCollisionError: If a different buffer is registered under
                the same identity and ``replace`` is False.
        """
        file_id: SourceID = source.id
        with self._lock:
            existing: SourceText | None = self._sources.get(file_id)
            if existing is not None and not replace:
                if existing.text != source.text:
                    logger.error("Source collision for %s (%s)", source.path, file_id)
                    raise SourceCollisionError(file_id)
                logger.trace("Source %s already registered as %s", source.path, file_id)
                return file_id
            self._sources[file_id] = source
            self._paths[file_id] = source.path
        logger.debug("Registered source %s as %s", source.path, file_id)
        return file_id

    def insert_text(self, name: str, content: str, *, replace: bool = False) -> SourceID:
        """Register in-memory text under the snippet name ``name``."""
        return self.insert(SourceText.snippet(content, name), replace=replace)

    def insert_anonymous(self, content: str) -> SourceID:
        """Register unnamed text; its identity is derived from the content."""
        return self.insert(SourceText(content))

    def insert_file(self, path: Path, *, replace: bool = False) -> SourceID:
        """Read and register a file.

        Raises:
            SourceIOError: If the file cannot be read or decoded.
            SourceCollisionError: If the path is registered with a different
                text and ``replace`` is False.
        """
        return self.insert(SourceText.from_file(path), replace=replace)

    def set_source_path(self, file_id: SourceID, path: SourcePath) -> bool:
        """Change the display path of a registered buffer without re-keying it.

        This is unchecked: the buffer stays cached under its original identity,
        so a later `insert` under ``path`` creates a separate entry.

        Returns:
            bool: True if ``file_id`` was registered.
        """
        with self._lock:
            if file_id not in self._sources:
                return False
            self._paths[file_id] = path
        logger.debug("Relabeled source %s as %s", file_id, path)
        return True

    # ---------------------------------------------------------------- lookup

    def fetch(self, file_id: SourceID) -> SourceText:
        """Return the buffer registered as ``file_id``.

        Raises:
            FileMissingError: If nothing is registered under ``file_id``.
        """
        source: SourceText | None = self._sources.get(file_id)
        if source is None:
            raise FileMissingError(file_id)
        return source

    def get(self, file_id: SourceID) -> SourceText | None:
        """Return the buffer registered as ``file_id``, or ``None``."""
        return self._sources.get(file_id)

    def source_path(self, file_id: SourceID) -> SourcePath | None:
        """Return the display path of a registered buffer, or ``None``."""
        return self._paths.get(file_id)

    def display_name(self, file_id: SourceID) -> str:
        """Return the user-facing name of ``file_id``, or its id when unregistered."""
        path: SourcePath | None = self._paths.get(file_id)
        return path.display() if path is not None else str(file_id)

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[SourceID]:
        return iter(list(self._sources))
