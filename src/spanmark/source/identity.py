# topmark:header:start
#
#   project      : SpanMark
#   file         : identity.py
#   file_relpath : src/spanmark/source/identity.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Source identities.

A source buffer is known under a `SourcePath` (what the user sees in a
``--> path:line:col`` locator) and keyed in the cache by a `SourceID` derived
from that path. Deriving the id from the path, rather than handing out
counters, makes registration idempotent: inserting ``main.py`` twice yields the
same id and the same cache slot.

Identities are digests (``blake2b``, 8 bytes) of the path kind and value, so
they are stable across processes and Python hash seeds.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath

from spanmark.constants import ANONYMOUS_SOURCE_NAME
from spanmark.source.span import Span


class SourceKind(str, Enum):
    """Where a source buffer came from.

    Attributes:
        ANONYMOUS: Unnamed text; the identity is derived from the content.
        SNIPPET: In-memory text registered under a caller-chosen name.
        LOCAL: A file read from the local filesystem.
        REMOTE: Text fetched from a URL by the caller.
    """

    ANONYMOUS = "anonymous"
    SNIPPET = "snippet"
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True, slots=True)
class SourcePath:
    """Display path of a source buffer.

    Attributes:
        kind (SourceKind): Origin of the buffer.
        value (str): Name, filesystem path (POSIX separators) or URL. Empty for
            anonymous buffers.
    """

    kind: SourceKind
    value: str = ""

    @classmethod
    def anonymous(cls) -> SourcePath:
        """Return the path used for unnamed buffers."""
        return cls(SourceKind.ANONYMOUS)

    @classmethod
    def snippet(cls, name: str) -> SourcePath:
        """Return a path for an in-memory buffer called ``name``."""
        return cls(SourceKind.SNIPPET, name)

    @classmethod
    def local(cls, path: str | PurePath) -> SourcePath:
        """Return a path for a file on disk, normalized to forward slashes."""
        return cls(SourceKind.LOCAL, PurePath(path).as_posix())

    @classmethod
    def remote(cls, url: str) -> SourcePath:
        """Return a path for a buffer fetched from ``url``."""
        return cls(SourceKind.REMOTE, url)

    def display(self) -> str:
        """Return the name shown to users in locators and headers."""
        if self.kind is SourceKind.ANONYMOUS:
            return ANONYMOUS_SOURCE_NAME
        return self.value

    def as_path(self) -> Path | None:
        """Return the filesystem path for local sources, else ``None``."""
        if self.kind is SourceKind.LOCAL:
            return Path(self.value)
        return None

    def __str__(self) -> str:
        return self.display()


@dataclass(frozen=True, slots=True, order=True)
class SourceID:
    """Opaque 64-bit identity of a source buffer.

    Equal paths produce equal ids. Use `SourceID.from_path` rather than the
    constructor.
    """

    value: int

    @classmethod
    def from_path(cls, path: SourcePath, *, content: str | None = None) -> SourceID:
        """Derive the identity of ``path``.

        Args:
            path (SourcePath): Display path of the buffer.
            content (str | None): Buffer text; only consulted for anonymous
                paths, which have no name to hash.

        Returns:
            SourceID: The derived identity.
        """
        digest = hashlib.blake2b(digest_size=8)
        digest.update(path.kind.value.encode("ascii"))
        digest.update(b"\x00")
        if path.kind is SourceKind.ANONYMOUS:
            digest.update((content or "").encode("utf-8", "surrogatepass"))
        else:
            digest.update(path.value.encode("utf-8", "surrogatepass"))
        return cls(int.from_bytes(digest.digest(), "big"))

    def with_range(self, start: int, end: int) -> Span:
        """Return a `Span` over ``start .. end`` in this source."""
        return Span(self, start, end)

    def __str__(self) -> str:
        return f"#{self.value:016x}"
