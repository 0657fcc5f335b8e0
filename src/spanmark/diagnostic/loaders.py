# topmark:header:start
#
#   project      : SpanMark
#   file         : loaders.py
#   file_relpath : src/spanmark/diagnostic/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Read sources and diagnostics from a TOML or JSON document.

The document shape is the same in both formats (shown as TOML):

```toml
[[sources]]
name = "main.rs"                 # in-memory snippet
text = "fn main() {}\\n"

[[sources]]
path = "src/lib.rs"              # file, relative to the document

[[diagnostics]]
severity = "error"               # info | warning | error | fatal | any custom name
code = "E0308"
message = "mismatched types"
notes = ["expected type `i32`"]
location = { source = "main.rs", offset = 3 }

[[diagnostics.labels]]
source = "main.rs"               # a source `name` or `path`
start = 3
end = 7
style = "primary"                # primary | secondary
message = "expected `i32`"
color = "red"                    # name, 0..255 or [r, g, b]
order = 0
priority = 1
```

Structural problems (missing keys, wrong types, unknown sources) raise
`DocumentLoadError`; recoverable oddities are logged and reported in
`DiagnosticDocument.warnings`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from tomlkit.exceptions import ParseError as TomlkitParseError

from spanmark.config.io import get_color_value_or_none_checked, parse_toml_text
from spanmark.config.logging import get_logger
from spanmark.core.errors import SourceEncodingError, SpanmarkError
from spanmark.diagnostic.model import Diagnostic, DiagnosticLevel, Label, LabelStyle
from spanmark.source.cache import SourceCache
from spanmark.source.identity import SourceID, SourcePath

if TYPE_CHECKING:
    from spanmark.config.logging import SpanmarkLogger
    from spanmark.rendering.styles import Color

logger: SpanmarkLogger = get_logger(__name__)

JSON_SUFFIXES: frozenset[str] = frozenset({".json"})


class DocumentLoadError(SpanmarkError, ValueError):
    """A diagnostics document cannot be read or has the wrong shape."""

    def __init__(self, where: str, reason: str) -> None:
        self.where: str = where
        self.reason: str = reason
        super().__init__(f"{where}: {reason}")


@dataclass
class DiagnosticDocument:
    """Sources and diagnostics read from one document.

    Attributes:
        cache (SourceCache): Registered sources.
        diagnostics (list[Diagnostic]): Diagnostics in document order.
        warnings (list[str]): Recoverable problems found while loading.
    """

    cache: SourceCache = field(default_factory=SourceCache)
    diagnostics: list[Diagnostic] = field(default_factory=lambda: [])
    warnings: list[str] = field(default_factory=lambda: [])


def _require(table: dict[str, Any], key: str, kind: type, where: str) -> Any:
    value: Any | None = table.get(key)
    if value is None:
        raise DocumentLoadError(where, f"missing required key {key!r}")
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DocumentLoadError(
            where, f"{key!r} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _optional(table: dict[str, Any], key: str, kind: type, where: str) -> Any | None:
    if table.get(key) is None:
        return None
    return _require(table, key, kind, where)


def _tables(data: dict[str, Any], key: str, where: str) -> list[dict[str, Any]]:
    value: Any = data.get(key, [])
    items: list[Any] = cast("list[Any]", value) if isinstance(value, list) else []
    if not isinstance(value, list) or not all(isinstance(t, dict) for t in items):
        raise DocumentLoadError(where, f"{key!r} must be an array of tables")
    return cast("list[dict[str, Any]]", value)


class _DocumentReader:
    """Builds a `DiagnosticDocument` from parsed data."""

    def __init__(self, base_dir: Path) -> None:
        self._base_dir: Path = base_dir
        self._document: DiagnosticDocument = DiagnosticDocument()
        self._names: dict[str, SourceID] = {}

    def read(self, data: dict[str, Any]) -> DiagnosticDocument:
        for position, table in enumerate(_tables(data, "sources", "document")):
            self._read_source(table, f"sources[{position}]")
        for position, table in enumerate(_tables(data, "diagnostics", "document")):
            diagnostic: Diagnostic = self._read_diagnostic(table, f"diagnostics[{position}]")
            self._document.diagnostics.append(diagnostic)
        logger.info(
            "Loaded %d source(s) and %d diagnostic(s)",
            len(self._document.cache),
            len(self._document.diagnostics),
        )
        return self._document

    def _read_source(self, table: dict[str, Any], where: str) -> None:
        cache: SourceCache = self._document.cache
        raw_path: str | None = _optional(table, "path", str, where)
        name: str | None = _optional(table, "name", str, where)
        text: str | None = _optional(table, "text", str, where)

        if text is not None:
            if name is None:
                name = raw_path
            if name is None:
                raise DocumentLoadError(where, "inline sources need a 'name'")
            try:
                file_id: SourceID = cache.insert_text(name, text)
            except SourceEncodingError as exc:
                raise DocumentLoadError(f"{where}.text", exc.reason) from exc
        elif raw_path is not None:
            path: Path = Path(raw_path)
            if not path.is_absolute():
                path = self._base_dir / path
            # SourceIOError propagates: the caller reports unreadable files
            file_id = cache.insert_file(path)
            # Show the name, or the path as written in the document
            shown: SourcePath = SourcePath.local(name or raw_path)
            if cache.source_path(file_id) != shown:
                cache.set_source_path(file_id, shown)
        else:
            raise DocumentLoadError(where, "a source needs 'text' or 'path'")

        for key in (name, raw_path):
            if key is None:
                continue
            if self._names.get(key, file_id) != file_id:
                raise DocumentLoadError(where, f"source name {key!r} is used twice")
            self._names[key] = file_id

    def _source_id(self, table: dict[str, Any], where: str) -> SourceID:
        name: str = _require(table, "source", str, where)
        file_id: SourceID | None = self._names.get(name)
        if file_id is None:
            raise DocumentLoadError(where, f"unknown source {name!r}")
        return file_id

    def _read_label(self, table: dict[str, Any], where: str) -> Label:
        file_id: SourceID = self._source_id(table, where)
        start: int = _require(table, "start", int, where)
        raw_end: int | None = _optional(table, "end", int, where)
        end: int = start if raw_end is None else raw_end
        if end < start:
            self._warn(f"{where}: end {end} before start {start}; using an empty span")

        raw_style: str = _optional(table, "style", str, where) or LabelStyle.PRIMARY.value
        try:
            style = LabelStyle(raw_style.strip().lower())
        except ValueError as exc:
            raise DocumentLoadError(where, f"unknown label style {raw_style!r}") from exc

        color: Color | None = get_color_value_or_none_checked(
            table, "color", where=where, warnings=self._document.warnings
        )
        return Label(
            span=file_id.with_range(start, end),
            message=_optional(table, "message", str, where),
            color=color,
            order=_optional(table, "order", int, where) or 0,
            priority=_optional(table, "priority", int, where),
            style=style,
        )

    def _read_diagnostic(self, table: dict[str, Any], where: str) -> Diagnostic:
        raw_severity: str = _optional(table, "severity", str, where) or "error"
        severity_key: str = raw_severity.strip().lower()
        try:
            diagnostic = Diagnostic.new(DiagnosticLevel(severity_key))
        except ValueError:
            diagnostic = Diagnostic.custom(raw_severity.strip())

        diagnostic.with_message(_optional(table, "message", str, where) or "")
        diagnostic.with_code(_optional(table, "code", str, where))

        for position, label_table in enumerate(_tables(table, "labels", where)):
            diagnostic.with_label(self._read_label(label_table, f"{where}.labels[{position}]"))

        notes: Any = table.get("notes", [])
        if isinstance(notes, str):
            notes = [notes]
        if not isinstance(notes, list) or not all(isinstance(n, str) for n in notes):
            raise DocumentLoadError(where, "'notes' must be a string or an array of strings")
        diagnostic.with_notes(cast("list[str]", notes))

        location: Any = table.get("location")
        if location is not None:
            if not isinstance(location, dict):
                raise DocumentLoadError(where, "'location' must be a table")
            location_table: dict[str, Any] = cast("dict[str, Any]", location)
            loc_where: str = f"{where}.location"
            diagnostic.with_location(
                self._source_id(location_table, loc_where),
                _optional(location_table, "offset", int, loc_where),
            )
        return diagnostic

    def _warn(self, message: str) -> None:
        logger.warning("%s", message)
        self._document.warnings.append(message)


def parse_document(
    text: str, *, fmt: str = "toml", base_dir: Path | None = None
) -> DiagnosticDocument:
    """Parse a diagnostics document from text.

    Args:
        text (str): Document text.
        fmt (str): ``"toml"`` or ``"json"``.
        base_dir (Path | None): Directory relative source paths are resolved
            against; defaults to the current directory.

    Returns:
        DiagnosticDocument: Registered sources and the diagnostics.

    Raises:
        DocumentLoadError: If the text cannot be parsed or has the wrong shape.
        SourceIOError: If a referenced source file cannot be read.
    """
    try:
        data: Any = json.loads(text) if fmt == "json" else parse_toml_text(text)
    except (json.JSONDecodeError, TomlkitParseError) as exc:
        raise DocumentLoadError("document", f"invalid {fmt.upper()}: {exc}") from exc
    if not isinstance(data, dict):
        raise DocumentLoadError("document", "top level must be a table")
    return _DocumentReader(base_dir or Path.cwd()).read(cast("dict[str, Any]", data))


def load_document(path: Path) -> DiagnosticDocument:
    """Read a diagnostics document from ``path``.

    ``.json`` files are parsed as JSON, anything else as TOML. Relative
    source paths are resolved against the document's directory.

    Raises:
        DocumentLoadError: If the file cannot be read, parsed, or has the wrong shape.
        SourceIOError: If a referenced source file cannot be read.
    """
    logger.debug("Loading diagnostics document %s", path)
    try:
        text: str = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentLoadError(str(path), f"cannot read: {exc}") from exc
    fmt: str = "json" if path.suffix.lower() in JSON_SUFFIXES else "toml"
    return parse_document(text, fmt=fmt, base_dir=path.parent)
