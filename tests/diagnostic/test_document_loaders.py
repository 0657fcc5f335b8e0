# topmark:header:start
#
#   project      : SpanMark
#   file         : test_document_loaders.py
#   file_relpath : tests/diagnostic/test_document_loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for `spanmark.diagnostic.loaders`."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from spanmark.core.errors import SourceIOError
from spanmark.diagnostic.loaders import DocumentLoadError, load_document, parse_document
from spanmark.diagnostic.model import DiagnosticLevel, LabelStyle
from spanmark.source.identity import SourceKind

if TYPE_CHECKING:
    from pathlib import Path

    from spanmark.diagnostic.loaders import DiagnosticDocument

BASIC_TOML: str = """
[[sources]]
name = "main.rs"
text = "let x = 5;\\n"

[[diagnostics]]
severity = "error"
code = "E1"
message = "bad"
notes = ["a note"]
location = { source = "main.rs", offset = 4 }

[[diagnostics.labels]]
source = "main.rs"
start = 4
end = 5
message = "here"
color = "red"
order = 1
priority = 2
"""

LABEL_IN_A: str = (
    "[[sources]]\nname = 'a'\ntext = 'x'\n[[diagnostics]]\n[[diagnostics.labels]]\nsource = 'a'\n"
)


def test_parse_toml_document() -> None:
    """Every documented key lands on the model."""
    document: DiagnosticDocument = parse_document(BASIC_TOML)

    assert len(document.cache) == 1
    assert document.warnings == []
    [diagnostic] = document.diagnostics
    assert diagnostic.severity is DiagnosticLevel.ERROR
    assert (diagnostic.code, diagnostic.message, diagnostic.notes) == ("E1", "bad", ["a note"])
    [label] = diagnostic.labels
    assert (label.span.start, label.span.end) == (4, 5)
    assert (label.message, label.color, label.order, label.priority) == ("here", "red", 1, 2)
    assert label.style is LabelStyle.PRIMARY
    assert diagnostic.location is not None
    assert diagnostic.location.offset == 4
    assert document.cache.display_name(label.file) == "main.rs"


def test_parse_json_document() -> None:
    """JSON documents have the same shape; RGB colors are arrays."""
    data = {
        "sources": [{"name": "a", "text": "abc"}],
        "diagnostics": [
            {
                "severity": "warning",
                "message": "w",
                "notes": "single note",
                "labels": [
                    {"source": "a", "start": 1, "style": "secondary", "color": [1, 2, 3]}
                ],
            }
        ],
    }

    document = parse_document(json.dumps(data), fmt="json")

    [diagnostic] = document.diagnostics
    assert diagnostic.severity is DiagnosticLevel.WARNING
    assert diagnostic.notes == ["single note"]
    [label] = diagnostic.labels
    assert label.span.is_empty
    assert label.style is LabelStyle.SECONDARY
    assert label.color == (1, 2, 3)


def test_unknown_severity_becomes_custom() -> None:
    """Severities outside the known set keep their name."""
    document = parse_document('[[diagnostics]]\nseverity = "Help"\nmessage = "try this"\n')

    [diagnostic] = document.diagnostics
    assert diagnostic.severity is DiagnosticLevel.CUSTOM
    assert diagnostic.level_name == "Help"


def test_severity_defaults_to_error() -> None:
    """A diagnostic without severity is an error."""
    document = parse_document("[[diagnostics]]\nmessage = 'm'\n")

    assert document.diagnostics[0].severity is DiagnosticLevel.ERROR


def test_recoverable_problems_become_warnings() -> None:
    """Invalid colors and reversed spans are reported, not fatal."""
    text = """
[[sources]]
name = "s"
text = "abcdef"

[[diagnostics]]
message = "m"

[[diagnostics.labels]]
source = "s"
start = 4
end = 2
color = "chartreuse"
"""

    document = parse_document(text)

    [label] = document.diagnostics[0].labels
    assert label.color is None
    assert (label.span.start, label.span.end) == (4, 4)
    assert len(document.warnings) == 2
    assert any("chartreuse" in w for w in document.warnings)
    assert any("before start" in w for w in document.warnings)


@pytest.mark.parametrize(
    ("text", "fragment"),
    [
        ("[[diagnostics]]\n[[diagnostics.labels]]\nsource = 'nope'\nstart = 0\n", "unknown source"),
        ("[[sources]]\nname = 'a'\n", "needs 'text' or 'path'"),
        ("[[sources]]\ntext = 'a'\n", "need a 'name'"),
        (LABEL_IN_A, "missing required key 'start'"),
        (LABEL_IN_A + "start = true\n", "'start' must be int"),
        (LABEL_IN_A + "start = 0\nstyle = 'loud'\n", "unknown label style"),
        ("diagnostics = 3\n", "must be an array of tables"),
        ("[[diagnostics]]\nnotes = [1]\n", "'notes' must be"),
        ("[[diagnostics]]\nlocation = 'x'\n", "'location' must be a table"),
        ("not toml at all ===", "invalid TOML"),
    ],
)
def test_structural_problems_raise(text: str, fragment: str) -> None:
    """Wrong shapes raise `DocumentLoadError` with a useful reason."""
    with pytest.raises(DocumentLoadError) as excinfo:
        parse_document(text)

    assert fragment in str(excinfo.value)


def test_json_top_level_must_be_a_table() -> None:
    """A JSON array is not a document."""
    with pytest.raises(DocumentLoadError, match="top level"):
        parse_document("[1, 2]", fmt="json")


def test_load_document_resolves_relative_paths(tmp_path: Path) -> None:
    """File sources are read relative to the document and shown as written."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "lib.rs").write_text("fn f() {}\n", encoding="utf-8")
    doc_path = tmp_path / "report.toml"
    doc_path.write_text(
        '[[sources]]\npath = "src/lib.rs"\n\n[[diagnostics]]\nmessage = "m"\n'
        '[[diagnostics.labels]]\nsource = "src/lib.rs"\nstart = 3\nend = 4\n',
        encoding="utf-8",
    )

    document = load_document(doc_path)

    file_id = document.diagnostics[0].labels[0].file
    source_path = document.cache.source_path(file_id)
    assert source_path is not None
    assert source_path.kind is SourceKind.LOCAL
    assert source_path.value == "src/lib.rs"
    assert document.cache.fetch(file_id).text == "fn f() {}\n"


def test_load_document_picks_json_by_suffix(tmp_path: Path) -> None:
    """``.json`` documents are parsed as JSON."""
    doc_path = tmp_path / "report.json"
    doc_path.write_text('{"diagnostics": [{"message": "m"}]}', encoding="utf-8")

    assert load_document(doc_path).diagnostics[0].message == "m"


def test_load_document_missing_file(tmp_path: Path) -> None:
    """Unreadable documents raise `DocumentLoadError`."""
    with pytest.raises(DocumentLoadError, match="cannot read"):
        load_document(tmp_path / "absent.toml")


def test_missing_source_file_propagates(tmp_path: Path) -> None:
    """Source files that cannot be read raise `SourceIOError`."""
    with pytest.raises(SourceIOError):
        parse_document('[[sources]]\npath = "gone.rs"\n', base_dir=tmp_path)


def test_source_name_reused_for_a_different_source(tmp_path: Path) -> None:
    """A name may only refer to one source."""
    (tmp_path / "b.rs").write_text("b", encoding="utf-8")
    text = '[[sources]]\nname = "a"\ntext = "x"\n\n[[sources]]\nname = "a"\npath = "b.rs"\n'

    with pytest.raises(DocumentLoadError, match="used twice"):
        parse_document(text, base_dir=tmp_path)


def test_inline_text_with_lone_surrogate_is_a_load_error() -> None:
    """JSON can escape a lone surrogate; such text is rejected as bad data."""
    text = json.dumps({"sources": [{"name": "a", "text": "ab\ud800c"}]})

    with pytest.raises(DocumentLoadError, match=r"sources\[0\]\.text"):
        parse_document(text, fmt="json")
