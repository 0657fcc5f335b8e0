# topmark:header:start
#
#   project      : SpanMark
#   file         : __main__.py
#   file_relpath : src/spanmark/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running SpanMark via ``python -m spanmark``.

Delegates to `spanmark.cli.main.cli`, the same entry point as the
``spanmark`` console script.

Examples:
    Render a diagnostics document::

        python -m spanmark render diagnostics.toml
"""

from __future__ import annotations

from spanmark.cli.main import cli

if __name__ == "__main__":
    cli()
