# topmark:header:start
#
#   project      : SpanMark
#   file         : validation.py
#   file_relpath : src/spanmark/diagnostic/validation.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Accumulate diagnostics alongside a result.

A `Validation` is the outcome of a check that keeps going after non-fatal
problems. It is either a **success**, holding a value and the diagnostics
collected on the way, or a **failure**, holding the fatal `Diagnostic` that
stopped the check plus everything collected before it.

Examples:
    ```python
    found: list[Diagnostic] = []
    width = Validation.from_callable(int, "12").recover(found, default=0)
    assert width.no_problem() and width.unwrap() == 12
    assert width.all_diagnostics() == []
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Generic, TypeVar, cast

from spanmark.config.logging import get_logger
from spanmark.core.errors import SpanmarkError
from spanmark.diagnostic.model import Diagnostic

if TYPE_CHECKING:
    from collections.abc import Iterable

    from spanmark.config.logging import SpanmarkLogger

logger: SpanmarkLogger = get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class ValidationFailedError(SpanmarkError):
    """`Validation.unwrap` was called on a failure."""

    def __init__(self, fatal: Diagnostic) -> None:
        self.fatal: Diagnostic = fatal
        super().__init__(fatal.message or fatal.level_name)


@dataclass(slots=True)
class Validation(Generic[T]):
    """A value, or the fatal diagnostic that prevented it, plus collected diagnostics.

    Build instances with `success`, `failure` or `from_callable` rather than
    the constructor.

    Attributes:
        value (T | None): Result of a successful check; ``None`` on failure.
        fatal (Diagnostic | None): Problem that stopped the check; ``None`` on success.
        diagnostics (list[Diagnostic]): Non-fatal problems, in the order found.
    """

    value: T | None = None
    fatal: Diagnostic | None = None
    diagnostics: list[Diagnostic] = field(default_factory=lambda: [])

    # ---------------------------------------------------------- constructors

    @classmethod
    def success(cls, value: T, diagnostics: Iterable[Diagnostic] = ()) -> Validation[T]:
        """Return a success holding ``value``."""
        return cls(value=value, diagnostics=list(diagnostics))

    @classmethod
    def failure(cls, fatal: Diagnostic, diagnostics: Iterable[Diagnostic] = ()) -> Validation[T]:
        """Return a failure stopped by ``fatal``."""
        return cls(fatal=fatal, diagnostics=list(diagnostics))

    @classmethod
    def from_callable(cls, func: Callable[..., T], *args: object) -> Validation[T]:
        """Call ``func(*args)``; a `ValueError` becomes a failure with an error diagnostic."""
        try:
            return cls.success(func(*args))
        except ValueError as exc:
            logger.debug("Validation of %r failed: %s", args, exc)
            return cls.failure(Diagnostic.error().with_message(str(exc)))

    # ------------------------------------------------------------- queries

    def is_success(self) -> bool:
        """True when the check produced a value."""
        return self.fatal is None

    def is_failure(self) -> bool:
        """True when a fatal diagnostic stopped the check."""
        return self.fatal is not None

    def no_problem(self) -> bool:
        """True for a success that collected no diagnostics."""
        return self.is_success() and not self.diagnostics

    def all_diagnostics(self) -> list[Diagnostic]:
        """Return the collected diagnostics, followed by the fatal one if any.

        The list can be passed straight to `Renderer.render_all`.
        """
        if self.fatal is None:
            return list(self.diagnostics)
        return [*self.diagnostics, self.fatal]

    # ------------------------------------------------------------ unwrapping

    def unwrap(self) -> T:
        """Return the value.

        Raises:
            ValidationFailedError: If this is a failure.
        """
        if self.fatal is not None:
            raise ValidationFailedError(self.fatal)
        return cast("T", self.value)

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` for a failure."""
        if self.fatal is not None:
            return default
        return cast("T", self.value)

    # ----------------------------------------------------------- combinators

    def map(self, func: Callable[[T], U]) -> Validation[U]:
        """Apply ``func`` to a success value; failures pass through unchanged."""
        if self.fatal is not None:
            return Validation.failure(self.fatal, self.diagnostics)
        return Validation.success(func(cast("T", self.value)), self.diagnostics)

    def take_diagnostics(self, out: list[Diagnostic]) -> None:
        """Move the collected (non-fatal) diagnostics to the end of ``out``."""
        out.extend(self.diagnostics)
        self.diagnostics = []

    def validate(self, errors: list[Diagnostic]) -> Validation[T]:
        """Fold this result into a running check that collects into ``errors``.

        The collected diagnostics move into ``errors``. A success comes back
        with no diagnostics of its own; a failure keeps its fatal diagnostic
        and carries a copy of everything in ``errors``.
        """
        self.take_diagnostics(errors)
        if self.fatal is not None:
            return Validation.failure(self.fatal, errors)
        return Validation.success(cast("T", self.value))

    def recover(self, errors: list[Diagnostic], default: T) -> Validation[T]:
        """Like `validate`, but a failure is demoted to a diagnostic in ``errors``.

        The check carries on with ``default`` as its value.
        """
        self.take_diagnostics(errors)
        if self.fatal is not None:
            logger.debug("Recovering from %s with %r", self.fatal.level_name, default)
            errors.append(self.fatal)
            return Validation.success(default)
        return Validation.success(cast("T", self.value))
