"""Conformance diagnostics, the output of every rule."""

from __future__ import annotations

from sdpoker.helpers import slots_dataclass


__all__ = ["Diagnostic"]


@slots_dataclass(frozen=True)
class Diagnostic:
    """
    A single conformance violation.

    :param line: the 1-based line number the violation is attributed to,
        or ``None`` for whole-document findings.
    :param message: human-readable text citing the violated clause.
    :param rule: the id of the rule that produced it.
    """

    line: int | None
    message: str
    rule: str = ""

    @property
    def is_document_level(self) -> bool:
        """Whether the diagnostic is not attributed to a specific line."""
        return self.line is None

    def __str__(self) -> str:
        if self.is_document_level:
            return self.message
        return f"Line {self.line}: {self.message}"
