"""Heuristic checks for common anti-patterns, outside of any specification clause."""

from __future__ import annotations

from sdpoker.config import CheckConfig
from sdpoker.constants import CANONICAL_EXAMPLES, EXAMPLE_COPY_THRESHOLD
from sdpoker.diagnostics import Diagnostic
from sdpoker.sdp import SDPDocument, classify

from .base import Rule


def example_similarity(document: SDPDocument, example: str) -> float:
    """
    The fraction of an example's lines found at the same position in the document.

    Origin lines are always considered equal, since copies commonly only change those.
    """
    example_lines = [line.raw for line in classify(example)]
    matches = 0
    for document_line, example_line in zip(document.lines, example_lines):
        if document_line.raw == example_line or (
            document_line.type == "o" and example_line.startswith("o=")
        ):
            matches += 1
    return matches / len(example_lines)


class ExampleCopy(Rule):
    """Flag documents that are near-verbatim copies of the examples in the standards."""

    _id = "example-copy"
    _section = "heuristics"
    _clause = "SMPTE ST 2110 examples"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return config.no_copy

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        return [
            Diagnostic(
                None,
                f"SDP file appears to be a copy of the example given in {standard}, "
                f"rather than a description of an actual stream.",
            )
            for standard, example in CANONICAL_EXAMPLES.items()
            if example_similarity(document, example) >= EXAMPLE_COPY_THRESHOLD
        ]
