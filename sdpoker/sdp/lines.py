"""Line classifier: split SDP text into typed, numbered fields."""

from __future__ import annotations

import enum

from sdpoker.constants import (
    BARE_LINE_BREAK_PAT,
    LINE_BREAK_PAT,
    LINE_FORMAT_PAT,
    SDP_FIELD_TYPES,
)
from sdpoker.exceptions import SDPEmptyDocumentError
from sdpoker.helpers import slots_dataclass


__all__ = [
    "LineEnding",
    "SDPLine",
    "split_lines",
    "classify",
    "detect_line_ending",
    "has_bare_line_breaks",
]


class LineEnding(enum.Enum):
    """Line-ending style used by a document."""

    CRLF = "\r\n"
    LF = "\n"
    CR = "\r"
    MIXED = "mixed"


@slots_dataclass(frozen=True)
class SDPLine:
    """
    One physical line of an SDP document, reduced to ``<type>=<value>``.

    Malformed lines are kept, so that format rules can report on them:
    ``value`` is ``None`` when the line has no ``=`` after its first character,
    and ``type`` is empty for blank lines.
    """

    type: str
    value: str | None
    line: int
    raw: str

    @property
    def is_blank(self) -> bool:
        """Whether the line is empty."""
        return not self.raw

    @property
    def is_well_formed(self) -> bool:
        """Whether the line has the ``<letter>=<value>`` shape, without whitespace around ``=``."""
        return LINE_FORMAT_PAT.fullmatch(self.raw) is not None

    @property
    def is_known_type(self) -> bool:
        """Whether the type letter is one defined in RFC 4566 Section 5."""
        return len(self.type) == 1 and self.type in SDP_FIELD_TYPES

    @property
    def attribute_name(self) -> str | None:
        """For ``a=`` lines, the attribute name."""
        if self.type != "a" or self.value is None:
            return None
        return self.value.split(":", 1)[0]

    @property
    def attribute_value(self) -> str | None:
        """For ``a=`` lines with a value, the text after the first colon."""
        if self.type != "a" or self.value is None or ":" not in self.value:
            return None
        return self.value.split(":", 1)[1]

    @classmethod
    def parse(cls, raw: str, line: int) -> SDPLine:
        """Classify a single physical line."""
        field_type = raw[:1]
        value = raw[2:] if raw[1:2] == "=" else None
        return cls(type=field_type, value=value, line=line, raw=raw)

    def __str__(self) -> str:
        return self.raw


def split_lines(text: str) -> list[str]:
    """
    Split text into physical lines on CRLF, CR or LF.

    A final line terminator does not produce an empty last line.
    """
    lines = LINE_BREAK_PAT.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def classify(text: str) -> list[SDPLine]:
    """
    Classify every physical line of an SDP document.

    :param text: the SDP document text.
    :return: one :class:`SDPLine` per physical line, blank and malformed ones included.
    :raises SDPEmptyDocumentError: if the text has no non-blank line at all.
    """
    raw_lines = split_lines(text)
    if not any(raw_lines):
        raise SDPEmptyDocumentError("SDP document does not contain any lines")
    return [SDPLine.parse(raw, number) for number, raw in enumerate(raw_lines, start=1)]


def has_bare_line_breaks(text: str) -> bool:
    """Whether the text has a LF not preceded by CR, or a CR not followed by LF."""
    return BARE_LINE_BREAK_PAT.search(text) is not None


def detect_line_ending(text: str) -> LineEnding:
    """Detect the line-ending style of a text (CRLF if it has no line breaks)."""
    crlf_count = text.count("\r\n")
    lf_count = text.count("\n") - crlf_count
    cr_count = text.count("\r") - crlf_count
    used = [
        ending
        for ending, count in (
            (LineEnding.CRLF, crlf_count),
            (LineEnding.LF, lf_count),
            (LineEnding.CR, cr_count),
        )
        if count
    ]
    if len(used) > 1:
        return LineEnding.MIXED
    return used[0] if used else LineEnding.CRLF
