"""SDP documents, segmented into a session-level prologue and per-stream media sections."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

from typing_extensions import Self

from sdpoker.exceptions import SDPParseError

from .attributes import ConnectionData, MediaDescription, ParameterExtraction, parse_parameters
from .lines import LineEnding, SDPLine, classify, detect_line_ending, has_bare_line_breaks


__all__ = [
    "SDPSection",
    "SessionSection",
    "MediaSection",
    "SDPDocument",
    "segment",
]


_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SDPSection:
    """Base dataclass for a contiguous run of SDP lines."""

    lines: tuple[SDPLine, ...]

    def __iter__(self) -> Iterator[SDPLine]:
        return iter(self.lines)

    def fields_of(self, field_type: str) -> list[SDPLine]:
        """All the lines of the given type letter."""
        return [line for line in self.lines if line.type == field_type]

    def attributes(self, name: str) -> list[SDPLine]:
        """All the ``a=`` lines of the attribute with the given name."""
        return [line for line in self.lines if line.attribute_name == name]

    def connections(self) -> list[tuple[SDPLine, ConnectionData]]:
        """The ``c=`` lines of this section that can be parsed, with their parsed value."""
        connections: list[tuple[SDPLine, ConnectionData]] = []
        for line in self.fields_of("c"):
            try:
                connections.append((line, ConnectionData.parse(line.value or "")))
            except SDPParseError:
                continue
        return connections


@dataclass(frozen=True)
class SessionSection(SDPSection):
    """The session-level prologue: every line before the first ``m=`` field."""


@dataclass(frozen=True)
class MediaSection(SDPSection):
    """
    One stream: the lines from an ``m=`` field up to the next one, or the end.

    :param index: the 1-based ordinal of the stream in the document.
    """

    index: int

    @property
    def media_line(self) -> SDPLine:
        """The ``m=`` line starting the section."""
        return self.lines[0]

    @property
    def line(self) -> int:
        """The line number of the ``m=`` field."""
        return self.media_line.line

    @functools.cached_property
    def media(self) -> MediaDescription | None:
        """The parsed ``m=`` field value, or ``None`` if it's malformed."""
        try:
            return MediaDescription.parse(self.media_line.value or "")
        except SDPParseError:
            return None

    @functools.cached_property
    def parameter_extraction(self) -> ParameterExtraction:
        """The parsed format parameters of the stream, shared by every rule."""
        return parse_parameters(self)

    @property
    def kind(self) -> str | None:
        """The media type (``video``, ``audio``, ...) of the stream, if the ``m=`` field is valid."""
        return self.media.media if self.media is not None else None


def segment(lines: Sequence[SDPLine]) -> tuple[SessionSection, tuple[MediaSection, ...]]:
    """
    Partition the lines of a document into the session prologue and the streams.

    :param lines: the classified lines, in document order.
    :return: the session section, and one media section per ``m=`` field.
    """
    starts = [position for position, line in enumerate(lines) if line.type == "m"]
    session_end = starts[0] if starts else len(lines)
    session = SessionSection(lines=tuple(lines[:session_end]))
    media = tuple(
        MediaSection(lines=tuple(lines[start:end]), index=index)
        for index, (start, end) in enumerate(
            zip(starts, [*starts[1:], len(lines)]), start=1
        )
    )
    return session, media


@dataclass(frozen=True)
class SDPDocument:
    """
    An immutable, classified and segmented SDP document.

    :param text: the raw document text.
    :param line_ending: the line-ending style of the text.
    :param has_bare_line_breaks: whether any LF or CR is not part of a CRLF pair.
    :param lines: every physical line of the document, classified.
    :param session: the session-level prologue.
    :param media: the media sections (streams), in document order.
    """

    text: str
    line_ending: LineEnding
    has_bare_line_breaks: bool
    lines: tuple[SDPLine, ...]
    session: SessionSection
    media: tuple[MediaSection, ...]

    @property
    def types(self) -> list[str]:
        """The type letters of all lines, in document order."""
        return [line.type for line in self.lines]

    def fields_of(self, field_type: str) -> list[SDPLine]:
        """All the lines of the document with the given type letter."""
        return [line for line in self.lines if line.type == field_type]

    def attributes(self, name: str) -> list[SDPLine]:
        """All the ``a=`` lines of the document with the given attribute name."""
        return [line for line in self.lines if line.attribute_name == name]

    def section_of(self, line: SDPLine) -> SDPSection:
        """The session or media section a line belongs to."""
        for section in self.media:
            if section.lines[0].line <= line.line <= section.lines[-1].line:
                return section
        return self.session

    @classmethod
    def parse(cls, text: str) -> Self:
        """
        Classify and segment an SDP document.

        :param text: the SDP document text.
        :return: the parsed document.
        :raises SDPEmptyDocumentError: if the text has no lines at all.
        """
        lines = classify(text)
        session, media = segment(lines)
        _logger.debug(
            "Parsed SDP document with %d lines and %d media sections", len(lines), len(media)
        )
        return cls(
            text=text,
            line_ending=detect_line_ending(text),
            has_bare_line_breaks=has_bare_line_breaks(text),
            lines=tuple(lines),
            session=session,
            media=media,
        )
