"""Rules for SDP source filters, RFC 4570."""

from __future__ import annotations

from sdpoker.config import CheckConfig
from sdpoker.diagnostics import Diagnostic
from sdpoker.exceptions import SDPParseError
from sdpoker.sdp import MediaSection, SDPDocument, SourceFilter

from .base import Rule


class SourceFilterFormat(Rule):
    """
    Source filters must be well formed.

    Spec::
        a=source-filter: <filter-mode> <nettype> <address-types> <dest-address> <src-list>
    """

    _id = "rfc4570-3-source-filter-format"
    _section = "rfc4570-3"
    _clause = "RFC 4570 Section 3"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for line in document.attributes("source-filter"):
            try:
                SourceFilter.parse(line.attribute_value or "")
            except SDPParseError:
                diagnostics.append(Diagnostic(
                    line.line,
                    "Source-filter attribute must be of the form 'a=source-filter: "
                    "<filter-mode> <nettype> <address-types> <dest-address> <src-list>', "
                    "as per RFC 4570 Section 3.",
                ))
        return diagnostics


class SourceFilterDestination(Rule):
    """
    The destination of a source filter must be one of the connection addresses in scope.

    A media-level filter sees the connection data of its stream and of the session,
    a session-level filter sees all of them. ``*`` matches any address.
    """

    _id = "rfc4570-3-source-filter-destination"
    _section = "rfc4570-3"
    _clause = "RFC 4570 Section 3"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        session_addresses = {conn.address for _, conn in document.session.connections()}
        for line in document.attributes("source-filter"):
            try:
                source_filter = SourceFilter.parse(line.attribute_value or "")
            except SDPParseError:
                continue
            if source_filter.destination == "*":
                continue
            section = document.section_of(line)
            if isinstance(section, MediaSection):
                scope = session_addresses | {conn.address for _, conn in section.connections()}
            else:
                scope = session_addresses.union(*(
                    {conn.address for _, conn in media.connections()}
                    for media in document.media
                ))
            if source_filter.destination not in scope:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Source-filter destination address '{source_filter.destination}' does "
                    f"not match any connection data address in scope, "
                    f"as per RFC 4570 Section 3.",
                ))
        return diagnostics
