"""Rules for duplicated streams (RFC 7104 and SMPTE ST 2022-7) and media grouping (RFC 5888)."""

from __future__ import annotations

from collections import Counter

from sdpoker.config import CheckConfig
from sdpoker.constants import DUPLICATION_SEMANTICS
from sdpoker.diagnostics import Diagnostic
from sdpoker.exceptions import SDPParseError
from sdpoker.sdp import Group, MediaId, SDPDocument

from .base import Rule


def _parse_groups(document: SDPDocument) -> list[tuple[int, Group]]:
    groups: list[tuple[int, Group]] = []
    for line in document.attributes("group"):
        try:
            groups.append((line.line, Group.parse(line.attribute_value or "")))
        except SDPParseError:
            continue
    return groups


class DuplicationGroup(Rule):
    """When duplicated streams are expected, a ``DUP`` group must be declared."""

    _id = "rfc7104-4-duplication-group"
    _section = "rfc7104-4"
    _clause = "RFC 7104 Section 4"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return config.duplicate

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        if any(group.semantics == DUPLICATION_SEMANTICS for _, group in _parse_groups(document)):
            return []
        return [Diagnostic(
            None,
            f"Duplicated streams are expected by configuration, but no "
            f"'a=group:{DUPLICATION_SEMANTICS}' attribute was found, "
            f"as per SMPTE ST 2022-7 and RFC 7104 Section 4.",
        )]


class GroupReferences(Rule):
    """
    Groups must be well formed and refer to the ``a=mid`` identifiers of the streams.

    Identifiers must be unique across the document, and each stream may have at most one.
    Duplication groups need at least two streams.
    """

    _id = "rfc7104-4-group-references"
    _section = "rfc7104-4"
    _clause = "RFC 5888 Section 5"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        identifiers: dict[str, int] = {}
        for section in document.media:
            mid_lines = section.attributes("mid")
            if len(mid_lines) > 1:
                diagnostics.append(Diagnostic(
                    mid_lines[1].line,
                    f"Stream {section.index} has more than one 'a=mid' attribute, "
                    f"as per RFC 5888 Section 4.",
                ))
            for line in mid_lines[:1]:
                try:
                    mid = MediaId.parse(line.attribute_value or "")
                except SDPParseError:
                    diagnostics.append(Diagnostic(
                        line.line,
                        "Media identification attribute must be of the form "
                        "'a=mid:<identification-tag>', as per RFC 5888 Section 4.",
                    ))
                    continue
                if mid.identifier in identifiers:
                    diagnostics.append(Diagnostic(
                        line.line,
                        f"Media identification '{mid.identifier}' of stream {section.index} "
                        f"is already used by stream {identifiers[mid.identifier]}, it must be "
                        f"unique, as per RFC 5888 Section 4.",
                    ))
                    continue
                identifiers[mid.identifier] = section.index

        diagnostics.extend(
            Diagnostic(
                line.line,
                "The 'mid' attribute is a media-level attribute and must not be "
                "used at session level, as per RFC 5888 Section 4.",
            )
            for line in document.session.attributes("mid")
        )

        for line in document.attributes("group"):
            try:
                group = Group.parse(line.attribute_value or "")
            except SDPParseError:
                diagnostics.append(Diagnostic(
                    line.line,
                    "Group attribute must be of the form 'a=group:<semantics> "
                    "<identification-tag> ...', as per RFC 5888 Section 5.",
                ))
                continue
            if group.semantics == DUPLICATION_SEMANTICS and len(group.identifiers) < 2:
                diagnostics.append(Diagnostic(
                    line.line,
                    "A duplication group must identify at least two streams, "
                    "as per RFC 7104 Section 4.",
                ))
            counts = Counter(group.identifiers)
            diagnostics.extend(
                Diagnostic(
                    line.line,
                    f"Identifier '{identifier}' is listed more than once in the "
                    f"'{group.semantics}' group, as per RFC 5888 Section 5.",
                )
                for identifier, count in counts.items()
                if count > 1
            )
            diagnostics.extend(
                Diagnostic(
                    line.line,
                    f"Identifier '{identifier}' of the '{group.semantics}' group does not "
                    f"match the 'a=mid' attribute of any stream, as per RFC 5888 Section 5.",
                )
                for identifier in counts
                if identifier not in identifiers
            )
        return diagnostics
