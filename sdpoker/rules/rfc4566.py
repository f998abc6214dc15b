"""Rules for the base SDP specification, RFC 4566."""

from __future__ import annotations

from sdpoker.config import AddressFamily, CastMode, CheckConfig
from sdpoker.constants import DYNAMIC_PAYLOAD_TYPES, RTP_PROFILE, SUPPORTED_SDP_VERSIONS
from sdpoker.diagnostics import Diagnostic
from sdpoker.exceptions import SDPParseError
from sdpoker.sdp import (
    ConnectionData,
    MediaDescription,
    Origin,
    RTPMap,
    SDPDocument,
    check_order,
    extract_parameters,
    missing_mandatory,
    validate_ttl,
)

from .base import Rule


class LineEndings(Rule):
    """Every line must end with CRLF, with no lone CR or LF anywhere."""

    _id = "rfc4566-5-line-endings"
    _section = "rfc4566-5"
    _clause = "RFC 4566 Section 5"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return config.check_endings

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        if not document.has_bare_line_breaks:
            return []
        return [Diagnostic(
            None,
            "SDP file contains record ending characters 0x0a and 0x0d separately from "
            "the expected CRLF pattern, as per RFC 4566 Section 5.",
        )]


class LineFormat(Rule):
    """Every line must be ``<type>=<value>``, with no blank lines."""

    _id = "rfc4566-5-line-format"
    _section = "rfc4566-5"
    _clause = "RFC 4566 Section 5"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for line in document.lines:
            if line.is_blank:
                diagnostics.append(Diagnostic(
                    line.line,
                    "Blank lines are not permitted, every line of an SDP file must be of "
                    "the form '<type>=<value>', as per RFC 4566 Section 5.",
                ))
            elif not line.is_well_formed:
                diagnostics.append(Diagnostic(
                    line.line,
                    "Every line of an SDP file must be of the form '<type>=<value>' with "
                    "<type> being one character and no whitespace either side of the "
                    "equals, as per RFC 4566 Section 5.",
                ))
        return diagnostics


class TypeLetters(Rule):
    """Only the type letters defined by RFC 4566 may be used."""

    _id = "rfc4566-5-type-letters"
    _section = "rfc4566-5"
    _clause = "RFC 4566 Section 5"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        return [
            Diagnostic(
                line.line,
                f"Type '{line.type}' is not a permitted type letter, every line of an "
                f"SDP file must start with one of the types defined in RFC 4566 Section 5.",
            )
            for line in document.lines
            if not line.is_blank and not line.is_known_type
        ]


class MandatoryTypes(Rule):
    _id = "rfc4566-5-mandatory-types"
    _section = "rfc4566-5"
    _clause = "RFC 4566 Section 5"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        return [
            Diagnostic(
                None,
                f"An SDP file must have at least one field of type '{field_type}', "
                f"as per RFC 4566 Section 5.",
            )
            for field_type in missing_mandatory(document.types)
        ]


class FieldOrder(Rule):
    """
    Fields must appear in the fixed order of RFC 4566 Section 5.

    Blank lines are left out of the walk, they are reported by the line format rule.
    """

    _id = "rfc4566-5-field-order"
    _section = "rfc4566-5"
    _clause = "RFC 4566 Section 5"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        lines = [line for line in document.lines if not line.is_blank]
        return [
            Diagnostic(
                lines[violation.position].line,
                f"SDP type '{violation.previous}' cannot be followed by type "
                f"'{violation.current}', as per the fixed order of RFC 4566 Section 5.",
            )
            for violation in check_order([line.type for line in lines])
        ]


class NulCharacter(Rule):
    _id = "rfc4566-5-nul-character"
    _section = "rfc4566-5"
    _clause = "RFC 4566 Section 5"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        return [
            Diagnostic(
                line.line,
                "Value contains illegal NUL (0x00) character not permitted by "
                "RFC 4566 Section 5.",
            )
            for line in document.lines
            if "\x00" in line.raw
        ]


class ProtocolVersion(Rule):
    _id = "rfc4566-5.1-version"
    _section = "rfc4566-5.1"
    _clause = "RFC 4566 Section 5.1"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        first_line = document.lines[0]
        if first_line.type == "v" and first_line.value in SUPPORTED_SDP_VERSIONS:
            return []
        return [Diagnostic(
            first_line.line, "The first line must be 'v=0', as per RFC 4566 Section 5.1."
        )]


class OriginFormat(Rule):
    """The origin field must be well formed, with a unicast address of the configured type."""

    _id = "rfc4566-5.2-origin-format"
    _section = "rfc4566-5.2"
    _clause = "RFC 4566 Section 5.2"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for line in document.fields_of("o"):
            try:
                origin = Origin.parse(line.value or "")
            except SDPParseError:
                diagnostics.append(Diagnostic(
                    line.line,
                    "Origin field ('o=') is not an acceptable pattern, "
                    "as per RFC 4566 Section 5.2.",
                ))
                continue
            expected = config.address_family
            if expected is not AddressFamily.ANY and origin.addrtype != expected.value:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Origin field specified an address type of '{origin.addrtype}' when "
                    f"'{expected.value}' is requested by configuration, "
                    f"see RFC 4566 Section 5.2.",
                ))
            if ConnectionData(origin.addrtype, origin.address).is_multicast:
                diagnostics.append(Diagnostic(
                    line.line,
                    "Origin field address of the machine is a multicast address when it "
                    "must be a unicast address, as per RFC 4566 Section 5.2.",
                ))
        return diagnostics


class OriginAddress(Rule):
    """The origin address must be a literal of the configured address family."""

    _id = "rfc4566-5.2-origin-address"
    _section = "rfc4566-5.2"
    _clause = "RFC 4566 Section 5.2"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return config.address_family is not AddressFamily.ANY

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        expected = config.address_family
        for line in document.fields_of("o"):
            try:
                origin = Origin.parse(line.value or "")
            except SDPParseError:
                continue
            if ConnectionData(origin.addrtype, origin.address).family is not expected:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Origin field address '{origin.address}' of the machine should be an "
                    f"{expected.value} address as requested by configuration, "
                    f"see RFC 4566 Section 5.2.",
                ))
        return diagnostics


class ConnectionPresence(Rule):
    """Connection data must be given at session level, or for every stream."""

    _id = "rfc4566-5.7-connection-presence"
    _section = "rfc4566-5.7"
    _clause = "RFC 4566 Section 5.7"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        if document.session.fields_of("c"):
            return []
        if not document.media:
            return [Diagnostic(
                document.lines[-1].line,
                "For all streams, no connection data ('c=') field was found, "
                "as per RFC 4566 Section 5.7.",
            )]
        return [
            Diagnostic(
                section.line,
                f"For stream {section.index}, no connection data ('c=') field was found, "
                f"as per RFC 4566 Section 5.7.",
            )
            for section in document.media
            if not section.fields_of("c")
        ]


class ConnectionFormat(Rule):
    """Connection data must be ``IN IP4`` or ``IN IP6``, and multicast IPv4 needs a valid TTL."""

    _id = "rfc4566-5.7-connection-format"
    _section = "rfc4566-5.7"
    _clause = "RFC 4566 Section 5.7"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for line in document.fields_of("c"):
            try:
                connection = ConnectionData.parse(line.value or "")
            except SDPParseError:
                diagnostics.append(Diagnostic(
                    line.line,
                    "Connection data field does not match an acceptable pattern, "
                    "as per RFC 4566 Section 5.7 and SMPTE ST 2110-10 Section 6.1.",
                ))
                continue
            expected = config.address_family
            if expected is not AddressFamily.ANY and connection.addrtype != expected.value:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Configuration requests {expected.value} but connection data field "
                    f"address type is '{connection.addrtype}', see RFC 4566 Section 5.7.",
                ))
            family = connection.family
            if family is not None and family.value != connection.addrtype:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Connection data field address '{connection.address}' is not of the "
                    f"declared address type '{connection.addrtype}', "
                    f"as per RFC 4566 Section 5.7.",
                ))
            if connection.addrtype != "IP4" or family is not AddressFamily.IP4:
                continue
            if connection.is_multicast:
                hint = (
                    f" ('/{connection.prefix_length}' is a prefix length)"
                    if connection.prefix_length is not None
                    else ""
                )
                diagnostics.extend(
                    Diagnostic(line.line, f"{problem}{hint}, as per RFC 4566 Section 5.7.")
                    for problem in validate_ttl(connection.ttl)
                )
            elif connection.ttl is not None or connection.prefix_length is not None:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Connection data field address '{connection.address}' is unicast and "
                    f"must not have a TTL field, as per RFC 4566 Section 5.7.",
                ))
        return diagnostics


class ConnectionAddress(Rule):
    """Connection addresses must match the configured address family and cast mode."""

    _id = "rfc4566-5.7-connection-address"
    _section = "rfc4566-5.7"
    _clause = "RFC 4566 Section 5.7"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return (
            config.address_family is not AddressFamily.ANY
            or config.cast_mode is not CastMode.ANY
        )

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        expected = config.address_family
        for line in document.fields_of("c"):
            try:
                connection = ConnectionData.parse(line.value or "")
            except SDPParseError:
                continue
            address = connection.address
            if expected is not AddressFamily.ANY and connection.family is not expected:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"{expected.value} addresses requested by configuration and connection "
                    f"data field address '{address}' is not, see RFC 4566 Section 5.7.",
                ))
            if config.cast_mode is CastMode.MULTICAST and not connection.is_multicast:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Multicast connections requested by configuration and connection data "
                    f"field address '{address}' is unicast, see RFC 4566 Section 5.7.",
                ))
            if config.cast_mode is CastMode.UNICAST and connection.is_multicast:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Unicast connections requested by configuration and connection data "
                    f"field address '{address}' is multicast, see RFC 4566 Section 5.7.",
                ))
        return diagnostics


class MediaFormat(Rule):
    _id = "rfc4566-5.14-media-format"
    _section = "rfc4566-5.14"
    _clause = "RFC 4566 Section 5.14"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for line in document.fields_of("m"):
            try:
                MediaDescription.parse(line.value or "")
            except SDPParseError:
                diagnostics.append(Diagnostic(
                    line.line,
                    "Media description field must be of the form "
                    "'m=<media> <port> <proto> <fmt> ...', as per RFC 4566 Section 5.14.",
                ))
        return diagnostics


class NoMedia(Rule):
    """Reject documents that do not describe any stream, when configured to."""

    _id = "rfc4566-5.14-no-media"
    _section = "rfc4566-5.14"
    _clause = "RFC 4566 Section 5.14"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return config.no_media

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        if document.media:
            return []
        return [Diagnostic(
            None,
            "SDP file does not include any media descriptions ('m=' fields), which are "
            "required by configuration, see RFC 4566 Section 5.14.",
        )]


class RTPMapAttributes(Rule):
    """
    ``a=rtpmap`` attributes must be well formed, media-level, and refer to a payload
    type of their stream; every dynamic payload type needs one.
    """

    _id = "rfc4566-6-rtpmap"
    _section = "rfc4566-6"
    _clause = "RFC 4566 Section 6"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = [
            Diagnostic(
                line.line,
                "The 'rtpmap' attribute is a media-level attribute and must not be "
                "used at session level, as per RFC 4566 Section 6.",
            )
            for line in document.session.attributes("rtpmap")
        ]
        for section in document.media:
            media = section.media
            mapped: set[int] = set()
            for line in section.attributes("rtpmap"):
                try:
                    rtpmap = RTPMap.parse(line.attribute_value or "")
                except SDPParseError:
                    diagnostics.append(Diagnostic(
                        line.line,
                        "The 'rtpmap' attribute must be of the form 'a=rtpmap:<payload type> "
                        "<encoding name>/<clock rate>[/<encoding parameters>]', "
                        "as per RFC 4566 Section 6.",
                    ))
                    continue
                if rtpmap.payload_type in mapped:
                    diagnostics.append(Diagnostic(
                        line.line,
                        f"Payload type {rtpmap.payload_type} is mapped by more than one "
                        f"'rtpmap' attribute, as per RFC 4566 Section 6.",
                    ))
                mapped.add(rtpmap.payload_type)
                if media is not None and rtpmap.payload_type not in media.payload_types:
                    diagnostics.append(Diagnostic(
                        line.line,
                        f"The 'rtpmap' attribute payload type {rtpmap.payload_type} is not "
                        f"one of the formats of stream {section.index}, "
                        f"as per RFC 4566 Section 6.",
                    ))
            if media is None or not media.protocol.startswith(RTP_PROFILE):
                continue
            diagnostics.extend(
                Diagnostic(
                    section.line,
                    f"Dynamic payload type {payload_type} of stream {section.index} has no "
                    f"'rtpmap' attribute, as per RFC 4566 Section 6.",
                )
                for payload_type in media.payload_types
                if payload_type in DYNAMIC_PAYLOAD_TYPES and payload_type not in mapped
            )
        return diagnostics


class FMTPAttributes(Rule):
    """``a=fmtp`` attributes must be media-level, well formed, and without repeated parameters."""

    _id = "rfc4566-6-fmtp"
    _section = "rfc4566-6"
    _clause = "RFC 4566 Section 6"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = [
            Diagnostic(
                line.line,
                "The 'fmtp' attribute is a media-level attribute and must not be "
                "used at session level, as per RFC 4566 Section 6.",
            )
            for line in document.session.attributes("fmtp")
        ]
        for section in document.media:
            _, extraction_diagnostics = extract_parameters(section, config)
            diagnostics.extend(extraction_diagnostics)
        return diagnostics
