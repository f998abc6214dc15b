"""Rules for the SMPTE ST 2110-10 system timing and definitions."""

from __future__ import annotations

from sdpoker.config import CheckConfig, MediaKind
from sdpoker.constants import (
    MAX_PTP_DOMAIN,
    MAX_UDP_SIZES,
    PTP_VERSIONS,
    RTP_PROFILE,
    ST2110_PTP_VERSIONS,
)
from sdpoker.diagnostics import Diagnostic
from sdpoker.exceptions import SDPParseError
from sdpoker.sdp import MediaClock, ReferenceClock, SDPDocument, extract_parameters

from .base import Rule


class RTPProfile(Rule):
    _id = "st2110-10-6.1-rtp-profile"
    _section = "st2110-10-6"
    _clause = "SMPTE ST 2110-10 Section 6.1"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        return [
            Diagnostic(
                section.line,
                f"Stream {section.index} uses protocol '{section.media.protocol}' when "
                f"'{RTP_PROFILE}' is required, as per SMPTE ST 2110-10 Section 6.1.",
            )
            for section in document.media
            if section.media is not None and section.media.protocol != RTP_PROFILE
        ]


class MaxUDPSize(Rule):
    """The ``MAXUDP`` format parameter, when present, must name a permitted packet size limit."""

    _id = "st2110-10-6.3-max-udp"
    _section = "st2110-10-6"
    _clause = "SMPTE ST 2110-10 Section 6.3"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for section in document.media:
            params, _ = extract_parameters(section, config)
            if "MAXUDP" not in params:
                continue
            max_udp = params.get("MAXUDP")
            if max_udp not in MAX_UDP_SIZES:
                found = f"found '{max_udp}'" if max_udp is not None else "given without a value"
                diagnostics.append(Diagnostic(
                    params.line,
                    f"Format parameter 'MAXUDP' must be one of "
                    f"{', '.join(sorted(MAX_UDP_SIZES))}, {found}, "
                    f"as per SMPTE ST 2110-10 Section 6.3.",
                ))
        return diagnostics


class MediaClockPresence(Rule):
    """Every stream must have a well-formed media-level ``a=mediaclk`` attribute."""

    _id = "st2110-10-8.1-mediaclk"
    _section = "st2110-10-8"
    _clause = "SMPTE ST 2110-10 Section 8.1"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = [
            Diagnostic(
                line.line,
                "The 'mediaclk' attribute must be given at media level, "
                "as per SMPTE ST 2110-10 Section 8.1.",
            )
            for line in document.session.attributes("mediaclk")
        ]
        for section in document.media:
            mediaclk_lines = section.attributes("mediaclk")
            if not mediaclk_lines:
                diagnostics.append(Diagnostic(
                    section.line,
                    f"Stream {section.index} does not have a media clock ('a=mediaclk') "
                    f"attribute, as per SMPTE ST 2110-10 Section 8.1.",
                ))
            for line in mediaclk_lines:
                try:
                    MediaClock.parse(line.attribute_value or "")
                except SDPParseError:
                    diagnostics.append(Diagnostic(
                        line.line,
                        "Media clock attribute is not of an acceptable form, "
                        "as per RFC 7273 Section 5 and SMPTE ST 2110-10 Section 8.1.",
                    ))
        return diagnostics


class MediaClockDirect(Rule):
    """Media clocks should use the direct reference, with a zero offset."""

    _id = "st2110-10-8.1-mediaclk-direct"
    _section = "st2110-10-8"
    _clause = "SMPTE ST 2110-10 Section 8.1"
    _advisory = True

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for line in document.attributes("mediaclk"):
            try:
                mediaclk = MediaClock.parse(line.attribute_value or "")
            except SDPParseError:
                continue
            if not mediaclk.is_direct:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"The media clock should use the 'direct' reference, found "
                    f"'{mediaclk.mode}', as per SMPTE ST 2110-10 Section 8.1.",
                ))
            elif mediaclk.offset != 0:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"The direct media clock offset should be zero, found {mediaclk.offset}, "
                    f"as per SMPTE ST 2110-10 Section 8.1.",
                ))
        return diagnostics


class ReferenceClockPresence(Rule):
    """Every stream needs a ``a=ts-refclk``, either of its own or at session level."""

    _id = "st2110-10-8.2-ts-refclk"
    _section = "st2110-10-8"
    _clause = "SMPTE ST 2110-10 Section 8.2"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        if document.session.attributes("ts-refclk"):
            return []
        return [
            Diagnostic(
                section.line,
                f"Stream {section.index} does not have a timestamp reference clock "
                f"('a=ts-refclk') attribute, at media or session level, "
                f"as per SMPTE ST 2110-10 Section 8.2.",
            )
            for section in document.media
            if not section.attributes("ts-refclk")
        ]


class ReferenceClockFormat(Rule):
    """
    Reference clocks must be PTP or local MAC clocks.

    PTP clocks must use a supported IEEE 1588 version and a domain in 0..127.
    """

    _id = "st2110-10-8.2-ts-refclk-format"
    _section = "st2110-10-8"
    _clause = "SMPTE ST 2110-10 Section 8.2"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for line in document.attributes("ts-refclk"):
            try:
                refclk = ReferenceClock.parse(line.attribute_value or "")
            except SDPParseError:
                diagnostics.append(Diagnostic(
                    line.line,
                    "Reference clock attribute is not of an acceptable form, "
                    "as per RFC 7273 Section 4.8 and SMPTE ST 2110-10 Section 8.2.",
                ))
                continue
            if refclk.source not in ("ptp", "localmac"):
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Reference clock source '{refclk.source}' is not permitted, only PTP "
                    f"or local MAC clocks may be used, as per SMPTE ST 2110-10 Section 8.2.",
                ))
                continue
            if refclk.source != "ptp":
                continue
            if refclk.ptp_version not in PTP_VERSIONS:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"Unknown PTP version '{refclk.ptp_version}', it must be one of "
                    f"{', '.join(sorted(PTP_VERSIONS))}, as per RFC 7273 Section 4.8.",
                ))
            elif refclk.ptp_version not in ST2110_PTP_VERSIONS:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"PTP version '{refclk.ptp_version}' is not permitted, it must be one of "
                    f"{', '.join(sorted(ST2110_PTP_VERSIONS))}, "
                    f"as per SMPTE ST 2110-10 Section 8.2.",
                ))
            if refclk.domain is not None and refclk.domain > MAX_PTP_DOMAIN:
                diagnostics.append(Diagnostic(
                    line.line,
                    f"PTP domain {refclk.domain} is out of range, it must be in the range "
                    f"0 to {MAX_PTP_DOMAIN}, as per RFC 7273 Section 4.8.",
                ))
        return diagnostics


class MediaKindRestriction(Rule):
    """Only streams of the configured media type are permitted."""

    _id = "st2110-10-media-kind"
    _section = "st2110-10-8"
    _clause = "SMPTE ST 2110-10 Section 8"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return config.media_kind is not MediaKind.ANY

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        expected = config.media_kind.value
        return [
            Diagnostic(
                section.line,
                f"Stream {section.index} has media type '{section.kind}' when only "
                f"{expected} streams are permitted by configuration, "
                f"see SMPTE ST 2110-10 Section 8.",
            )
            for section in document.media
            if section.kind is not None and section.kind != expected
        ]
