"""Rules for SMPTE ST 2110-30 PCM audio streams."""

from __future__ import annotations

from sdpoker.config import CheckConfig
from sdpoker.constants import (
    AUDIO_CLOCK_RATES,
    AUDIO_ENCODINGS,
    AUDIO_PACKET_TIMES,
    CHANNEL_GROUP_SIZES,
    CHANNEL_ORDER_PAT,
    MAX_UNDEFINED_CHANNELS,
    UNDEFINED_CHANNEL_GROUP_PAT,
)
from sdpoker.diagnostics import Diagnostic
from sdpoker.sdp import SDPDocument, extract_parameters

from .base import Rule, stream_rtpmap


class AudioRTPMap(Rule):
    """Audio streams must use a PCM encoding, a permitted sampling rate and a channel count."""

    _id = "st2110-30-6.2-rtpmap"
    _section = "st2110-30-6"
    _clause = "SMPTE ST 2110-30 Section 6.2"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for section in document.media:
            if section.kind != "audio":
                continue
            rtpmap = stream_rtpmap(section)
            if rtpmap is None:
                diagnostics.append(Diagnostic(
                    section.line,
                    f"Audio stream {section.index} does not have a valid 'a=rtpmap' "
                    f"attribute, as per SMPTE ST 2110-30 Section 6.2.",
                ))
                continue
            if rtpmap.encoding_name not in AUDIO_ENCODINGS:
                diagnostics.append(Diagnostic(
                    section.line,
                    f"Audio stream {section.index} uses encoding '{rtpmap.encoding_name}' "
                    f"when one of {', '.join(sorted(AUDIO_ENCODINGS))} is required, "
                    f"as per SMPTE ST 2110-30 Section 6.2.",
                ))
            if rtpmap.clock_rate not in AUDIO_CLOCK_RATES:
                diagnostics.append(Diagnostic(
                    section.line,
                    f"Audio stream {section.index} uses a sampling rate of "
                    f"{rtpmap.clock_rate} when one of "
                    f"{', '.join(str(rate) for rate in sorted(AUDIO_CLOCK_RATES))} is "
                    f"required, as per SMPTE ST 2110-30 Section 6.2.",
                ))
            if rtpmap.channels is None or rtpmap.channels < 1:
                diagnostics.append(Diagnostic(
                    section.line,
                    f"Audio stream {section.index} must give its number of channels as the "
                    f"'a=rtpmap' encoding parameters, as per SMPTE ST 2110-30 Section 6.2.",
                ))
        return diagnostics


class PacketTime(Rule):
    """Audio streams should declare one of the packet times of the conformance levels."""

    _id = "st2110-30-6.2-ptime"
    _section = "st2110-30-6"
    _clause = "SMPTE ST 2110-30 Section 6.2"
    _advisory = True

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for section in document.media:
            if section.kind != "audio":
                continue
            ptime_lines = section.attributes("ptime")
            if not ptime_lines:
                diagnostics.append(Diagnostic(
                    section.line,
                    f"Audio stream {section.index} should have a packet time ('a=ptime') "
                    f"attribute, as per SMPTE ST 2110-30 Section 6.2.",
                ))
                continue
            for line in ptime_lines:
                if line.attribute_value not in AUDIO_PACKET_TIMES:
                    diagnostics.append(Diagnostic(
                        line.line,
                        f"Packet time '{line.attribute_value}' should be one of "
                        f"{', '.join(sorted(AUDIO_PACKET_TIMES, key=float))} milliseconds, "
                        f"as per SMPTE ST 2110-30 Section 6.2.",
                    ))
        return diagnostics


def _channel_count(symbol: str) -> int | None:
    if symbol in CHANNEL_GROUP_SIZES:
        return CHANNEL_GROUP_SIZES[symbol]
    match = UNDEFINED_CHANNEL_GROUP_PAT.fullmatch(symbol)
    if match is None:
        return None
    count = int(match.group("count"))
    return count if 1 <= count <= MAX_UNDEFINED_CHANNELS else None


class ChannelOrder(Rule):
    """
    Audio streams must declare their channel order, consistently with the channel count.

    Spec::
        channel-order=SMPTE2110.(<group>,<group>,...)
    """

    _id = "st2110-30-6.2-channel-order"
    _section = "st2110-30-6"
    _clause = "SMPTE ST 2110-30 Section 6.2.2"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return config.channel_order

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for section in document.media:
            if section.kind != "audio":
                continue
            params, _ = extract_parameters(section, config)
            if "channel-order" not in params:
                diagnostics.append(Diagnostic(
                    params.line,
                    f"Audio stream {section.index} does not have a 'channel-order' format "
                    f"parameter, as per SMPTE ST 2110-30 Section 6.2.2.",
                ))
                continue
            channel_order = params.get("channel-order", "")
            match = CHANNEL_ORDER_PAT.fullmatch(channel_order)
            if match is None:
                diagnostics.append(Diagnostic(
                    params.line,
                    f"Channel order '{channel_order}' is not of the form "
                    f"'SMPTE2110.(<group>,...)', as per SMPTE ST 2110-30 Section 6.2.2.",
                ))
                continue
            total = 0
            unknown: list[str] = []
            for symbol in match.group("groups").split(","):
                count = _channel_count(symbol)
                if count is None:
                    unknown.append(symbol)
                else:
                    total += count
            if unknown:
                diagnostics.append(Diagnostic(
                    params.line,
                    f"Channel order contains unknown channel grouping symbols "
                    f"{', '.join(repr(symbol) for symbol in unknown)}, "
                    f"as per SMPTE ST 2110-30 Section 6.2.2.",
                ))
                continue
            rtpmap = stream_rtpmap(section)
            if rtpmap is not None and rtpmap.channels is not None and total != rtpmap.channels:
                diagnostics.append(Diagnostic(
                    params.line,
                    f"Channel order describes {total} channels when the 'a=rtpmap' attribute "
                    f"of stream {section.index} declares {rtpmap.channels}, "
                    f"as per SMPTE ST 2110-30 Section 6.2.2.",
                ))
        return diagnostics
