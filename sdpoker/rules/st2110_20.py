"""Rules for SMPTE ST 2110-20 uncompressed video streams."""

from __future__ import annotations

from typing import Iterator

from sdpoker.config import CheckConfig
from sdpoker.constants import (
    VIDEO_CLOCK_RATE,
    VIDEO_COLORIMETRIES,
    VIDEO_DEPTHS,
    VIDEO_DIMENSION_RANGE,
    VIDEO_ENCODING,
    VIDEO_FLAG_PARAMETERS,
    VIDEO_PACKING_MODES,
    VIDEO_RANGES,
    VIDEO_REQUIRED_PARAMETERS,
    VIDEO_SAMPLINGS,
    VIDEO_SSNS,
    VIDEO_TRANSFER_CHARACTERISTICS,
)
from sdpoker.diagnostics import Diagnostic
from sdpoker.sdp import MediaSection, ParameterMap, SDPDocument, extract_parameters, validate_rational

from .base import Rule, stream_rtpmap


__all__ = [
    "raw_video_streams",
]


def raw_video_streams(
    document: SDPDocument, config: CheckConfig
) -> Iterator[tuple[MediaSection, ParameterMap]]:
    """The video streams carrying uncompressed (``raw``) video, with their format parameters."""
    for section in document.media:
        if section.kind != "video":
            continue
        rtpmap = stream_rtpmap(section)
        if rtpmap is None or rtpmap.encoding_name != VIDEO_ENCODING:
            continue
        params, _ = extract_parameters(section, config)
        yield section, params


class VideoRTPMap(Rule):
    """Video streams must map their payload, and raw video must use a 90kHz clock."""

    _id = "st2110-20-7.1-rtpmap"
    _section = "st2110-20-7"
    _clause = "SMPTE ST 2110-20 Section 7.1"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for section in document.media:
            if section.kind != "video":
                continue
            rtpmap = stream_rtpmap(section)
            if rtpmap is None:
                diagnostics.append(Diagnostic(
                    section.line,
                    f"Video stream {section.index} does not have a valid 'a=rtpmap' "
                    f"attribute, as per SMPTE ST 2110-20 Section 7.1.",
                ))
            elif rtpmap.encoding_name == VIDEO_ENCODING and rtpmap.clock_rate != VIDEO_CLOCK_RATE:
                diagnostics.append(Diagnostic(
                    section.line,
                    f"Video stream {section.index} uses a clock rate of {rtpmap.clock_rate} "
                    f"when {VIDEO_CLOCK_RATE} is required, as per SMPTE ST 2110-20 Section 7.1.",
                ))
        return diagnostics


class RequiredVideoParameters(Rule):
    """Raw video streams must carry all the required format parameters."""

    _id = "st2110-20-7.2-required"
    _section = "st2110-20-7"
    _clause = "SMPTE ST 2110-20 Section 7.2"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for section, params in raw_video_streams(document, config):
            if not params.found:
                diagnostics.append(Diagnostic(
                    section.line,
                    f"Raw video stream {section.index} does not have a format parameters "
                    f"('a=fmtp') attribute, as per SMPTE ST 2110-20 Section 7.2.",
                ))
                continue
            diagnostics.extend(
                Diagnostic(
                    params.line,
                    f"Required format parameter '{name}' is missing from stream "
                    f"{section.index}, as per SMPTE ST 2110-20 Section 7.2.",
                )
                for name in VIDEO_REQUIRED_PARAMETERS
                if name not in params
            )
        return diagnostics


def _check_enumerated(
    params: ParameterMap, name: str, permitted: frozenset[str]
) -> Diagnostic | None:
    if name not in params:
        return None
    value = params.get(name)
    if value in permitted:
        return None
    return Diagnostic(
        params.line,
        f"Format parameter '{name}' has value '{value}', which is not one of the permitted "
        f"values ({', '.join(sorted(permitted))}), as per SMPTE ST 2110-20 Section 7.",
    )


class VideoParameterValues(Rule):
    """The required format parameters must have permitted values."""

    _id = "st2110-20-7.2-values"
    _section = "st2110-20-7"
    _clause = "SMPTE ST 2110-20 Section 7.2"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for _, params in raw_video_streams(document, config):
            for name in ("width", "height"):
                if name not in params:
                    continue
                value = params.get(name, "")
                if not value.isdecimal() or int(value) not in VIDEO_DIMENSION_RANGE:
                    diagnostics.append(Diagnostic(
                        params.line,
                        f"Format parameter '{name}' must be an integer in the range "
                        f"{VIDEO_DIMENSION_RANGE.start} to {VIDEO_DIMENSION_RANGE.stop - 1}, "
                        f"found '{value}', as per SMPTE ST 2110-20 Section 7.2.",
                    ))
            for name, permitted in (
                ("sampling", VIDEO_SAMPLINGS),
                ("depth", VIDEO_DEPTHS),
                ("colorimetry", VIDEO_COLORIMETRIES),
                ("PM", VIDEO_PACKING_MODES),
                ("SSN", VIDEO_SSNS),
            ):
                diagnostic = _check_enumerated(params, name, permitted)
                if diagnostic is not None:
                    diagnostics.append(diagnostic)
        return diagnostics


class ExactFrameRate(Rule):
    """
    The frame rate must be an integer, or a ratio in lowest terms.

    Spec::
        exactframerate=<integer> | <numerator>/<denominator>
    """

    _id = "st2110-20-7.2-exactframerate"
    _section = "st2110-20-7"
    _clause = "SMPTE ST 2110-20 Section 7.2"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for _, params in raw_video_streams(document, config):
            if "exactframerate" not in params:
                continue
            diagnostics.extend(
                Diagnostic(
                    params.line,
                    f"Format parameter 'exactframerate' value {problem}, "
                    f"as per SMPTE ST 2110-20 Section 7.2.",
                )
                for problem in validate_rational(params.get("exactframerate", ""))
            )
        return diagnostics


class OptionalVideoParameters(Rule):
    """Optional format parameters, when present, must have permitted values."""

    _id = "st2110-20-7.3-optional"
    _section = "st2110-20-7"
    _clause = "SMPTE ST 2110-20 Section 7.3"

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for _, params in raw_video_streams(document, config):
            for name, permitted in (
                ("TCS", VIDEO_TRANSFER_CHARACTERISTICS),
                ("RANGE", VIDEO_RANGES),
            ):
                diagnostic = _check_enumerated(params, name, permitted)
                if diagnostic is not None:
                    diagnostics.append(diagnostic)
            if "PAR" in params:
                diagnostics.extend(
                    Diagnostic(
                        params.line,
                        f"Format parameter 'PAR' value {problem}, "
                        f"as per SMPTE ST 2110-20 Section 7.3.",
                    )
                    for problem in validate_rational(
                        params.get("PAR", ""), separator=":", allow_below_one=True, ratio=True
                    )
                )
            for name in VIDEO_FLAG_PARAMETERS:
                if params.params.get(name) is not None:
                    diagnostics.append(Diagnostic(
                        params.line,
                        f"Format parameter '{name}' is a flag and must not have a value, "
                        f"as per SMPTE ST 2110-20 Section 7.3.",
                    ))
            if "segmented" in params and "interlace" not in params:
                diagnostics.append(Diagnostic(
                    params.line,
                    "Format parameter 'segmented' must only be used together with "
                    "'interlace', as per SMPTE ST 2110-20 Section 7.3.",
                ))
        return diagnostics
