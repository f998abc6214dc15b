"""Rules for SMPTE ST 2110-21 traffic shaping of video streams, checked on request."""

from __future__ import annotations

from sdpoker.config import CheckConfig
from sdpoker.constants import SHAPING_INTEGER_PARAMETERS, SHAPING_TYPES
from sdpoker.diagnostics import Diagnostic
from sdpoker.sdp import SDPDocument

from .base import Rule
from .st2110_20 import raw_video_streams


class TrafficShaping(Rule):
    """Raw video streams must declare their sender type with the ``TP`` parameter."""

    _id = "st2110-21-8.1-shaping"
    _section = "st2110-21-8"
    _clause = "SMPTE ST 2110-21 Section 8.1"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return config.shaping

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for section, params in raw_video_streams(document, config):
            if "TP" not in params:
                diagnostics.append(Diagnostic(
                    params.line,
                    f"Required format parameter 'TP' is missing from stream {section.index}, "
                    f"as per SMPTE ST 2110-21 Section 8.1.",
                ))
            elif params.get("TP") not in SHAPING_TYPES:
                diagnostics.append(Diagnostic(
                    params.line,
                    f"Format parameter 'TP' has value '{params.get('TP')}', which is not one "
                    f"of the permitted sender types ({', '.join(sorted(SHAPING_TYPES))}), "
                    f"as per SMPTE ST 2110-21 Section 8.1.",
                ))
        return diagnostics


class TrafficShapingValues(Rule):
    """``TROFF`` and ``CMAX``, when present, must be non-negative integers."""

    _id = "st2110-21-8.1-shaping-values"
    _section = "st2110-21-8"
    _clause = "SMPTE ST 2110-21 Section 8.1"

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:  # noqa: D102
        return config.shaping

    @classmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:  # noqa: D102
        diagnostics: list[Diagnostic] = []
        for _, params in raw_video_streams(document, config):
            for name in SHAPING_INTEGER_PARAMETERS:
                if name not in params:
                    continue
                value = params.get(name, "")
                if not value.isdecimal():
                    diagnostics.append(Diagnostic(
                        params.line,
                        f"Format parameter '{name}' must be a non-negative integer, "
                        f"found '{value}', as per SMPTE ST 2110-21 Section 8.1.",
                    ))
        return diagnostics
