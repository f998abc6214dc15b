"""Base classes for the conformance rule catalog."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import replace as dataclass_replace
from typing import ClassVar

from sdpoker.config import CheckConfig
from sdpoker.diagnostics import Diagnostic
from sdpoker.exceptions import SDPParseError, UnknownRuleError
from sdpoker.helpers import Registry, slots_dataclass
from sdpoker.sdp import MediaSection, RTPMap, SDPDocument


__all__ = [
    "Section",
    "SECTIONS",
    "get_section",
    "Rule",
    "stream_rtpmap",
]


_logger = logging.getLogger(__name__)


@slots_dataclass(frozen=True)
class Section:
    """A named group of rules, mirroring a clause of a specification document."""

    name: str
    title: str

    @property
    def rules(self) -> list[type[Rule]]:
        """The rules of this section, in registration order."""
        return [rule for rule in Rule.iter_registered() if rule._section == self.name]  # noqa: SLF001


SECTIONS: tuple[Section, ...] = (
    Section("rfc4566-5", "RFC 4566 Section 5 - SDP specification"),
    Section("rfc4566-5.1", "RFC 4566 Section 5.1 - Protocol version"),
    Section("rfc4566-5.2", "RFC 4566 Section 5.2 - Origin"),
    Section("rfc4566-5.7", "RFC 4566 Section 5.7 - Connection data"),
    Section("rfc4566-5.14", "RFC 4566 Section 5.14 - Media descriptions"),
    Section("rfc4566-6", "RFC 4566 Section 6 - SDP attributes"),
    Section("rfc4570-3", "RFC 4570 Section 3 - Source filters"),
    Section("st2110-10-6", "SMPTE ST 2110-10 Section 6 - Network and transport"),
    Section("st2110-10-8", "SMPTE ST 2110-10 Section 8 - Timing and stream descriptions"),
    Section("rfc7104-4", "RFC 7104 Section 4 / SMPTE ST 2022-7 - Duplicated streams"),
    Section("st2110-20-7", "SMPTE ST 2110-20 Section 7 - Uncompressed video"),
    Section("st2110-21-8", "SMPTE ST 2110-21 Section 8 - Traffic shaping"),
    Section("st2110-30-6", "SMPTE ST 2110-30 Section 6 - PCM audio"),
    Section("heuristics", "Anti-patterns"),
)


def get_section(name: str) -> Section:
    """Get a section by name, or raise :class:`UnknownRuleError`."""
    for section in SECTIONS:
        if section.name == name:
            return section
    raise UnknownRuleError(f"Unknown rule section {name!r}")


class Rule(Registry[str, "Rule"], ABC, registry=True, registry_attr="_id"):
    """
    Abstract base class for conformance rules.

    Concrete subclasses are registered in the catalog by their ``_id``, and are
    never instantiated: :meth:`check` is a pure function of the document and
    the configuration.
    """

    _id: ClassVar[str]
    _section: ClassVar[str]
    _clause: ClassVar[str]
    _advisory: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not cls.is_abstract():
            get_section(cls._section)

    @classmethod
    def is_enabled(cls, config: CheckConfig) -> bool:
        """Whether the rule is active under the given configuration."""
        return config.should or not cls._advisory

    @classmethod
    @abstractmethod
    def check(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:
        """
        Check a document against this rule.

        :param document: the parsed document.
        :param config: the checker configuration.
        :return: the violations found, possibly none.
        """

    @classmethod
    def run(cls, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:
        """Check the document if the rule is enabled, tagging the diagnostics with the rule id."""
        if not cls.is_enabled(config):
            _logger.debug("Rule %s disabled by configuration", cls._id)
            return []
        diagnostics = [
            diagnostic if diagnostic.rule else dataclass_replace(diagnostic, rule=cls._id)
            for diagnostic in cls.check(document, config)
        ]
        if diagnostics:
            _logger.debug(
                "Rule %s (%s) found %d problems", cls._id, cls._clause, len(diagnostics)
            )
        return diagnostics


def stream_rtpmap(section: MediaSection) -> RTPMap | None:
    """
    The RTP map of a stream's payload, or ``None`` if it has no usable ``a=rtpmap``.

    The map of the first payload type listed in the ``m=`` field is preferred,
    otherwise the first well-formed ``a=rtpmap`` of the stream is used.
    """
    rtpmaps: list[RTPMap] = []
    for line in section.attributes("rtpmap"):
        try:
            rtpmaps.append(RTPMap.parse(line.attribute_value or ""))
        except SDPParseError:
            continue
    if not rtpmaps:
        return None
    media = section.media
    if media is not None and media.payload_types:
        for rtpmap in rtpmaps:
            if rtpmap.payload_type == media.payload_types[0]:
                return rtpmap
    return rtpmaps[0]
