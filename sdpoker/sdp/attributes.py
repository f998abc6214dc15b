"""Typed parsers for SDP field values and attributes, and per-stream parameter extraction."""

from __future__ import annotations

from collections import Counter
from dataclasses import field as dataclass_field
from typing import TYPE_CHECKING, Mapping

from frozendict import frozendict
from typing_extensions import Self

from sdpoker.config import AddressFamily, CheckConfig
from sdpoker.constants import (
    CONNECTION_PAT,
    FMTP_PAT,
    FMTP_STRICT_PARAMS_PAT,
    GROUP_PAT,
    IPv4_HOST_PREFIX_LENGTH,
    LOCALMAC_REFCLK_PAT,
    MEDIA_PAT,
    MEDIACLK_DIRECT_PAT,
    MID_PAT,
    ORIGIN_PAT,
    PTP_REFCLK_PAT,
    RTPMAP_PAT,
    SOURCE_FILTER_PAT,
)
from sdpoker.diagnostics import Diagnostic
from sdpoker.exceptions import SDPParseError
from sdpoker.helpers import slots_dataclass

from .values import address_family, is_multicast


if TYPE_CHECKING:
    from .sections import MediaSection


__all__ = [
    "Origin",
    "ConnectionData",
    "MediaDescription",
    "RTPMap",
    "FormatParameters",
    "ReferenceClock",
    "MediaClock",
    "Group",
    "MediaId",
    "SourceFilter",
    "ParameterMap",
    "ParameterExtraction",
    "parse_parameters",
    "extract_parameters",
]


@slots_dataclass(frozen=True)
class Origin:
    """
    SDP origin field value, defined in :rfc:`4566#section-5.2`.

    Spec::
        o=<username> <sess-id> <sess-version> <nettype> <addrtype> <unicast-address>
    """

    username: str
    sess_id: str
    sess_version: str
    addrtype: str
    address: str

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        match = ORIGIN_PAT.fullmatch(value)
        if match is None:
            raise SDPParseError(f"Invalid origin field value: {value}")
        return cls(**match.groupdict())


@slots_dataclass(frozen=True)
class ConnectionData:
    """
    SDP connection data field value, defined in :rfc:`4566#section-5.7`.

    Spec::
        c=<nettype> <addrtype> <connection-address>

    The TTL is kept as the raw digits, so that its form can be checked too.
    A lone ``/32`` after an IPv4 address is taken as a host prefix length
    written in CIDR notation, and the address is then considered to have no TTL.
    """

    addrtype: str
    address: str
    ttl: str | None = None
    number_of_addresses: int | None = None
    prefix_length: int | None = None

    @property
    def family(self) -> AddressFamily | None:
        """The address family of the address literal, if recognized."""
        return address_family(self.address)

    @property
    def is_multicast(self) -> bool:
        """Whether the connection address is a multicast address."""
        return is_multicast(self.address)

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        match = CONNECTION_PAT.fullmatch(value)
        if match is None:
            raise SDPParseError(f"Invalid connection data field value: {value}")
        addrtype, ttl, count = match.group("addrtype", "ttl", "count")
        # IPv6 addresses have no TTL, so a single suffix is the number of addresses
        if addrtype == "IP6" and ttl is not None:
            if count is not None or ttl.startswith("0"):
                raise SDPParseError(f"Invalid IPv6 connection address: {value}")
            ttl, count = None, ttl
        prefix_length: int | None = None
        if addrtype == "IP4" and count is None and ttl == str(IPv4_HOST_PREFIX_LENGTH):
            ttl, prefix_length = None, IPv4_HOST_PREFIX_LENGTH
        return cls(
            addrtype=addrtype,
            address=match.group("address"),
            ttl=ttl,
            number_of_addresses=int(count) if count is not None else None,
            prefix_length=prefix_length,
        )


@slots_dataclass(frozen=True)
class MediaDescription:
    """
    SDP media field value, defined in :rfc:`4566#section-5.14`.

    Spec::
        m=<media> <port> <proto> <fmt> ...
        m=<media> <port>/<number of ports> <proto> <fmt> ...
    """

    media: str
    port: int
    number_of_ports: int | None
    protocol: str
    formats: tuple[str, ...]

    @property
    def payload_types(self) -> tuple[int, ...]:
        """The formats that are RTP payload type numbers."""
        return tuple(int(fmt) for fmt in self.formats if fmt.isdecimal())

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        match = MEDIA_PAT.fullmatch(value)
        if match is None:
            raise SDPParseError(f"Invalid media field value: {value}")
        port = int(match.group("port"))
        if port > 65535:
            raise SDPParseError(f"Invalid port in media field: {port}")
        port_count = match.group("port_count")
        return cls(
            media=match.group("media"),
            port=port,
            number_of_ports=int(port_count) if port_count is not None else None,
            protocol=match.group("protocol"),
            formats=tuple(match.group("formats").split()),
        )


@slots_dataclass(frozen=True)
class RTPMap:
    """
    SDP media attribute for RTP map, defined in :rfc:`4566#section-6`.

    Spec::
        rtpmap:<payload type> <encoding name>/<clock rate>[/<encoding parameters>]
    """

    payload_type: int
    encoding_name: str
    clock_rate: int
    encoding_parameters: str | None = None

    @property
    def channels(self) -> int | None:
        """For audio encodings, the number of channels given as encoding parameters."""
        if self.encoding_parameters is None or not self.encoding_parameters.isdecimal():
            return None
        return int(self.encoding_parameters)

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        match = RTPMAP_PAT.fullmatch(value)
        if match is None:
            raise SDPParseError(f"Invalid rtpmap attribute value: {value}")
        return cls(
            payload_type=int(match.group("payload_type")),
            encoding_name=match.group("encoding"),
            clock_rate=int(match.group("clock_rate")),
            encoding_parameters=match.group("parameters"),
        )


@slots_dataclass(frozen=True)
class FormatParameters:
    """
    SDP media attribute for RTP format parameters, defined in :rfc:`4566#section-6`.

    Spec::
        fmtp:<format> <format specific parameters>

    The parameters are ``;``-separated ``<name>=<value>`` pairs or flags. All entries
    are kept in order, duplicated names included.
    """

    payload_type: int
    raw_parameters: str
    entries: tuple[tuple[str, str | None], ...]
    malformed: tuple[str, ...] = ()

    @property
    def duplicated_names(self) -> list[str]:
        """Names that appear more than once, in order of first appearance."""
        counts = Counter(name for name, _ in self.entries)
        return [name for name, count in counts.items() if count > 1]

    @property
    def has_strict_whitespace(self) -> bool:
        """Whether the parameters are separated by exactly ``"; "``, with no other whitespace."""
        if not self.raw_parameters:
            return True
        return FMTP_STRICT_PARAMS_PAT.fullmatch(self.raw_parameters) is not None

    def as_mapping(self) -> frozendict[str, str | None]:
        """The parameters as a mapping, where the first occurrence of a name wins."""
        params: dict[str, str | None] = {}
        for name, value in self.entries:
            params.setdefault(name, value)
        return frozendict(params)

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        match = FMTP_PAT.fullmatch(value)
        if match is None:
            raise SDPParseError(f"Invalid fmtp attribute value: {value}")
        raw_parameters: str = match.group("params") or ""
        entries: list[tuple[str, str | None]] = []
        malformed: list[str] = []
        for token in raw_parameters.split(";"):
            token = token.strip()
            if not token:
                continue
            name, sep, param_value = token.partition("=")
            name = name.strip()
            if not name:
                malformed.append(token)
                continue
            entries.append((name, param_value.strip() if sep else None))
        return cls(
            payload_type=int(match.group("payload_type")),
            raw_parameters=raw_parameters,
            entries=tuple(entries),
            malformed=tuple(malformed),
        )


@slots_dataclass(frozen=True)
class ReferenceClock:
    """
    Timestamp reference clock attribute, defined in :rfc:`7273#section-4.8`.

    Spec::
        ts-refclk:ptp=<ptp version>:<ptp gmid>[:<ptp domain>]
        ts-refclk:ptp=<ptp version>:traceable
        ts-refclk:localmac=<mac address>

    Clock sources other than PTP and local MAC are kept with just their name.
    """

    source: str
    ptp_version: str | None = None
    gmid: str | None = None
    domain: int | None = None
    traceable: bool = False
    mac: str | None = None

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        source = value.split("=", 1)[0]
        if source == "ptp":
            match = PTP_REFCLK_PAT.fullmatch(value)
            if match is None:
                raise SDPParseError(f"Invalid PTP reference clock: {value}")
            domain = match.group("domain")
            return cls(
                source=source,
                ptp_version=match.group("version"),
                gmid=match.group("gmid"),
                domain=int(domain) if domain is not None else None,
                traceable=match.group("traceable") is not None,
            )
        if source == "localmac":
            match = LOCALMAC_REFCLK_PAT.fullmatch(value)
            if match is None:
                raise SDPParseError(f"Invalid local MAC reference clock: {value}")
            return cls(source=source, mac=match.group("mac"))
        if not source:
            raise SDPParseError(f"Invalid reference clock: {value}")
        return cls(source=source)


@slots_dataclass(frozen=True)
class MediaClock:
    """
    Media clock attribute, defined in :rfc:`7273#section-5`.

    Spec::
        mediaclk:direct=<offset>[ rate=<num>/<den>]
        mediaclk:sender
    """

    mode: str
    offset: int | None = None
    rate: tuple[int, int] | None = None

    @property
    def is_direct(self) -> bool:
        """Whether the media clock uses the direct reference form."""
        return self.mode == "direct"

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        mode = value.split("=", 1)[0]
        if mode == "direct":
            match = MEDIACLK_DIRECT_PAT.fullmatch(value)
            if match is None:
                raise SDPParseError(f"Invalid direct media clock: {value}")
            rate: tuple[int, int] | None = None
            if match.group("rate_num") is not None:
                rate = (int(match.group("rate_num")), int(match.group("rate_den")))
            return cls(mode=mode, offset=int(match.group("offset")), rate=rate)
        if not mode or " " in mode:
            raise SDPParseError(f"Invalid media clock: {value}")
        return cls(mode=mode)


@slots_dataclass(frozen=True)
class Group:
    """
    Session-level grouping attribute, defined in :rfc:`5888#section-5`.

    Spec::
        group:<semantics> *(SP <identification-tag>)
    """

    semantics: str
    identifiers: tuple[str, ...]

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        match = GROUP_PAT.fullmatch(value)
        if match is None:
            raise SDPParseError(f"Invalid group attribute value: {value}")
        return cls(
            semantics=match.group("semantics"),
            identifiers=tuple(match.group("identifiers").split()),
        )


@slots_dataclass(frozen=True)
class MediaId:
    """Media stream identification attribute, defined in :rfc:`5888#section-4`."""

    identifier: str

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        if MID_PAT.fullmatch(value) is None:
            raise SDPParseError(f"Invalid mid attribute value: {value}")
        return cls(identifier=value)


@slots_dataclass(frozen=True)
class SourceFilter:
    """
    Source filter attribute, defined in :rfc:`4570#section-3`.

    Spec::
        source-filter: <filter-mode> <nettype> <address-types> <dest-address> <src-list>
    """

    mode: str
    addrtype: str
    destination: str
    sources: tuple[str, ...]

    @classmethod
    def parse(cls, value: str) -> Self:  # noqa: D102
        match = SOURCE_FILTER_PAT.fullmatch(value)
        if match is None:
            raise SDPParseError(f"Invalid source-filter attribute value: {value}")
        return cls(
            mode=match.group("mode"),
            addrtype=match.group("addrtype"),
            destination=match.group("destination"),
            sources=tuple(match.group("sources").split()),
        )


@slots_dataclass(frozen=True)
class ParameterMap:
    """
    The format parameters of one stream.

    :param payload_type: the payload type the parameters belong to.
    :param line: the line of the ``a=fmtp`` attribute, or of the ``m=`` field if there's none.
    :param stream: the 1-based index of the stream.
    :param params: parameter names mapped to their values (``None`` for flags).
    """

    payload_type: int | None
    line: int
    stream: int
    params: Mapping[str, str | None] = dataclass_field(default_factory=frozendict)
    found: bool = False

    def __contains__(self, name: object) -> bool:
        return name in self.params

    def get(self, name: str, default: str | None = None) -> str | None:
        """Get a parameter value, or ``default`` if absent (or a flag)."""
        value = self.params.get(name)
        return default if value is None else value


@slots_dataclass(frozen=True)
class ParameterExtraction:
    """
    The format parameters of a stream, with the problems found while parsing them.

    :param params: the parameter map.
    :param diagnostics: the structural problems of the stream's ``a=fmtp`` attributes.
    :param strict_whitespace: whether the extracted attribute uses the strict ``"; "`` form.
    """

    params: ParameterMap
    diagnostics: tuple[Diagnostic, ...] = ()
    strict_whitespace: bool = True


def parse_parameters(section: MediaSection) -> ParameterExtraction:
    """
    Parse the format parameters of a stream, regardless of the configuration.

    Only the first ``a=fmtp`` attribute of the stream is extracted.
    Use :attr:`MediaSection.parameter_extraction` to parse them once per document.
    """
    diagnostics: list[Diagnostic] = []
    fmtp_lines = section.attributes("fmtp")
    media = section.media
    default_payload_type: int | None = (
        media.payload_types[0] if media is not None and media.payload_types else None
    )
    empty = ParameterMap(
        payload_type=default_payload_type, line=section.line, stream=section.index
    )
    if not fmtp_lines:
        return ParameterExtraction(empty)

    parsed: list[tuple[int, FormatParameters]] = []
    for fmtp_line in fmtp_lines:
        try:
            parsed.append((fmtp_line.line, FormatParameters.parse(fmtp_line.attribute_value or "")))
        except SDPParseError:
            diagnostics.append(Diagnostic(
                fmtp_line.line,
                "Format parameters attribute must be of the form "
                "'a=fmtp:<format> <format specific parameters>', as per RFC 4566 Section 6.",
            ))

    seen_payload_types: set[int] = set()
    for line, fmtp in parsed:
        if fmtp.payload_type in seen_payload_types:
            diagnostics.append(Diagnostic(
                line,
                f"Only one format parameters attribute is permitted for payload type "
                f"{fmtp.payload_type}, as per RFC 4566 Section 6.",
            ))
        seen_payload_types.add(fmtp.payload_type)
    if not parsed:
        return ParameterExtraction(empty, tuple(diagnostics))

    line, fmtp = parsed[0]
    if media is not None and fmtp.payload_type not in media.payload_types:
        diagnostics.append(Diagnostic(
            line,
            f"Format parameters payload type '{fmtp.payload_type}' does not match the "
            f"payload types of the stream's media description "
            f"('{' '.join(media.formats)}'), as per RFC 4566 Section 6.",
        ))
    diagnostics.extend(
        Diagnostic(
            line,
            f"Format parameter '{token}' is neither a '<name>=<value>' pair nor a flag, "
            f"as per RFC 4566 Section 6.",
        )
        for token in fmtp.malformed
    )
    diagnostics.extend(
        Diagnostic(
            line,
            f"Format parameter '{name}' is specified more than once, "
            f"as per RFC 4566 Section 6.",
        )
        for name in fmtp.duplicated_names
    )

    params = ParameterMap(
        payload_type=fmtp.payload_type,
        line=line,
        stream=section.index,
        params=fmtp.as_mapping(),
        found=True,
    )
    return ParameterExtraction(params, tuple(diagnostics), fmtp.has_strict_whitespace)


def extract_parameters(
    section: MediaSection, config: CheckConfig
) -> tuple[ParameterMap, list[Diagnostic]]:
    """
    Extract the format parameters of a stream, reporting structural problems.

    The parsing is cached on the section, only the configured checks are run again.

    :param section: the media section of the stream.
    :param config: the checker configuration (for the strict whitespace check).
    :return: the parameter map, and the diagnostics found while extracting it.
    """
    extraction = section.parameter_extraction
    diagnostics = list(extraction.diagnostics)
    if config.whitespace and not extraction.strict_whitespace:
        diagnostics.append(Diagnostic(
            extraction.params.line,
            "Format parameters must follow the payload type after a single space, and be "
            "separated by a semicolon and a single space ('; '), "
            "as per SMPTE ST 2110-20 Section 7.2.",
        ))
    return extraction.params, diagnostics
