from __future__ import annotations

import pytest

from sdpoker.config import AddressFamily, CheckConfig
from sdpoker.exceptions import SDPParseError
from sdpoker.sdp import (
    ConnectionData,
    FormatParameters,
    Group,
    MediaClock,
    MediaDescription,
    Origin,
    ReferenceClock,
    RTPMap,
    SDPDocument,
    SourceFilter,
    extract_parameters,
)

from .conftest import build_sdp


def _stream_document(*media_lines: str) -> SDPDocument:
    return SDPDocument.parse(
        build_sdp([
            "v=0",
            "o=- 1 1 IN IP4 192.168.1.2",
            "s=Test",
            "t=0 0",
            "m=video 5000 RTP/AVP 96",
            "c=IN IP4 239.1.1.1/64",
            *media_lines,
        ])
    )


class TestFieldParsers:
    def test_origin(self):
        """Test parsing the origin field."""
        origin = Origin.parse("- 1443716955 1443716955 IN IP4 192.168.1.230")
        assert origin.username == "-"
        assert origin.addrtype == "IP4"
        assert origin.address == "192.168.1.230"
        with pytest.raises(SDPParseError):
            Origin.parse("- 1443716955 IN IP4 192.168.1.230")

    def test_connection(self):
        """Test parsing connection data, keeping the TTL digits as they are."""
        connection = ConnectionData.parse("IN IP4 239.22.1.10/064/2")
        assert connection.address == "239.22.1.10"
        assert connection.ttl == "064"
        assert connection.number_of_addresses == 2
        assert connection.family is AddressFamily.IP4
        assert connection.is_multicast
        unicast = ConnectionData.parse("IN IP4 192.168.1.2")
        assert unicast.ttl is None and not unicast.is_multicast
        host = ConnectionData.parse("IN IP4 239.1.1.1/32")
        assert host.ttl is None
        assert host.prefix_length == 32
        assert ConnectionData.parse("IN IP4 239.1.1.1/32/2").ttl == "32"
        with pytest.raises(SDPParseError):
            ConnectionData.parse("IN IP5 192.168.1.2")

    def test_connection_ipv6(self):
        """Test that the single suffix of an IPv6 address is the number of addresses."""
        connection = ConnectionData.parse("IN IP6 ff15::101/3")
        assert connection.ttl is None
        assert connection.number_of_addresses == 3
        assert connection.family is AddressFamily.IP6
        with pytest.raises(SDPParseError):
            ConnectionData.parse("IN IP6 ff15::101/127/3")

    def test_media(self):
        """Test parsing media descriptions."""
        media = MediaDescription.parse("video 5000/2 RTP/AVP 96 97")
        assert (media.media, media.port, media.number_of_ports) == ("video", 5000, 2)
        assert media.protocol == "RTP/AVP"
        assert media.payload_types == (96, 97)
        for value in ("video RTP/AVP 96", "video 70000 RTP/AVP 96", "video 5000 RTP/AVP"):
            with pytest.raises(SDPParseError):
                MediaDescription.parse(value)


class TestAttributeParsers:
    def test_rtpmap(self):
        """Test parsing RTP maps, with and without encoding parameters."""
        audio = RTPMap.parse("97 L24/48000/8")
        assert (audio.payload_type, audio.encoding_name, audio.clock_rate) == (97, "L24", 48000)
        assert audio.channels == 8
        video = RTPMap.parse("96 raw/90000")
        assert video.channels is None
        with pytest.raises(SDPParseError):
            RTPMap.parse("96 raw")

    def test_fmtp(self):
        """Test parsing format parameters, keeping flags and the raw text."""
        fmtp = FormatParameters.parse("96 width=1920; height=1080; interlace")
        assert fmtp.payload_type == 96
        assert fmtp.entries == (("width", "1920"), ("height", "1080"), ("interlace", None))
        assert fmtp.has_strict_whitespace
        assert fmtp.as_mapping() == {"width": "1920", "height": "1080", "interlace": None}

    def test_fmtp_whitespace(self):
        """Test the strict whitespace form of format parameters."""
        assert FormatParameters.parse("96 a=1; b=2;").has_strict_whitespace
        assert FormatParameters.parse("96 a=1; b=2; ").has_strict_whitespace
        assert not FormatParameters.parse("96 a=1;b=2").has_strict_whitespace
        assert not FormatParameters.parse("96  a=1; b=2").has_strict_whitespace
        assert not FormatParameters.parse("96 a=1;  b=2").has_strict_whitespace

    def test_fmtp_duplicates(self):
        """Test that repeated names are found once, and the first value wins."""
        fmtp = FormatParameters.parse("96 width=640; width=1920; width=640")
        assert fmtp.duplicated_names == ["width"]
        assert fmtp.as_mapping()["width"] == "640"

    def test_reference_clocks(self):
        """Test parsing PTP and local MAC reference clocks."""
        ptp = ReferenceClock.parse("ptp=IEEE1588-2008:08-00-11-FF-FE-22-39-E4:127")
        assert ptp.source == "ptp"
        assert ptp.ptp_version == "IEEE1588-2008"
        assert ptp.gmid == "08-00-11-FF-FE-22-39-E4"
        assert ptp.domain == 127
        traceable = ReferenceClock.parse("ptp=IEEE1588-2008:traceable")
        assert traceable.traceable and traceable.gmid is None
        mac = ReferenceClock.parse("localmac=CA-FE-01-CA-FE-02")
        assert mac.mac == "CA-FE-01-CA-FE-02"
        assert ReferenceClock.parse("ntp=203.0.113.10").source == "ntp"
        with pytest.raises(SDPParseError):
            ReferenceClock.parse("ptp=IEEE1588-2008")

    def test_media_clocks(self):
        """Test parsing direct and other media clocks."""
        direct = MediaClock.parse("direct=963214424 rate=1000/1001")
        assert direct.is_direct
        assert direct.offset == 963214424
        assert direct.rate == (1000, 1001)
        assert not MediaClock.parse("sender").is_direct
        with pytest.raises(SDPParseError):
            MediaClock.parse("direct=abc")

    def test_group_and_filter(self):
        """Test parsing groups and source filters."""
        group = Group.parse("DUP primary secondary")
        assert group.semantics == "DUP"
        assert group.identifiers == ("primary", "secondary")
        source_filter = SourceFilter.parse(" incl IN IP4 239.22.1.10 192.168.1.230 192.168.1.231")
        assert source_filter.mode == "incl"
        assert source_filter.destination == "239.22.1.10"
        assert source_filter.sources == ("192.168.1.230", "192.168.1.231")
        with pytest.raises(SDPParseError):
            SourceFilter.parse("incl IN IP4 239.22.1.10")


class TestExtractParameters:
    def test_extract(self, video_document, default_config):
        """Test that the format parameters of a stream are extracted without problems."""
        params, diagnostics = extract_parameters(video_document.media[0], default_config)
        assert diagnostics == []
        assert params.found
        assert params.payload_type == 96
        assert params.stream == 1
        assert params.line == 10
        assert params.get("width") == "1920"
        assert "interlace" in params and params.get("interlace") is None

    def test_no_fmtp(self, default_config):
        """Test that a stream without format parameters gets an empty map at its media line."""
        document = _stream_document("a=rtpmap:96 raw/90000")
        params, diagnostics = extract_parameters(document.media[0], default_config)
        assert diagnostics == []
        assert not params.found
        assert params.line == 5
        assert "width" not in params

    def test_duplicate_reported_once(self, default_config):
        """Test that a repeated parameter name is reported once, and the first value kept."""
        document = _stream_document("a=fmtp:96 width=640; width=640;")
        params, diagnostics = extract_parameters(document.media[0], default_config)
        assert len(diagnostics) == 1
        assert "'width' is specified more than once" in diagnostics[0].message
        assert diagnostics[0].line == 7
        assert params.get("width") == "640"

    def test_payload_type_mismatch(self, default_config):
        """Test that format parameters for another payload type are reported."""
        document = _stream_document("a=fmtp:97 width=640")
        _, diagnostics = extract_parameters(document.media[0], default_config)
        assert len(diagnostics) == 1
        assert "does not match the payload types" in diagnostics[0].message

    def test_repeated_fmtp(self, default_config):
        """Test that a second format parameters attribute for the same payload type is reported."""
        document = _stream_document("a=fmtp:96 width=640", "a=fmtp:96 height=480")
        params, diagnostics = extract_parameters(document.media[0], default_config)
        assert [d.line for d in diagnostics] == [8]
        assert "height" not in params, "Only the first format parameters should be used"

    def test_parsed_once(self, default_config):
        """Test that the format parameters are parsed once per stream and shared by every caller."""
        document = _stream_document("a=fmtp:96 width=640; width=640;")
        section = document.media[0]
        assert section.parameter_extraction is section.parameter_extraction
        first_params, first = extract_parameters(section, default_config)
        first.clear()
        second_params, second = extract_parameters(section, default_config)
        assert second_params is first_params
        assert len(second) == 1, "Callers must not share the diagnostics list"

    def test_strict_whitespace(self):
        """Test that the whitespace form is only checked when configured."""
        document = _stream_document("a=fmtp:96 width=640;height=480")
        _, lenient = extract_parameters(document.media[0], CheckConfig())
        _, strict = extract_parameters(document.media[0], CheckConfig(whitespace=True))
        assert lenient == []
        assert len(strict) == 1
        assert "SMPTE ST 2110-20 Section 7.2" in strict[0].message
