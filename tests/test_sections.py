from __future__ import annotations

from sdpoker.sdp import LineEnding, MediaSection, SDPDocument, SessionSection, classify, segment

from .conftest import build_sdp


class TestSegment:
    def test_session_and_streams(self, video_document):
        """Test that the document is split at each media field."""
        assert isinstance(video_document.session, SessionSection)
        assert [line.type for line in video_document.session] == ["v", "o", "s", "t", "a"]
        assert len(video_document.media) == 2
        first, second = video_document.media
        assert (first.index, first.line) == (1, 6)
        assert (second.index, second.line) == (2, 14)
        assert first.media_line.type == "m"
        assert len(first.lines) == 8

    def test_no_media(self):
        """Test that a document without media fields is all session."""
        session, media = segment(classify("v=0\r\no=- 1 1 IN IP4 1.2.3.4\r\ns=x\r\nt=0 0\r\n"))
        assert len(session.lines) == 4
        assert media == ()

    def test_media_description(self, audio_document):
        """Test the parsed media field of a stream."""
        section = audio_document.media[0]
        assert isinstance(section, MediaSection)
        assert section.kind == "audio"
        assert section.media is not None
        assert section.media.payload_types == (97,)

    def test_malformed_media(self):
        """Test that a malformed media field gives a stream without a kind."""
        document = SDPDocument.parse(build_sdp(["v=0", "s=x", "t=0 0", "m=video"]))
        assert document.media[0].media is None
        assert document.media[0].kind is None


class TestSDPDocument:
    def test_parse(self, video_sdp, video_document):
        """Test the document level properties."""
        assert video_document.text == video_sdp
        assert video_document.line_ending is LineEnding.CRLF
        assert not video_document.has_bare_line_breaks
        assert video_document.types[:4] == ["v", "o", "s", "t"]

    def test_lookups(self, video_document):
        """Test finding fields and attributes, at document and section level."""
        assert len(video_document.fields_of("c")) == 2
        assert [line.line for line in video_document.attributes("mid")] == [13, 21]
        assert video_document.media[1].attributes("mid")[0].attribute_value == "secondary"
        assert video_document.session.attributes("group")[0].line == 5
        assert [conn.address for _, conn in video_document.media[0].connections()] == [
            "239.22.1.10"
        ]

    def test_section_of(self, video_document):
        """Test finding the section a line belongs to."""
        lines = video_document.lines
        assert video_document.section_of(lines[0]) is video_document.session
        assert video_document.section_of(lines[5]) is video_document.media[0]
        assert video_document.section_of(lines[12]) is video_document.media[0]
        assert video_document.section_of(lines[13]) is video_document.media[1]
