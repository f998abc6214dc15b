from __future__ import annotations

import pytest

from sdpoker.exceptions import SDPEmptyDocumentError
from sdpoker.sdp import LineEnding, SDPLine, classify, detect_line_ending, has_bare_line_breaks


class TestClassify:
    def test_line_numbers(self, video_sdp):
        """Test that lines are numbered from 1, in document order."""
        lines = classify(video_sdp)
        assert [line.line for line in lines] == list(range(1, len(lines) + 1))
        assert lines[0].type == "v" and lines[0].value == "0"
        assert lines[5].type == "m", "The first media field should be on line 6"

    def test_trailing_terminator(self):
        """Test that a final line terminator does not produce an extra empty line."""
        assert len(classify("v=0\r\no=x\r\n")) == 2
        assert len(classify("v=0\r\no=x")) == 2

    def test_line_breaks(self):
        """Test that CRLF, CR and LF all terminate lines."""
        lines = classify("v=0\r\no=a\ns=b\rt=0 0\n")
        assert [line.type for line in lines] == ["v", "o", "s", "t"]

    def test_blank_lines_kept(self):
        """Test that blank lines are kept and numbered, so that they can be reported."""
        lines = classify("v=0\r\n\r\ns=x\r\n")
        assert len(lines) == 3
        assert lines[1].is_blank and lines[1].type == ""
        assert lines[2].line == 3

    def test_empty_document(self):
        """Test that a document without any lines is fatal."""
        for text in ("", "\r\n", "\n\n"):
            with pytest.raises(SDPEmptyDocumentError):
                classify(text)


class TestSDPLine:
    @pytest.mark.parametrize(
        "raw, well_formed",
        [
            ("v=0", True),
            ("s= ", True),
            ("s=", False),
            ("a= recvonly", False),
            ("a =recvonly", False),
            (" v=0", False),
            ("V=0", False),
            ("v0", False),
        ],
    )
    def test_well_formed(self, raw, well_formed):
        """Test the ``<type>=<value>`` shape check."""
        assert SDPLine.parse(raw, 1).is_well_formed is well_formed

    def test_known_types(self):
        """Test that only the RFC 4566 type letters are known."""
        assert SDPLine.parse("m=video 5000 RTP/AVP 96", 1).is_known_type
        assert not SDPLine.parse("x=unknown", 1).is_known_type
        assert not SDPLine.parse("", 1).is_known_type

    def test_malformed_value(self):
        """Test that a line without ``=`` after its type has no value."""
        line = SDPLine.parse("v0", 3)
        assert line.type == "v"
        assert line.value is None
        assert str(line) == "v0"

    def test_attributes(self):
        """Test that attribute names and values are split on the first colon."""
        line = SDPLine.parse("a=fmtp:96 sampling=YCbCr-4:2:2", 1)
        assert line.attribute_name == "fmtp"
        assert line.attribute_value == "96 sampling=YCbCr-4:2:2"
        flag = SDPLine.parse("a=recvonly", 1)
        assert flag.attribute_name == "recvonly"
        assert flag.attribute_value is None
        assert SDPLine.parse("c=IN IP4 1.2.3.4", 1).attribute_name is None


class TestLineEndings:
    def test_detect(self):
        """Test the detection of the line ending style."""
        assert detect_line_ending("v=0\r\ns=x\r\n") is LineEnding.CRLF
        assert detect_line_ending("v=0\ns=x\n") is LineEnding.LF
        assert detect_line_ending("v=0\rs=x\r") is LineEnding.CR
        assert detect_line_ending("v=0\r\ns=x\n") is LineEnding.MIXED
        assert detect_line_ending("v=0") is LineEnding.CRLF

    def test_bare_line_breaks(self):
        """Test that any LF or CR outside of a CRLF pair is found."""
        assert not has_bare_line_breaks("v=0\r\ns=x\r\n")
        assert has_bare_line_breaks("v=0\r\ns=x\n")
        assert has_bare_line_breaks("v=0\rs=x\r\n")
        assert has_bare_line_breaks("v=0\n")
