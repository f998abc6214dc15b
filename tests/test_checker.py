from __future__ import annotations

import pytest

import sdpoker
from sdpoker.checker import all_sections, check, run_rule, run_section
from sdpoker.config import CastMode, CheckConfig
from sdpoker.exceptions import SDPEmptyDocumentError, UnknownRuleError
from sdpoker.sdp import SDPDocument

from .conftest import AUDIO_SDP_LINES, build_sdp, replace_line


class TestCheck:
    def test_conformant(self, video_sdp, audio_sdp):
        """Test that the sample documents have no problems with the default options."""
        assert check(video_sdp) == []
        assert check(audio_sdp) == []

    def test_problems(self):
        """Test that problems from several sections are collected, in section order."""
        lines = replace_line(AUDIO_SDP_LINES, "v=", "v=1")
        lines = replace_line(lines, "c=", "c=IN IP4 239.24.1.10")
        diagnostics = check(build_sdp(lines))
        assert [d.rule for d in diagnostics] == [
            "rfc4566-5.1-version",
            "rfc4566-5.7-connection-format",
        ]
        assert str(diagnostics[0]).startswith("Line 1: ")

    def test_deterministic(self, audio_sdp):
        """Test that checking the same document twice gives the same diagnostics."""
        lines = replace_line(AUDIO_SDP_LINES, "c=", "c=IN IP4 192.0.2.9/32")
        text = build_sdp(lines, "\n")
        config = CheckConfig(should=True, check_endings=True, cast_mode=CastMode.MULTICAST)
        first = check(text, config)
        assert first, "The document should have problems"
        assert check(text, config) == first

    def test_empty_document(self):
        """Test that an empty document is fatal, before any rule runs."""
        with pytest.raises(SDPEmptyDocumentError):
            check("")
        with pytest.raises(SDPEmptyDocumentError):
            check("\r\n\r\n")

    def test_sections(self):
        """Test running only some sections."""
        lines = replace_line(AUDIO_SDP_LINES, "v=", "v=1")
        text = build_sdp(lines)
        assert check(text, sections=["rfc4566-5.7"]) == []
        assert len(check(text, sections=["rfc4566-5.1"])) == 1
        with pytest.raises(UnknownRuleError):
            check(text, sections=["rfc9999"])


class TestRunners:
    def test_all_sections(self, audio_document):
        """Test that running all sections equals running each one in turn."""
        config = CheckConfig(should=True)
        lines = replace_line(AUDIO_SDP_LINES, "a=ptime")
        document = SDPDocument.parse(build_sdp(lines))
        diagnostics = all_sections(document, config)
        assert [d.rule for d in diagnostics] == ["st2110-30-6.2-ptime"]
        assert all_sections(audio_document, config) == []

    def test_unknown_names(self, audio_document, default_config):
        """Test that unknown rule and section names are reported."""
        with pytest.raises(UnknownRuleError):
            run_rule("rfc4566-99-nothing", audio_document, default_config)
        with pytest.raises(UnknownRuleError):
            run_section("rfc4566-99", audio_document, default_config)
        with pytest.raises(KeyError):
            run_rule("rfc4566-99-nothing", audio_document, default_config)

    def test_public_api(self, audio_sdp):
        """Test the names exported by the package."""
        assert sdpoker.check(audio_sdp, sdpoker.CheckConfig()) == []
        assert issubclass(sdpoker.SDPEmptyDocumentError, sdpoker.SDPokerException)
        assert sdpoker.get_section("rfc4566-5").rules
