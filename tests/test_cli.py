from __future__ import annotations

import io

from sdpoker.cli import EXIT_ERROR, EXIT_OK, EXIT_PROBLEMS, main

from .conftest import AUDIO_SDP_LINES, build_sdp, replace_line


class TestCLI:
    def test_conformant_file(self, tmp_path, audio_sdp, capsys):
        """Test that a conformant file exits with success and no output."""
        path = tmp_path / "audio.sdp"
        path.write_bytes(audio_sdp.encode())
        assert main([str(path), "--should", "--check-endings"]) == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_problems(self, tmp_path, capsys):
        """Test that problems are printed one per line, with the rule id."""
        lines = replace_line(AUDIO_SDP_LINES, "c=", "c=IN IP4 192.0.2.9/32")
        path = tmp_path / "audio.sdp"
        path.write_bytes(build_sdp(lines).encode())
        assert main([str(path), "--multicast"]) == EXIT_PROBLEMS
        out_lines = capsys.readouterr().out.splitlines()
        assert len(out_lines) == 2
        assert out_lines[0].startswith("Line 7: ")
        assert out_lines[0].endswith("[rfc4566-5.7-connection-format]")
        assert out_lines[1].endswith("[rfc4566-5.7-connection-address]")

    def test_line_endings_kept(self, tmp_path, audio_sdp, capsys):
        """Test that the file is read without translating its line endings."""
        path = tmp_path / "audio.sdp"
        path.write_bytes(audio_sdp.replace("\r\n", "\n").encode())
        assert main([str(path), "--check-endings"]) == EXIT_PROBLEMS
        assert "[rfc4566-5-line-endings]" in capsys.readouterr().out

    def test_stdin(self, monkeypatch, audio_sdp):
        """Test reading the document from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO(audio_sdp))
        assert main(["-"]) == EXIT_OK

    def test_sections(self, tmp_path, capsys):
        """Test running only the given sections."""
        path = tmp_path / "audio.sdp"
        path.write_bytes(build_sdp(replace_line(AUDIO_SDP_LINES, "v=", "v=1")).encode())
        assert main([str(path), "--section", "rfc4566-5.7"]) == EXIT_OK
        assert main([str(path), "--section", "rfc4566-5.1"]) == EXIT_PROBLEMS

    def test_config_file(self, tmp_path, audio_sdp):
        """Test that options are loaded from a TOML file and combined with the flags."""
        sdp_path = tmp_path / "audio.sdp"
        sdp_path.write_bytes(audio_sdp.encode())
        config_path = tmp_path / "sdpoker.toml"
        config_path.write_text("[sdpoker]\nvideoOnly = true\n")
        assert main([str(sdp_path), "--config", str(config_path)]) == EXIT_PROBLEMS
        config_path.write_text("[sdpoker]\nunknown = true\n")
        assert main([str(sdp_path), "--config", str(config_path)]) == EXIT_ERROR

    def test_fatal_errors(self, tmp_path, capsys):
        """Test that unreadable and empty inputs exit with an error."""
        assert main([str(tmp_path / "missing.sdp")]) == EXIT_ERROR
        empty = tmp_path / "empty.sdp"
        empty.write_bytes(b"")
        assert main([str(empty)]) == EXIT_ERROR
        assert "error:" in capsys.readouterr().err
