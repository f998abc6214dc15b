"""Command-line interface: check a local SDP file, or stdin, and print the diagnostics."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Any

from .checker import check
from .config import AddressFamily, CastMode, CheckConfig, MediaKind
from .exceptions import ConfigurationError, SDPEmptyDocumentError, UnknownRuleError
from .rules import SECTIONS


_logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_PROBLEMS = 1
EXIT_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sdpoker",
        description="Check an SDP file for conformance with RFC 4566 and SMPTE ST 2110.",
    )
    p.add_argument("path", nargs="?", default="-", help="SDP file path, or '-' for stdin")
    p.add_argument("--config", metavar="FILE", help="TOML file with checker options")
    p.add_argument(
        "--section",
        action="append",
        choices=[section.name for section in SECTIONS],
        help="only run the given section of rules (can be repeated)",
    )
    p.add_argument("--should", action="store_true", help="also check 'should' clauses")
    p.add_argument(
        "--check-endings", action="store_true", help="require CRLF line endings throughout"
    )
    p.add_argument(
        "--whitespace", action="store_true", help="strictly check whitespace in format parameters"
    )
    family = p.add_mutually_exclusive_group()
    family.add_argument("--ip4", action="store_true", help="require IPv4 addresses")
    family.add_argument("--ip6", action="store_true", help="require IPv6 addresses")
    cast = p.add_mutually_exclusive_group()
    cast.add_argument("--multicast", action="store_true", help="require multicast connections")
    cast.add_argument("--unicast", action="store_true", help="require unicast connections")
    p.add_argument(
        "--duplicate", action="store_true", help="require duplicated (ST 2022-7) streams"
    )
    kind = p.add_mutually_exclusive_group()
    kind.add_argument("--video-only", action="store_true", help="only permit video streams")
    kind.add_argument("--audio-only", action="store_true", help="only permit audio streams")
    p.add_argument(
        "--channel-order", action="store_true", help="require audio channel-order parameters"
    )
    p.add_argument(
        "--shaping", action="store_true", help="require ST 2110-21 traffic shaping parameters"
    )
    p.add_argument(
        "--no-copy", action="store_true", help="reject copies of the standards' examples"
    )
    p.add_argument(
        "--no-media", action="store_true", help="reject files without media descriptions"
    )
    p.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return p


def _config_from_args(args: argparse.Namespace) -> CheckConfig:
    config = CheckConfig.from_toml(args.config) if args.config else CheckConfig()
    overrides: dict[str, Any] = {
        name: True
        for name in (
            "should",
            "check_endings",
            "whitespace",
            "duplicate",
            "channel_order",
            "shaping",
            "no_copy",
            "no_media",
        )
        if getattr(args, name)
    }
    if args.ip4 or args.ip6:
        overrides["address_family"] = AddressFamily.IP4 if args.ip4 else AddressFamily.IP6
    if args.multicast or args.unicast:
        overrides["cast_mode"] = CastMode.MULTICAST if args.multicast else CastMode.UNICAST
    if args.video_only or args.audio_only:
        overrides["media_kind"] = MediaKind.VIDEO if args.video_only else MediaKind.AUDIO
    return dataclasses.replace(config, **overrides)


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


def main(argv: list[str] | None = None) -> int:
    """Run the checker from the command line, returning the exit code."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _config_from_args(args)
        text = _read_text(args.path)
        diagnostics = check(text, config, sections=args.section)
    except (OSError, UnicodeDecodeError) as e:
        sys.stderr.write(f"error: cannot read {args.path}: {e}\n")
        return EXIT_ERROR
    except (ConfigurationError, SDPEmptyDocumentError, UnknownRuleError) as e:
        sys.stderr.write(f"error: {e}\n")
        return EXIT_ERROR

    for diagnostic in diagnostics:
        sys.stdout.write(f"{diagnostic} [{diagnostic.rule}]\n")
    _logger.debug("Found %d problems in %s", len(diagnostics), args.path)
    return EXIT_PROBLEMS if diagnostics else EXIT_OK
