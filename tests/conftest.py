from __future__ import annotations

import logging
from typing import Sequence

import pytest

from sdpoker.config import CheckConfig
from sdpoker.sdp import SDPDocument


_logger = logging.getLogger(__name__)


VIDEO_SDP_LINES: tuple[str, ...] = (
    "v=0",
    "o=- 1443716955 1443716955 IN IP4 192.168.1.230",
    "s=Camera 3 main output",
    "t=0 0",
    "a=group:DUP primary secondary",
    "m=video 5000 RTP/AVP 96",
    "c=IN IP4 239.22.1.10/64",
    "a=source-filter: incl IN IP4 239.22.1.10 192.168.1.230",
    "a=rtpmap:96 raw/90000",
    "a=fmtp:96 sampling=YCbCr-4:2:2; width=1920; height=1080; exactframerate=30000/1001; "
    "depth=10; TCS=SDR; colorimetry=BT709; PM=2110GPM; SSN=ST2110-20:2017; TP=2110TPN; "
    "interlace",
    "a=ts-refclk:ptp=IEEE1588-2008:08-00-11-FF-FE-22-39-E4:0",
    "a=mediaclk:direct=0",
    "a=mid:primary",
    "m=video 5000 RTP/AVP 96",
    "c=IN IP4 239.23.1.10/64",
    "a=source-filter: incl IN IP4 239.23.1.10 192.168.2.230",
    "a=rtpmap:96 raw/90000",
    "a=fmtp:96 sampling=YCbCr-4:2:2; width=1920; height=1080; exactframerate=30000/1001; "
    "depth=10; TCS=SDR; colorimetry=BT709; PM=2110GPM; SSN=ST2110-20:2017; TP=2110TPN; "
    "interlace",
    "a=ts-refclk:ptp=IEEE1588-2008:08-00-11-FF-FE-22-39-E4:0",
    "a=mediaclk:direct=0",
    "a=mid:secondary",
)

AUDIO_SDP_LINES: tuple[str, ...] = (
    "v=0",
    "o=- 1443716955 1443716955 IN IP4 192.168.1.231",
    "s=Mixing desk output",
    "t=0 0",
    "a=ts-refclk:ptp=IEEE1588-2008:08-00-11-FF-FE-22-39-E4:0",
    "m=audio 5004 RTP/AVP 97",
    "c=IN IP4 239.24.1.10/64",
    "a=rtpmap:97 L24/48000/2",
    "a=fmtp:97 channel-order=SMPTE2110.(ST)",
    "a=ptime:1",
    "a=mediaclk:direct=0",
)

# every option that does not restrict addresses or media types
STRICT_OPTIONS: dict[str, bool] = dict(
    should=True,
    check_endings=True,
    whitespace=True,
    duplicate=True,
    channel_order=True,
    shaping=True,
    no_copy=True,
    no_media=True,
)


def build_sdp(lines: Sequence[str], line_ending: str = "\r\n") -> str:
    """Join lines into an SDP document text, terminating every line."""
    return "".join(line + line_ending for line in lines)


def replace_line(lines: Sequence[str], prefix: str, *replacements: str) -> list[str]:
    """Replace the first line starting with ``prefix`` by the given lines (none to delete it)."""
    new_lines = list(lines)
    for index, line in enumerate(new_lines):
        if line.startswith(prefix):
            new_lines[index : index + 1] = replacements
            return new_lines
    raise ValueError(f"No line starting with {prefix!r}")


@pytest.fixture
def video_sdp() -> str:
    """A conformant description of a pair of duplicated ST 2110-20 video streams."""
    return build_sdp(VIDEO_SDP_LINES)


@pytest.fixture
def audio_sdp() -> str:
    """A conformant description of a stereo ST 2110-30 audio stream."""
    return build_sdp(AUDIO_SDP_LINES)


@pytest.fixture
def video_document(video_sdp) -> SDPDocument:
    return SDPDocument.parse(video_sdp)


@pytest.fixture
def audio_document(audio_sdp) -> SDPDocument:
    return SDPDocument.parse(audio_sdp)


@pytest.fixture
def default_config() -> CheckConfig:
    return CheckConfig()


@pytest.fixture
def strict_config() -> CheckConfig:
    return CheckConfig(**STRICT_OPTIONS)
