"""Various constants used by the sdpoker library."""

from __future__ import annotations

import re as _re


SUPPORTED_SDP_VERSIONS: frozenset[str] = frozenset({"0"})

# field type letters recognized by RFC 4566 Section 5
SDP_FIELD_TYPES: str = "vosiuepcbzkatrm"
MANDATORY_FIELD_TYPES: tuple[str, ...] = ("v", "o", "s", "t")

LINE_BREAK_PAT: _re.Pattern[str] = _re.compile(r"\r\n|\r|\n")
BARE_LINE_BREAK_PAT: _re.Pattern[str] = _re.compile(r"(?<!\r)\n|\r(?!\n)")
LINE_FORMAT_PAT: _re.Pattern[str] = _re.compile(r"[a-z]=\S.*|s= ")

ORIGIN_PAT: _re.Pattern[str] = _re.compile(
    r"(?P<username>\S+)\s+(?P<sess_id>\d+)\s+(?P<sess_version>\d+)\s+IN\s+"
    r"(?P<addrtype>IP[46])\s+(?P<address>\S+)"
)
CONNECTION_PAT: _re.Pattern[str] = _re.compile(
    r"IN\s+(?P<addrtype>IP[46])\s+(?P<address>[^\s/]+)"
    r"(?:/(?P<ttl>\d+))?(?:/(?P<count>[1-9]\d*))?"
)
MEDIA_PAT: _re.Pattern[str] = _re.compile(
    r"(?P<media>[a-z]+) (?P<port>\d+)(?:/(?P<port_count>[1-9]\d*))? "
    r"(?P<protocol>\S+)(?P<formats>(?: \S+)+)"
)
IPv4_PAT: _re.Pattern[str] = _re.compile(
    r"([1-9]\d?\d?)\.(\d\d?\d?)\.(\d\d?\d?)\.(\d\d?\d?)"
)
IPv6_PAT: _re.Pattern[str] = _re.compile(
    r"[0-9a-f]{0,4}(?::[0-9a-f]{0,4}){2,7}", flags=_re.IGNORECASE
)
MAX_TTL: int = 255
# a lone IPv4 suffix of this value is a CIDR host prefix length, not a TTL
IPv4_HOST_PREFIX_LENGTH: int = 32

RTPMAP_PAT: _re.Pattern[str] = _re.compile(
    r"(?P<payload_type>\d+) (?P<encoding>[^\s/]+)/(?P<clock_rate>\d+)"
    r"(?:/(?P<parameters>\S+))?"
)
FMTP_PAT: _re.Pattern[str] = _re.compile(r"(?P<payload_type>\d+)(?P<params>\s.*)?")
FMTP_STRICT_PARAMS_PAT: _re.Pattern[str] = _re.compile(
    r" (?:[^;\s]+; )*[^;\s]+(?:; ?)?"
)
DYNAMIC_PAYLOAD_TYPES: range = range(96, 128)

SOURCE_FILTER_PAT: _re.Pattern[str] = _re.compile(
    r" (?P<mode>incl|excl) (?P<nettype>IN) (?P<addrtype>IP4|IP6|\*) "
    r"(?P<destination>\S+)(?P<sources>(?: \S+)+)"
)

PTP_VERSIONS: frozenset[str] = frozenset({
    "IEEE1588-2002",
    "IEEE1588-2008",
    "IEEE1588-2019",
    "IEEE802.1AS-2011",
})
ST2110_PTP_VERSIONS: frozenset[str] = frozenset({"IEEE1588-2008", "IEEE1588-2019"})
PTP_REFCLK_PAT: _re.Pattern[str] = _re.compile(
    r"ptp=(?P<version>[^:\s]+):(?:(?P<traceable>traceable)|"
    r"(?P<gmid>[0-9A-F]{2}(?:-[0-9A-F]{2}){7})(?::(?P<domain>\d{1,3}))?)"
)
LOCALMAC_REFCLK_PAT: _re.Pattern[str] = _re.compile(
    r"localmac=(?P<mac>[0-9A-F]{2}(?:-[0-9A-F]{2}){5})"
)
MAX_PTP_DOMAIN: int = 127
MEDIACLK_DIRECT_PAT: _re.Pattern[str] = _re.compile(
    r"direct=(?P<offset>\d+)(?: rate=(?P<rate_num>\d+)/(?P<rate_den>\d+))?"
)

GROUP_PAT: _re.Pattern[str] = _re.compile(
    r"(?P<semantics>[^\s:]+)(?P<identifiers>(?: \S+)*)"
)
MID_PAT: _re.Pattern[str] = _re.compile(r"\S+")
DUPLICATION_SEMANTICS: str = "DUP"

RTP_PROFILE: str = "RTP/AVP"
MAX_UDP_SIZES: frozenset[str] = frozenset({"1460", "8960"})

# SMPTE ST 2110-20 video format parameters
VIDEO_ENCODING: str = "raw"
VIDEO_CLOCK_RATE: int = 90000
VIDEO_REQUIRED_PARAMETERS: tuple[str, ...] = (
    "sampling",
    "depth",
    "width",
    "height",
    "exactframerate",
    "colorimetry",
    "PM",
    "SSN",
)
VIDEO_SAMPLINGS: frozenset[str] = frozenset({
    "YCbCr-4:4:4",
    "YCbCr-4:2:2",
    "YCbCr-4:2:0",
    "CLYCbCr-4:4:4",
    "CLYCbCr-4:2:2",
    "CLYCbCr-4:2:0",
    "ICtCp-4:4:4",
    "ICtCp-4:2:2",
    "ICtCp-4:2:0",
    "RGB",
    "XYZ",
    "KEY",
})
VIDEO_DEPTHS: frozenset[str] = frozenset({"8", "10", "12", "16", "16f"})
VIDEO_COLORIMETRIES: frozenset[str] = frozenset({
    "BT601",
    "BT709",
    "BT2020",
    "BT2100",
    "ST2065-1",
    "ST2065-3",
    "UNSPECIFIED",
    "XYZ",
})
VIDEO_PACKING_MODES: frozenset[str] = frozenset({"2110GPM", "2110BPM"})
VIDEO_SSNS: frozenset[str] = frozenset({"ST2110-20:2017"})
VIDEO_TRANSFER_CHARACTERISTICS: frozenset[str] = frozenset({
    "SDR",
    "PQ",
    "HLG",
    "LINEAR",
    "BT2100LINPQ",
    "BT2100LINHLG",
    "ST2065-1",
    "ST428-1",
    "DENSITY",
    "UNSPECIFIED",
})
VIDEO_RANGES: frozenset[str] = frozenset({"NARROW", "FULLPROTECT", "FULL"})
VIDEO_FLAG_PARAMETERS: tuple[str, ...] = ("interlace", "segmented", "top-field")
VIDEO_DIMENSION_RANGE: range = range(1, 32768)

# SMPTE ST 2110-21 traffic shaping parameters
SHAPING_TYPES: frozenset[str] = frozenset({"2110TPN", "2110TPNL", "2110TPW"})
SHAPING_INTEGER_PARAMETERS: tuple[str, ...] = ("TROFF", "CMAX")

# SMPTE ST 2110-30 audio
AUDIO_ENCODINGS: frozenset[str] = frozenset({"L16", "L24", "AM824"})
AUDIO_CLOCK_RATES: frozenset[int] = frozenset({44100, 48000, 96000})
AUDIO_PACKET_TIMES: frozenset[str] = frozenset({
    "1",
    "0.125",
    "0.25",
    "0.333",
    "4",
    "0.08",
})
CHANNEL_ORDER_PAT: _re.Pattern[str] = _re.compile(
    r"SMPTE2110\.\((?P<groups>[^()\s]*)\)"
)
CHANNEL_GROUP_SIZES: dict[str, int] = {
    "M": 1,
    "DM": 2,
    "ST": 2,
    "LtRt": 2,
    "51": 6,
    "71": 8,
    "222": 24,
    "SGRP": 4,
}
UNDEFINED_CHANNEL_GROUP_PAT: _re.Pattern[str] = _re.compile(r"U(?P<count>\d\d)")
MAX_UNDEFINED_CHANNELS: int = 64

# near-verbatim copies of these are flagged by the example-copy heuristic
ST2110_20_EXAMPLE: str = (
    "v=0\r\n"
    "o=- 123456 11 IN IP4 192.168.100.2\r\n"
    "s=Example of a SMPTE ST2110-20 signal\r\n"
    "i=this example is for 720p video at 59.94\r\n"
    "t=0 0\r\n"
    "a=recvonly\r\n"
    "a=group:DUP primary secondary\r\n"
    "m=video 50000 RTP/AVP 112\r\n"
    "c=IN IP4 239.100.9.10/32\r\n"
    "a=source-filter: incl IN IP4 239.100.9.10 192.168.100.2\r\n"
    "a=rtpmap:112 raw/90000\r\n"
    "a=fmtp:112 sampling=YCbCr-4:2:2; width=1280; height=720; "
    "exactframerate=60000/1001; depth=10; TCS=SDR; colorimetry=BT709; "
    "PM=2110GPM; SSN=ST2110-20:2017; TP=2110TPN; \r\n"
    "a=ts-refclk:ptp=IEEE1588-2008:39-A7-94-FF-FE-07-CB-D0:37\r\n"
    "a=mediaclk:direct=0\r\n"
    "a=mid:primary\r\n"
    "m=video 50020 RTP/AVP 112\r\n"
    "c=IN IP4 239.101.9.10/32\r\n"
    "a=source-filter: incl IN IP4 239.101.9.10 192.168.101.2\r\n"
    "a=rtpmap:112 raw/90000\r\n"
    "a=fmtp:112 sampling=YCbCr-4:2:2; width=1280; height=720; "
    "exactframerate=60000/1001; depth=10; TCS=SDR; colorimetry=BT709; "
    "PM=2110GPM; SSN=ST2110-20:2017; TP=2110TPN; \r\n"
    "a=ts-refclk:ptp=IEEE1588-2008:39-A7-94-FF-FE-07-CB-D0:37\r\n"
    "a=mediaclk:direct=0\r\n"
    "a=mid:secondary\r\n"
)
ST2110_30_EXAMPLE: str = (
    "v=0\r\n"
    "o=- 123456 11 IN IP4 192.168.100.2\r\n"
    "s=Example of a SMPTE ST2110-30 signal\r\n"
    "i=Channels 1-8\r\n"
    "t=0 0\r\n"
    "m=audio 50000 RTP/AVP 97\r\n"
    "c=IN IP4 239.100.9.10/32\r\n"
    "a=rtpmap:97 L24/48000/8\r\n"
    "a=ptime:1\r\n"
    "a=ts-refclk:ptp=IEEE1588-2008:39-A7-94-FF-FE-07-CB-D0:37\r\n"
    "a=mediaclk:direct=0\r\n"
)
CANONICAL_EXAMPLES: dict[str, str] = {
    "SMPTE ST 2110-20": ST2110_20_EXAMPLE,
    "SMPTE ST 2110-30": ST2110_30_EXAMPLE,
}
# fraction of an example's lines that must match, from the top, to count as a copy
EXAMPLE_COPY_THRESHOLD: float = 0.8
