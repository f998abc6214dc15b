from __future__ import annotations

import pytest

from sdpoker.config import AddressFamily
from sdpoker.sdp import address_family, is_multicast, validate_rational, validate_ttl


class TestRational:
    @pytest.mark.parametrize("value", ["25", "50", "30000/1001", "60000/1001"])
    def test_valid_frame_rates(self, value):
        """Test that integers and reduced ratios are accepted."""
        assert validate_rational(value) == []

    @pytest.mark.parametrize(
        "value, problem",
        [
            ("4/2", "not reduced to its lowest terms"),
            ("1/2", "too slow"),
            ("25/1", "without a denominator"),
            ("25/0", "zero numerator or denominator"),
            ("0", "greater than zero"),
            ("25.0", "not an integer or a ratio"),
            ("30000/", "not an integer or a ratio"),
            ("", "not an integer or a ratio"),
        ],
    )
    def test_invalid_frame_rates(self, value, problem):
        """Test that each malformed rate yields a single, specific problem."""
        problems = validate_rational(value)
        assert len(problems) == 1, "At most one problem should be reported per value"
        assert problem in problems[0]

    def test_aspect_ratios(self):
        """Test ratios with another separator, that may be below one."""
        assert validate_rational("12:11", separator=":", allow_below_one=True) == []
        assert validate_rational("1:2", separator=":", allow_below_one=True) == []
        assert "not reduced" in validate_rational("2:4", separator=":", allow_below_one=True)[0]
        assert validate_rational("12/11", separator=":") != []

    def test_aspect_ratio_terms(self):
        """Test that aspect ratios need both terms, and may be one to one."""
        assert validate_rational("1:1", separator=":", allow_below_one=True, ratio=True) == []
        problems = validate_rational("12", separator=":", allow_below_one=True, ratio=True)
        assert len(problems) == 1
        assert "not a ratio" in problems[0]


class TestAddresses:
    @pytest.mark.parametrize(
        "address, family",
        [
            ("192.168.1.1", AddressFamily.IP4),
            ("239.22.1.10", AddressFamily.IP4),
            ("ff15::1", AddressFamily.IP6),
            ("::1", AddressFamily.IP6),
            ("2001:DB8::1", AddressFamily.IP6),
            ("256.1.1.1", None),
            ("01.2.3.4", None),
            ("camera.example.com", None),
        ],
    )
    def test_address_family(self, address, family):
        """Test the classification of address literals."""
        assert address_family(address) is family

    def test_multicast(self):
        """Test multicast detection for IPv4 and IPv6 addresses."""
        assert is_multicast("239.22.1.10")
        assert is_multicast("224.0.0.1")
        assert is_multicast("ff15::1")
        assert not is_multicast("192.168.1.1")
        assert not is_multicast("2001:db8::1")
        assert not is_multicast("camera.example.com")


class TestTTL:
    def test_valid(self):
        """Test that TTLs in range are accepted."""
        for ttl in ("0", "1", "32", "255"):
            assert validate_ttl(ttl) == []

    def test_missing(self):
        """Test that a missing TTL is reported."""
        assert validate_ttl(None) == [
            "Connection data fields using multicast addresses must have a TTL field"
        ]

    def test_invalid(self):
        """Test TTLs out of range, or with leading zeros."""
        assert "range" in validate_ttl("256")[0]
        assert "leading zeros" in validate_ttl("032")[0]
