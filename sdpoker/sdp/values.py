"""Numeric and address sub-validators shared by the attribute parsers and the rules."""

from __future__ import annotations

import ipaddress
import math

from sdpoker.config import AddressFamily
from sdpoker.constants import IPv4_PAT, IPv6_PAT, MAX_TTL


__all__ = [
    "validate_rational",
    "address_family",
    "is_multicast",
    "validate_ttl",
]


def validate_rational(
    value: str, *, separator: str = "/", allow_below_one: bool = False, ratio: bool = False
) -> list[str]:
    """
    Check that a rational number is an integer, or a fraction in lowest terms.

    Accepted forms are ``N`` and ``N<separator>D``. Integer rates must not be given
    with a superfluous denominator (``25/1``), and, unless ``allow_below_one``,
    the denominator must not be greater than the numerator. With ``ratio``, the
    value must always be written as ``N<separator>D``, and ``1<separator>1`` is fine.

    :param value: the rational string.
    :param separator: the numerator / denominator separator.
    :param allow_below_one: whether values below one are acceptable.
    :param ratio: whether the value is a ratio, that must always have both terms.
    :return: a list with at most one description of what is wrong with the value.
    """
    numerator_str, sep, denominator_str = value.partition(separator)
    if ratio and not sep:
        return [f"'{value}' is not a ratio of the form '<w>{separator}<h>'"]
    if not numerator_str.isdecimal() or (sep and not denominator_str.isdecimal()):
        return [f"'{value}' is not an integer or a ratio of two integers"]
    if not sep:
        if int(numerator_str) == 0:
            return [f"'{value}' must be greater than zero"]
        return []
    numerator, denominator = int(numerator_str), int(denominator_str)
    if numerator == 0 or denominator == 0:
        return [f"'{value}' must not have a zero numerator or denominator"]
    if denominator > numerator and not allow_below_one:
        return [f"'{value}' is too slow, the denominator is greater than the numerator"]
    if math.gcd(numerator, denominator) != 1:
        return [f"'{value}' is not reduced to its lowest terms"]
    if denominator == 1 and not ratio:
        return [f"'{value}' is an integer and must be written without a denominator"]
    return []


def address_family(address: str) -> AddressFamily | None:
    """Classify an address literal as IPv4 or IPv6, or ``None`` if it's neither (e.g. a FQDN)."""
    if IPv4_PAT.fullmatch(address):
        try:
            ipaddress.IPv4Address(address)
        except ValueError:
            return None
        return AddressFamily.IP4
    if IPv6_PAT.fullmatch(address):
        try:
            ipaddress.IPv6Address(address)
        except ValueError:
            return None
        return AddressFamily.IP6
    return None


def is_multicast(address: str) -> bool:
    """Whether an address literal is in the IPv4 224-239 range or the IPv6 ``ff00::/8`` range."""
    try:
        return ipaddress.ip_address(address).is_multicast
    except ValueError:
        return False


def validate_ttl(ttl: str | None) -> list[str]:
    """
    Check the TTL suffix of a multicast IPv4 connection address.

    :param ttl: the TTL digits, or ``None`` if the address has no TTL suffix.
    :return: a list with at most one description of what is wrong with the TTL.
    """
    if ttl is None:
        return ["Connection data fields using multicast addresses must have a TTL field"]
    if int(ttl) > MAX_TTL:
        return [f"Multicast TTL value must be in the range 0-{MAX_TTL} and '{ttl}' provided"]
    if len(ttl) > 1 and ttl.startswith("0"):
        return [f"Multicast TTL value '{ttl}' must not have leading zeros"]
    return []
