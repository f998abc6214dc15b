"""The catalog of conformance rules, grouped in sections by specification clause."""

from .base import SECTIONS, Rule, Section, get_section

# rules are registered, and run within their section, in import order
from . import rfc4566, rfc4570, st2110_10, rfc7104, st2110_20, st2110_21, st2110_30, heuristics


__all__ = [
    "Section",
    "SECTIONS",
    "get_section",
    "Rule",
]
