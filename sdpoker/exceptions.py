"""Exception classes for the sdpoker library."""

from __future__ import annotations


__all__ = [
    "SDPokerException",
    "ParseError",
    "SDPParseError",
    "SDPEmptyDocumentError",
    "ConfigurationError",
    "UnknownRuleError",
]


class SDPokerException(Exception):
    """Base class for all custom library exceptions."""


class ParseError(SDPokerException, ValueError):
    """Raised when some text cannot be parsed."""


class SDPParseError(ParseError):
    """A field or attribute value does not match its expected shape."""


class SDPEmptyDocumentError(ParseError):
    """The document has no lines at all, so there is nothing to check."""


class ConfigurationError(SDPokerException, ValueError):
    """Invalid or contradictory checker configuration."""


class UnknownRuleError(SDPokerException, KeyError):
    """Raised when a rule or section name is not in the catalog."""
