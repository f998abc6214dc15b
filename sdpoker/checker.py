"""Run the rule catalog over SDP documents and collect the diagnostics."""

from __future__ import annotations

import logging
from typing import Iterable

from .config import CheckConfig
from .diagnostics import Diagnostic
from .exceptions import UnknownRuleError
from .rules import SECTIONS, Rule, get_section
from .sdp import SDPDocument


__all__ = [
    "check",
    "all_sections",
    "run_section",
    "run_rule",
]


_logger = logging.getLogger(__name__)


def run_rule(rule_id: str, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:
    """
    Run a single rule by its id.

    :raises UnknownRuleError: if there is no rule with that id.
    """
    try:
        rule = Rule.get_registered(rule_id)
    except KeyError:
        raise UnknownRuleError(f"Unknown rule {rule_id!r}") from None
    return rule.run(document, config)


def run_section(name: str, document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:
    """
    Run all the rules of a section, in catalog order.

    :raises UnknownRuleError: if there is no section with that name.
    """
    section = get_section(name)
    diagnostics: list[Diagnostic] = []
    for rule in section.rules:
        diagnostics.extend(rule.run(document, config))
    _logger.debug("Section %s found %d problems", name, len(diagnostics))
    return diagnostics


def all_sections(document: SDPDocument, config: CheckConfig) -> list[Diagnostic]:
    """Run every section of the catalog, in order, concatenating the diagnostics."""
    diagnostics: list[Diagnostic] = []
    for section in SECTIONS:
        diagnostics.extend(run_section(section.name, document, config))
    return diagnostics


def check(
    text: str,
    config: CheckConfig | None = None,
    *,
    sections: Iterable[str] | None = None,
) -> list[Diagnostic]:
    """
    Check an SDP document for conformance.

    :param text: the SDP document text.
    :param config: the checker options, defaults to only the mandatory rules.
    :param sections: only run these sections, in the given order, instead of all of them.
    :return: the diagnostics, empty if the document conforms.
    :raises SDPEmptyDocumentError: if the text has no lines to check.
    :raises UnknownRuleError: if a section name is not in the catalog.
    """
    if config is None:
        config = CheckConfig()
    document = SDPDocument.parse(text)
    if sections is None:
        diagnostics = all_sections(document, config)
    else:
        diagnostics = []
        for name in sections:
            diagnostics.extend(run_section(name, document, config))
    _logger.debug("Checked SDP document, %d problems found", len(diagnostics))
    return diagnostics
