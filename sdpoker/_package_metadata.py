"""Package metadata, from the installed distribution or from a source checkout."""

from __future__ import annotations

import importlib.metadata as importlib_metadata
import logging
from email.message import Message
from pathlib import Path
from typing import Any, Mapping, Sequence

import toml


_logger = logging.getLogger(__name__)


def _load_metadata() -> Message | Mapping[str, Any] | None:
    try:
        return importlib_metadata.metadata("sdpoker")
    except importlib_metadata.PackageNotFoundError:
        pass
    pyproject_path = Path(__file__).resolve().parent.parent / "pyproject.toml"
    if not pyproject_path.exists():
        _logger.debug("No distribution metadata nor pyproject.toml found for sdpoker")
        return None
    return toml.load(pyproject_path)


metadata: Message | Mapping[str, Any] | None = _load_metadata()


def get_metadata(distinfo_key: str, toml_keys: Sequence[str | int]) -> Any:
    """
    Get a metadata field of the package.

    :param distinfo_key: the field name in the installed distribution's metadata.
    :param toml_keys: the path to the same field in ``pyproject.toml``, used from a checkout.
    :return: the value, or ``None`` if it's not available.
    """
    if metadata is None:
        return None
    if isinstance(metadata, Message):
        return metadata.get(distinfo_key)
    value: Any = metadata
    try:
        for key in toml_keys:
            value = value[key]
    except (KeyError, IndexError):
        return None
    return value
