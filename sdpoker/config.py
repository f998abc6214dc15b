"""Checker configuration: which optional and advisory rules are active."""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Any, Mapping

import toml
from typing_extensions import Self

from .exceptions import ConfigurationError
from .helpers import slots_dataclass


__all__ = [
    "AddressFamily",
    "CastMode",
    "MediaKind",
    "CheckConfig",
]


_logger = logging.getLogger(__name__)


class AddressFamily(enum.Enum):
    """Address family expected for origin and connection addresses."""

    ANY = "any"
    IP4 = "IP4"
    IP6 = "IP6"


class CastMode(enum.Enum):
    """Expected kind of connection addresses."""

    ANY = "any"
    MULTICAST = "multicast"
    UNICAST = "unicast"


class MediaKind(enum.Enum):
    """Restriction on the kind of media streams described."""

    ANY = "any"
    VIDEO = "video"
    AUDIO = "audio"


# camelCase option names, mapped to field names
_OPTION_ALIASES: dict[str, str] = {
    "checkEndings": "check_endings",
    "channelOrder": "channel_order",
    "noCopy": "no_copy",
    "noMedia": "no_media",
}

_ENUM_FIELDS: dict[str, type[enum.Enum]] = {
    "address_family": AddressFamily,
    "cast_mode": CastMode,
    "media_kind": MediaKind,
}


@slots_dataclass(frozen=True)
class CheckConfig:
    """
    Immutable set of options, resolved once before a validation run.

    :param should: also check "should" (advisory) clauses, not only "shall" ones.
    :param check_endings: flag any line break that is not CRLF.
    :param whitespace: strictly check whitespace in multi-parameter attributes.
    :param address_family: the address family that addresses must use.
    :param cast_mode: whether connection addresses must be multicast or unicast.
    :param duplicate: the document must describe duplicated (ST 2022-7) streams.
    :param media_kind: only allow video or audio streams.
    :param channel_order: audio streams must carry a channel-order parameter.
    :param shaping: video streams must carry ST 2110-21 traffic shaping parameters.
    :param no_copy: reject documents that are copies of the standards' examples.
    :param no_media: reject documents without any media description.
    """

    should: bool = False
    check_endings: bool = False
    whitespace: bool = False
    address_family: AddressFamily = AddressFamily.ANY
    cast_mode: CastMode = CastMode.ANY
    duplicate: bool = False
    media_kind: MediaKind = MediaKind.ANY
    channel_order: bool = False
    shaping: bool = False
    no_copy: bool = False
    no_media: bool = False

    def __post_init__(self) -> None:
        for name, enum_cls in _ENUM_FIELDS.items():
            value = getattr(self, name)
            if not isinstance(value, enum_cls):
                try:
                    object.__setattr__(self, name, enum_cls(value))
                except ValueError:
                    raise ConfigurationError(  # noqa: B904
                        f"Invalid value {value!r} for option {name}"
                    )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> Self:
        """
        Build a configuration from a mapping of option names to values.

        Both the field names of this class and the camelCase option names of the
        JSON options interface (``useIP4``, ``multicast``, ``videoOnly``, ...) are accepted.

        :param options: the options mapping.
        :return: the configuration.
        :raises ConfigurationError: for unknown, mistyped or contradictory options.
        """
        known_fields: set[str] = set(cls.__dataclass_fields__)
        kwargs: dict[str, Any] = {}

        def set_option(name: str, value: Any) -> None:
            if name in kwargs and kwargs[name] != value:
                raise ConfigurationError(f"Contradictory values for option {name}")
            kwargs[name] = value

        def flag(key: str, value: Any) -> bool:
            if not isinstance(value, bool):
                raise ConfigurationError(
                    f"Option {key} must be true or false, got {value!r}"
                )
            return value

        for key, value in options.items():
            if key in ("useIP4", "useIP6"):
                if flag(key, value):
                    set_option("address_family", AddressFamily(f"IP{key[-1]}"))
            elif key in ("multicast", "unicast"):
                if flag(key, value):
                    set_option("cast_mode", CastMode(key))
            elif key in ("videoOnly", "audioOnly"):
                if flag(key, value):
                    set_option("media_kind", MediaKind(key[: -len("Only")]))
            elif key in _OPTION_ALIASES:
                set_option(_OPTION_ALIASES[key], flag(key, value))
            elif key in _ENUM_FIELDS:
                try:
                    member = _ENUM_FIELDS[key](value)
                except ValueError:
                    raise ConfigurationError(  # noqa: B904
                        f"Invalid value {value!r} for option {key}"
                    )
                set_option(key, member)
            elif key in known_fields:
                set_option(key, flag(key, value))
            else:
                raise ConfigurationError(f"Unknown configuration option {key!r}")

        _logger.debug("Resolved configuration options: %s", kwargs)
        return cls(**kwargs)

    @classmethod
    def from_toml(cls, path: str | Path) -> Self:
        """
        Load a configuration from a TOML file.

        Options are read from the ``[sdpoker]`` table if present, otherwise from
        the top level of the file.
        """
        try:
            data: dict[str, Any] = toml.load(Path(path))
        except toml.TomlDecodeError as e:
            raise ConfigurationError(f"Invalid configuration file {path}: {e}") from e
        options = data.get("sdpoker", data)
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Invalid [sdpoker] table in {path}")
        return cls.from_mapping(options)
