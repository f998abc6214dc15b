"""Helpers, utilities, and other miscellaneous functions and classes."""

from __future__ import annotations

import functools
import sys
from abc import ABC
from dataclasses import dataclass as _dtcls
from inspect import isabstract
from typing import Any, Callable, Generic, Iterator, MutableMapping, TypeVar, cast

from typing_extensions import dataclass_transform


_dT = TypeVar("_dT")


@functools.wraps(_dtcls)
@dataclass_transform()
def slots_dataclass(*args: Any, **kwargs: Any) -> Callable[[_dT], _dT]:
    """Wrapper for dataclass decorator that adds slots if supported (py3.10+)."""
    if sys.version_info < (3, 10):
        kwargs.pop("slots", None)
    else:
        kwargs.setdefault("slots", True)
    return cast(Callable[[_dT], _dT], _dtcls(*args, **kwargs))


_ID = TypeVar("_ID")
_RT = TypeVar("_RT", bound="Registry")


class Registry(ABC, Generic[_ID, _RT]):
    """
    Abstract base class for registries of subclasses of a given class.

    A class declared with ``registry=True`` becomes the root of a new registry,
    keyed by the value of the class attribute named by ``registry_attr``.
    Every concrete subclass is registered under that key when its body is executed,
    so the registry keeps the order in which the subclasses were defined.
    Abstract subclasses (with ABC in their bases, or abstract methods) are skipped.

    :param registry: whether the class is a registry root or not.
    :param registry_attr: the name of the class attribute to use as registry key.
    """

    __registry__: MutableMapping[_ID, type[_RT]]
    __registry_attr_name__: str
    __registry_root__: type[Registry]

    @classmethod
    def is_abstract(cls) -> bool:
        """Check if the class is defined as abstract (ABC in its bases, or abstract methods)."""
        return isabstract(cls) or ABC in cls.__bases__

    def __init_subclass__(
        cls,
        *,
        registry: bool = False,
        registry_attr: str | None = None,
        **kwargs: Any,
    ):
        super().__init_subclass__(**kwargs)

        if registry:
            if not registry_attr:
                raise AttributeError(
                    f"No registry_attr specified for registry class {cls.__name__}"
                )
            cls.__registry__ = {}
            cls.__registry_attr_name__ = registry_attr
            cls.__registry_root__ = cls
            return

        registry_id: _ID | None = cls.__dict__.get(cls.__registry_attr_name__)
        if registry_id is None:
            if cls.is_abstract():
                return
            raise ValueError(
                f"Cannot register {cls.__name__} in {cls.__registry_root__.__name__}, "
                f"no {cls.__registry_attr_name__} defined in the class body"
            )

        conflict_cls: type[_RT] | None = cls.__registry__.get(registry_id)
        if conflict_cls is not None:
            cls_fullname = (cls.__module__, cls.__qualname__)
            conflict_fullname = (conflict_cls.__module__, conflict_cls.__qualname__)
            if cls_fullname != conflict_fullname:  # not a module reload
                raise NameError(
                    f"More than one {cls.__registry_root__.__name__} subclass with "
                    f'the same {cls.__registry_attr_name__} "{registry_id}" defined: '
                    f"{conflict_cls.__name__} and {cls.__name__}"
                )
        cls.__registry__[registry_id] = cast("type[_RT]", cls)

    @classmethod
    def iter_registered(cls) -> Iterator[type[_RT]]:
        """Iterate over the registered classes, in definition order."""
        return iter(list(cls.__registry__.values()))

    @classmethod
    def get_registered(cls, registry_id: _ID) -> type[_RT]:
        """Get the registered class for the given key, or raise :class:`KeyError`."""
        registered_cls: type[_RT] | None = cls.__registry__.get(registry_id)
        if registered_cls is None:
            raise KeyError(
                f"No registered {cls.__registry_root__.__name__} subclass found "
                f'for {cls.__registry_attr_name__} == "{registry_id}"'
            )
        return registered_cls
