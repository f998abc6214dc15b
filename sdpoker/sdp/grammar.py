"""
Ordering state machine for the fixed field order of RFC 4566 Section 5.

Spec::
    Session description
        v=  o=  s=  i=*  u=*  e=*  p=*  c=*  b=*
        One or more time descriptions ("t=" and "r=" lines)
        z=*  k=*  a=*
        Zero or more media descriptions
    Time description
        t=  r=*
    Media description, if present
        m=  i=*  c=*  b=*  k=*  a=*
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Mapping, Sequence

from sdpoker.constants import MANDATORY_FIELD_TYPES
from sdpoker.helpers import slots_dataclass


__all__ = [
    "GrammarState",
    "FOLLOWED_BY",
    "OrderViolation",
    "check_order",
    "missing_mandatory",
]


class GrammarState(enum.Enum):
    """The session / time / media phase of the ordering machine."""

    SESSION = "session"
    TIME = "time"
    MEDIA = "media"


_S, _T, _M = GrammarState.SESSION, GrammarState.TIME, GrammarState.MEDIA


def _successors(types: str, state: GrammarState, **others: GrammarState) -> dict[str, GrammarState]:
    successors = dict.fromkeys(types, state)
    successors.update(others)
    return successors


_TIME_TAIL: dict[str, GrammarState] = {"r": _T, "t": _T, "z": _S, "k": _S, "a": _S, "m": _M}

FOLLOWED_BY: Mapping[GrammarState, Mapping[str, Mapping[str, GrammarState]]] = MappingProxyType({
    _S: MappingProxyType({
        "v": {"o": _S},
        "o": {"s": _S},
        "s": _successors("iuepcb", _S, t=_T),
        "i": _successors("iuepcb", _S, t=_T),
        "u": _successors("uepcb", _S, t=_T),
        "e": _successors("epcb", _S, t=_T),
        "p": _successors("pcb", _S, t=_T),
        "c": _successors("cb", _S, t=_T),
        "b": _successors("b", _S, t=_T),
        "z": _successors("zka", _S, m=_M),
        "k": _successors("ka", _S, m=_M),
        "a": _successors("a", _S, m=_M),
    }),
    _T: MappingProxyType({
        "t": _TIME_TAIL,
        "r": _TIME_TAIL,
    }),
    _M: MappingProxyType({
        "m": _successors("icbkam", _M),
        "i": _successors("icbkam", _M),
        "c": _successors("cbkam", _M),
        "b": _successors("bkam", _M),
        "k": _successors("kam", _M),
        "a": _successors("am", _M),
    }),
})


@slots_dataclass(frozen=True)
class OrderViolation:
    """An illegal adjacency of two field types, at index ``position`` of the sequence."""

    position: int
    previous: str
    current: str
    state: GrammarState


def check_order(types: Sequence[str]) -> list[OrderViolation]:
    """
    Walk consecutive pairs of field types through the ordering state machine.

    An illegal successor is reported and the state is not advanced, so the walk
    continues from the last known-good position. When the previous type has no
    entry in the current state (e.g. it was itself illegal, or unknown), the set of
    legal successors carries over from the last one found.

    :param types: the field type letters, in document order.
    :return: the illegal adjacencies found.
    """
    violations: list[OrderViolation] = []
    state = GrammarState.SESSION
    successors: Mapping[str, GrammarState] = {}
    for position in range(1, len(types)):
        previous, current = types[position - 1], types[position]
        successors = FOLLOWED_BY[state].get(previous) or successors
        next_state = successors.get(current)
        if next_state is None:
            violations.append(OrderViolation(position, previous, current, state))
        else:
            state = next_state
    return violations


def missing_mandatory(types: Sequence[str]) -> list[str]:
    """Return the mandatory field types (``v``, ``o``, ``s``, ``t``) absent from ``types``."""
    present = set(types)
    return [field_type for field_type in MANDATORY_FIELD_TYPES if field_type not in present]
