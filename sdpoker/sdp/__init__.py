"""Structural model of Session Description Protocol (SDP) documents, for validation."""

from .attributes import *
from .grammar import *
from .lines import *
from .sections import *
from .values import *
