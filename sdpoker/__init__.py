"""sdpoker checks SDP files for conformance with RFC 4566, RFC 4570 and SMPTE ST 2110."""

from ._package_metadata import get_metadata as _metadata


__title__ = _metadata("Name", ["project", "name"])
__description__ = _metadata("Summary", ["project", "description"])
__version__ = _metadata("Version", ["project", "version"])
__license__ = _metadata("License", ["project", "license", "text"])


from .checker import *
from .config import *
from .diagnostics import *
from .exceptions import *
from .rules import *
