"""ztags: generate ctags-compatible tags files for Zig sources."""

from .errors import NotFileError, ParseError, ZtagsError
from .parser import parse
from .tags import Entry, Kind, Tags, escape, remove_duplicates
from .traversal import TagFinder, find_tags

__version__ = "0.3.0"

__all__ = [
    "Entry",
    "Kind",
    "NotFileError",
    "ParseError",
    "TagFinder",
    "Tags",
    "ZtagsError",
    "escape",
    "find_tags",
    "parse",
    "remove_duplicates",
]
