"""
In-memory tags database and the ctags text format.

Entries come either from walking parsed sources (see walker.py) or from
reading an existing tags file. Writing always deduplicates and sorts first,
so the emitted file can declare itself sorted.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

TAG_FILE_HEADER = (
    "!_TAG_FILE_SORTED\t1\t/1 = sorted/\n"
    "!_TAG_FILE_ENCODING\tutf-8\n"
)

ESCAPE_CHARS = "\\/"
PATTERN_END = '/;"'


class Kind(Enum):
    FUNCTION = "function"
    FIELD = "field"
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    VARIABLE = "variable"
    CONSTANT = "constant"

    @classmethod
    def parse(cls, text) -> Optional["Kind"]:
        try:
            return cls(text)
        except ValueError:
            return None


@dataclass(frozen=True)
class Entry:
    ident: str
    filename: str
    text: str
    kind: Kind

    def sort_key(self):
        return (self.ident, self.filename, self.text)


def escape(text: str) -> str:
    """Backslash-escape every backslash and slash in `text`.

    Returns `text` itself when there is nothing to escape.
    """
    if not any(c in text for c in ESCAPE_CHARS):
        return text
    return "".join("\\" + c if c in ESCAPE_CHARS else c for c in text)


def remove_duplicates(entries: List[Entry]) -> List[Entry]:
    """Sort by (ident, filename, text) and drop repeated entries.

    Kind is not part of the sort key, so only runs of entries that are equal
    in all four fields collapse; same-text entries of different kinds both
    survive.
    """
    entries = sorted(entries, key=Entry.sort_key)
    deduplicated = []
    for entry in entries:
        if not deduplicated or deduplicated[-1] != entry:
            deduplicated.append(entry)
    return deduplicated


class Tags:
    def __init__(self):
        self.entries: List[Entry] = []
        # canonical path -> the one string every entry for that file shares
        self.visited: Dict[str, str] = {}

    def __len__(self):
        return len(self.entries)

    def visit(self, path: str) -> bool:
        """Mark `path` visited. Returns False if it already was."""
        if path in self.visited:
            return False
        self.visited[path] = path
        return True

    def intern(self, path: str) -> str:
        return self.visited.setdefault(path, path)

    def add(self, ident, filename, text, kind):
        self.entries.append(Entry(ident, self.intern(filename), text, kind))

    def read(self, data: str):
        """Read entries from the contents of a tags file.

        Malformed lines and lines with an unknown kind are skipped.
        """
        for line in data.split("\n"):
            if not line or line.startswith("!"):
                continue

            fields = [f for f in line.split("\t") if f][:4]
            if len(fields) < 4:
                continue
            ident, filename, pattern, kind_name = fields

            kind = Kind.parse(kind_name)
            if kind is None:
                continue

            if pattern.startswith("/"):
                pattern = pattern[1:]
            end = pattern.rfind(PATTERN_END)
            if end != -1:
                pattern = pattern[:end]

            # Only slashes are unescaped; escaped backslashes stay doubled.
            text = pattern.replace("\\/", "/")

            self.entries.append(Entry(ident, self.intern(filename), text, kind))

    def write(self, relative: bool = False) -> str:
        """Deduplicate and sort the entries, then render them as a tags file."""
        self.entries = remove_duplicates(self.entries)

        cwd = os.path.realpath(".") if relative else None

        # Cache relative paths to avoid recomputing them for every entry of
        # the same file
        relative_paths: Dict[str, str] = {}

        lines = [TAG_FILE_HEADER]
        for entry in self.entries:
            filename = entry.filename
            if cwd is not None:
                if filename not in relative_paths:
                    relative_paths[filename] = os.path.relpath(filename, cwd)
                filename = relative_paths[filename]

            lines.append(f"{entry.ident}\t{filename}\t/{escape(entry.text)}{PATTERN_END}\t{entry.kind.value}\n")

        return "".join(lines)
