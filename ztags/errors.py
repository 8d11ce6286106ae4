"""Exceptions raised while indexing Zig sources."""


class ZtagsError(Exception):
    """Base class for ztags failures."""
    pass


class NotFileError(ZtagsError):
    """Raised when a path handed to the traversal is a directory."""

    def __init__(self, path):
        super().__init__(f"Not a file: {path}")
        self.path = path


class ParseError(ZtagsError):
    """Raised when a Zig source file is not valid UTF-8 or does not parse."""

    def __init__(self, message, line=None, column=None, path=None):
        self.message = message
        self.line = line
        self.column = column
        self.path = path
        location = [str(part) for part in (path, line, column) if part is not None]
        if location:
            message = ":".join(location) + ": " + message
        super().__init__(message)

    def with_path(self, path):
        return ParseError(self.message, self.line, self.column, path)
