"""Error taxonomy.

Only :class:`BlockSyntaxError` is raised by the parsing core. The other errors
belong to the document loader and the exporters.
"""

from __future__ import annotations


class BlockSyntaxError(SyntaxError):
    """Raised when a document line holds more than one ``key:value`` separator.

    The offending 1-based line number is available as ``line_number`` (and as
    the standard ``SyntaxError.lineno``).
    """

    def __init__(self, line_number: int, *, text: str | None = None, filename: str | None = None) -> None:
        super().__init__(f"Invalid syntax @{line_number}", (filename, line_number, None, text))
        self.line_number = line_number

    def __str__(self) -> str:
        if self.filename:
            return f"Invalid syntax @{self.line_number} ({self.filename})"
        return f"Invalid syntax @{self.line_number}"


class DocumentError(RuntimeError):
    """Raised when a document cannot be located or read."""


class ExportError(RuntimeError):
    """Raised when a correlation table cannot be written."""


__all__ = ["BlockSyntaxError", "DocumentError", "ExportError"]
