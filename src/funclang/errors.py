"""
Funclang Error Base
===================

This module defines the root of the exception hierarchy for Funclang.
All exceptions inherit from FunclangError, allowing callers to catch all
toolchain errors with a single except clause if desired.

Exception Hierarchy
-------------------
FunclangError (base)
├── LexicalError (funclang.frontend.errors)
├── ParseError (funclang.frontend.errors)
├── InternalCompilerError (funclang.frontend.errors)
├── NestingLimitError (funclang.frontend.errors)
└── ArenaError (funclang.frontend.errors)

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)

The location prefix and source context are only present when the error
knows where it happened. Parse errors carry no position: the parser
works on token kinds only.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception Class
# =============================================================================

class FunclangError(Exception):
    """
    Base exception for all Funclang errors.

    Provides the common message layout: optional location prefix,
    optional source line with a caret, optional hint.

        try:
            tree = parse_source(text)
        except FunclangError as e:
            print(e)

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            main.fl:1:13: error: invalid character '+' (0x2B)
                func main() + void
                            ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)
