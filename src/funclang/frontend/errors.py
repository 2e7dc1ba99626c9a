"""
Front End Error Hierarchy
=========================

This module defines the exceptions raised by the lexer, the parser and
the AST arena. All of them inherit from FunclangError.

Exception Hierarchy
-------------------
FunclangError
├── LexicalError - the lexer cannot produce a token
│   ├── InvalidCharacterError - character outside the language
│   └── IntegerLiteralError - literal outside the unsigned 64-bit range
├── ParseError - token stream violates the grammar
│   ├── UnexpectedTokenError - wrong kind, or input ended at a required token
│   └── ExpectedStatementError - input ended where a statement was required
├── InternalCompilerError - a component broke its contract
├── NestingLimitError - program nested deeper than max_depth
└── ArenaError - misuse of the node arena
    ├── ArenaReleasedError - access after release()
    └── InvalidNodeRefError - handle from another arena or out of range

Parse errors are fail-fast: the parser raises the first one it meets and
never tries to resynchronize. The message of every parse error is built
from the same small set of templates, so the text only varies in which
token kinds were expected and which one was found.
"""

from enum import Enum, auto
from typing import TYPE_CHECKING, Optional, Sequence

from funclang.errors import FunclangError, SourceLocation

if TYPE_CHECKING:
    from funclang.frontend.lexer import TokenKind


END_OF_FILE = "end of file"


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(FunclangError):
    """
    The lexer met text it cannot turn into a token.

    Lexical errors carry a SourceLocation: the lexer is the only component
    that tracks lines and columns.
    """
    pass


class InvalidCharacterError(LexicalError):
    """Character that cannot start any token."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


class IntegerLiteralError(LexicalError):
    """
    Integer literal that does not fit an unsigned 64-bit value.

    Rejecting it here keeps the parser's numeric conversion infallible.
    """

    def __init__(
        self,
        text: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"integer literal '{text}' does not fit in 64 bits",
            location=location,
            hint="integer literals must be between 0 and 18446744073709551615",
            source_line=source_line,
        )


# =============================================================================
# Parse Errors
# =============================================================================

class ParseErrorKind(Enum):
    """Closed set of parse failure kinds."""
    UNEXPECTED_TOKEN = auto()
    EXPECTED_STATEMENT = auto()


def describe_kinds(kinds: Sequence["TokenKind"]) -> str:
    """Join token kind descriptions for a diagnostic: "'void' or 'i32'"."""
    names = [str(kind) for kind in kinds]
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + " or " + names[-1]


class ParseError(FunclangError):
    """
    Base class for grammar violations.

    Attributes:
        kind: Which of the two parse failures this is
        expected: Token kinds that would have been accepted (may be empty)
        found: Token kind actually seen, or None for end of input
    """

    kind: ParseErrorKind

    def __init__(
        self,
        message: str,
        expected: Sequence["TokenKind"] = (),
        found: Optional["TokenKind"] = None,
    ):
        self.expected = tuple(expected)
        self.found = found
        super().__init__(message)

    @property
    def at_end_of_file(self) -> bool:
        """True when the error was triggered by exhausted input."""
        return self.found is None


class UnexpectedTokenError(ParseError):
    """
    A required token was of the wrong kind, or input ended where a
    specific token (or one of a specific set) was required.
    """

    kind = ParseErrorKind.UNEXPECTED_TOKEN

    def __init__(
        self,
        expected: Sequence["TokenKind"],
        found: Optional["TokenKind"] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            wanted = describe_kinds(expected)
            if found is None:
                message = f"expected {wanted} but found {END_OF_FILE}"
            else:
                message = f"expected {wanted} but found {found} instead"
        super().__init__(message, expected, found)


class ExpectedStatementError(ParseError):
    """Input ended at the start of a statement or expression."""

    kind = ParseErrorKind.EXPECTED_STATEMENT

    def __init__(self):
        super().__init__(f"expected statement, found {END_OF_FILE}")


# =============================================================================
# Internal Errors
# =============================================================================

class InternalCompilerError(FunclangError):
    """
    A component broke a contract another component relies on.

    Raised, for instance, when a token tagged as an integer cannot be
    converted to an unsigned 64-bit value. This is never a user error.
    """

    def __init__(self, message: str):
        super().__init__(
            f"internal compiler error: {message}",
            hint="this is a bug in funclang, please report it",
        )


class NestingLimitError(FunclangError):
    """Statements or calls nested deeper than the configured limit."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            f"nesting deeper than {limit} levels",
            hint="raise FUNCLANG_MAX_DEPTH to accept deeper programs",
        )


# =============================================================================
# Arena Errors
# =============================================================================

class ArenaError(FunclangError):
    """Base class for arena misuse."""
    pass


class ArenaReleasedError(ArenaError):
    """The arena has been released; its nodes no longer exist."""

    def __init__(self):
        super().__init__("node arena has already been released")


class InvalidNodeRefError(ArenaError):
    """Handle that does not name a node of this arena."""

    def __init__(self, ref: object, reason: str):
        self.ref = ref
        super().__init__(f"invalid node reference {ref!r}: {reason}")
