"""
Funclang Lexer (Token Source)
=============================

This module implements the token source consumed by the parser. It
converts source text into tokens on demand, one at a time, behind a
lookahead-1 interface:

- ``peek()`` returns the next token without consuming it
- ``next()`` consumes and returns the next token

Both return ``None`` once the input is exhausted. End of input is "no
token", not a sentinel token kind, so the parser can tell "stream
exhausted" apart from "wrong token kind".

Token Categories
----------------
- Keywords: func, void, i32, return
- Identifiers: function names
- Integers: decimal literals (unsigned 64-bit)
- Delimiters: ( ) { } ;

Comments
--------
- Single-line: // comment

Example Usage
-------------
>>> from funclang.frontend.lexer import Lexer
>>> lexer = Lexer("func main() void { return 0; }")
>>> lexer.peek()
Token(KW_FUNC, 'func')
>>> [tok.kind.name for tok in lexer.tokenize()][:4]
['KW_FUNC', 'IDENT', 'LPAREN', 'RPAREN']
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional
import string

from funclang.errors import SourceLocation
from funclang.frontend.errors import InvalidCharacterError, IntegerLiteralError


# Largest value an integer literal may denote
U64_MAX = 2**64 - 1

# Decimal digits of U64_MAX
U64_DIGITS = len(str(U64_MAX))


def exceeds_u64(digits: str) -> bool:
    """
    True if a string of ASCII decimal digits denotes a value above U64_MAX.

    The length is checked first so that huge literals are never converted.
    """
    significant = digits.lstrip("0")
    if len(significant) > U64_DIGITS:
        return True
    return bool(significant) and int(significant) > U64_MAX


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Token kinds of the language.

    The enum value is the kind's canonical name; ``str(kind)`` gives the
    human-readable spelling used in diagnostics.
    """

    # === Keywords ===
    KW_FUNC = "kw_func"         # func
    KW_VOID = "kw_void"         # void
    KW_I32 = "kw_i32"           # i32
    KW_RETURN = "kw_return"     # return

    # === Identifiers and Literals ===
    IDENT = "ident"             # function names
    INTEGER = "integer"         # decimal literals

    # === Delimiters ===
    LPAREN = "lparen"           # (
    RPAREN = "rparen"           # )
    LCURLY = "lcurly"           # {
    RCURLY = "rcurly"           # }
    SEMICOLON = "semicolon"     # ;

    def __str__(self) -> str:
        return _KIND_DESCRIPTIONS[self]


_KIND_DESCRIPTIONS: dict[TokenKind, str] = {
    TokenKind.KW_FUNC: "'func'",
    TokenKind.KW_VOID: "'void'",
    TokenKind.KW_I32: "'i32'",
    TokenKind.KW_RETURN: "'return'",
    TokenKind.IDENT: "identifier",
    TokenKind.INTEGER: "integer literal",
    TokenKind.LPAREN: "'('",
    TokenKind.RPAREN: "')'",
    TokenKind.LCURLY: "'{'",
    TokenKind.RCURLY: "'}'",
    TokenKind.SEMICOLON: "';'",
}


# Map keyword strings to their token kinds
KEYWORDS: dict[str, TokenKind] = {
    "func": TokenKind.KW_FUNC,
    "void": TokenKind.KW_VOID,
    "i32": TokenKind.KW_I32,
    "return": TokenKind.KW_RETURN,
}

# Single character tokens
DELIMITERS: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LCURLY,
    "}": TokenKind.RCURLY,
    ";": TokenKind.SEMICOLON,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token.

    Attributes:
        kind: The TokenKind classification
        text: Spelling of the token, a slice of the source text
    """
    kind: TokenKind
    text: str

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r})"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Lazy tokenizer with one token of lookahead.

    Tokens are scanned only when ``peek()`` or ``next()`` asks for them,
    so text past the point where the parser stops is never examined.

    Usage:
        lexer = Lexer(source_text, filename)
        while (tok := lexer.next()) is not None:
            ...

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    WHITESPACE = " \t\r\n"

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The source code to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._line_start_pos = 0

        # One-token lookahead buffer
        self._peeked: Optional[Token] = None
        self._has_peeked = False

    # =========================================================================
    # Token Source Interface
    # =========================================================================

    def peek(self) -> Optional[Token]:
        """
        Return the next token without consuming it.

        Repeated calls with no intervening ``next()`` return the same token.

        Returns:
            The next Token, or None at end of input
        """
        if not self._has_peeked:
            self._peeked = self._scan()
            self._has_peeked = True
        return self._peeked

    def next(self) -> Optional[Token]:
        """
        Consume and return the next token.

        Returns:
            The next Token, or None at end of input
        """
        if self._has_peeked:
            self._has_peeked = False
            token, self._peeked = self._peeked, None
            return token
        return self._scan()

    def tokenize(self) -> Iterator[Token]:
        """
        Iterate over all remaining tokens.

        Yields:
            Token objects until the input is exhausted

        Raises:
            LexicalError: If invalid text is encountered
        """
        while (token := self.next()) is not None:
            yield token

    # =========================================================================
    # Scanning
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _current(self) -> str:
        return self.source[self._pos]

    def _location(self, pos: int) -> SourceLocation:
        return SourceLocation(self.filename, self._line, pos - self._line_start_pos + 1)

    def _skip_whitespace_and_comments(self) -> None:
        """Skip whitespace and // comments, keeping line tracking current."""
        while not self._at_end():
            char = self._current()

            if char in self.WHITESPACE:
                self._pos += 1
                if char == "\n":
                    self._line += 1
                    self._line_start_pos = self._pos
                continue

            if self.source.startswith("//", self._pos):
                end = self.source.find("\n", self._pos)
                self._pos = len(self.source) if end == -1 else end
                continue

            break

    def _scan(self) -> Optional[Token]:
        """Scan the next token from source, or None at end of input."""
        self._skip_whitespace_and_comments()

        if self._at_end():
            return None

        start = self._pos
        char = self._current()

        # Identifiers and keywords
        if char in self.IDENT_START:
            while not self._at_end() and self._current() in self.IDENT_CHARS:
                self._pos += 1
            text = self.source[start:self._pos]
            return Token(KEYWORDS.get(text, TokenKind.IDENT), text)

        # Integer literals
        if char in string.digits:
            while not self._at_end() and self._current() in string.digits:
                self._pos += 1
            text = self.source[start:self._pos]
            if exceeds_u64(text):
                raise IntegerLiteralError(
                    text,
                    self._location(start),
                    self._get_current_line(),
                )
            return Token(TokenKind.INTEGER, text)

        # Delimiters
        if char in DELIMITERS:
            self._pos += 1
            return Token(DELIMITERS[char], char)

        raise InvalidCharacterError(
            char,
            self._location(start),
            self._get_current_line(),
        )

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]
