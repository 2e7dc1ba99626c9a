"""
Funclang Recursive Descent Parser
=================================

This module implements the parser of the Funclang front end. It pulls
tokens one at a time from the lexer and builds the AST bottom-up in the
same pass: each production consumes the tokens it owns and returns the
handle of one completed node.

Grammar
-------
program         ::= func_decl
func_decl       ::= 'func' IDENTIFIER '(' ')' return_type statement
return_type     ::= 'void' | 'i32'
statement       ::= block | return_stmt | expr_stmt
block           ::= '{' statement* '}'
return_stmt     ::= 'return' expr ';'
expr_stmt       ::= expr ';'
expr            ::= func_call | INTEGER
func_call       ::= IDENTIFIER '(' expr ')'

The grammar is LL(1): every decision looks at one token at most, and
the parser never backtracks. The body of a function is any statement,
not necessarily a block.

Only one declaration is parsed. Tokens after it are left in the lexer
untouched, and are not even scanned.

Error Handling
--------------
The first grammar violation aborts the parse with a ParseError. There
is no recovery. The helper that detects the problem logs a diagnostic on
the ``funclang.frontend.parser`` logger before raising, and every such
message comes from the same templates in funclang.frontend.errors.

Example Usage
-------------
>>> from funclang.frontend.parser import parse_source
>>> tree = parse_source("func main() void { return 0; }")
>>> tree.format()
'Program(FuncDecl("main", Block([Return(Integer(0))])))'
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional
import logging

from funclang.config import FrontendConfig, get_default_config
from funclang.frontend.ast import (
    Arena,
    ASTPrinter,
    Block,
    FuncCall,
    FuncDecl,
    Integer,
    NodeRef,
    Program,
    Return,
    format_tree,
    to_dict,
)
from funclang.frontend.errors import (
    END_OF_FILE,
    ExpectedStatementError,
    InternalCompilerError,
    NestingLimitError,
    UnexpectedTokenError,
)
from funclang.frontend.lexer import Lexer, Token, TokenKind, exceeds_u64


logger = logging.getLogger(__name__)


RETURN_TYPES = (TokenKind.KW_VOID, TokenKind.KW_I32)


class Parser:
    """
    Recursive descent parser for Funclang.

    The parser owns a Lexer over ``source`` and allocates every node in
    the arena it is given. The arena must outlive any use of the tree.

    Usage:
        arena = Arena()
        root = Parser(source, arena).parse()
        program = arena[root]

    Attributes:
        lexer: Token source
        arena: Node arena receiving the tree
        config: Session configuration
    """

    def __init__(
        self,
        source: str,
        arena: Arena,
        config: Optional[FrontendConfig] = None,
    ):
        """
        Initialize the parser.

        Args:
            source: Program text
            arena: Arena that will own the nodes
            config: Session configuration (process default if None)
        """
        self.config = config or get_default_config()
        self.lexer = Lexer(source, self.config.filename)
        self.arena = arena
        self._depth = 0
        self._deepest = 0

    def parse(self) -> NodeRef:
        """
        Parse the program.

        Returns:
            Handle of the Program node

        Raises:
            ParseError: On the first grammar violation
            LexicalError: If the lexer meets invalid text
            NestingLimitError: If nesting exceeds max_depth or the
                interpreter's recursion limit

        On failure every node allocated by this call is discarded from
        the arena, so no partial tree survives.
        """
        mark = self.arena.mark()
        self._deepest = 0
        try:
            root = self._parse_program()
        except RecursionError:
            # max_depth set above what the interpreter stack can hold
            self.arena.rollback(mark)
            logger.debug(f"Recursion limit hit at nesting depth {self._deepest}")
            raise NestingLimitError(self._deepest - 1) from None
        except Exception:
            self.arena.rollback(mark)
            raise
        logger.debug(f"Parsed {self.config.filename}: {len(self.arena) - mark} nodes")
        return root

    # =========================================================================
    # Productions
    # =========================================================================

    def _parse_program(self) -> NodeRef:
        return Program.new(self.arena, declaration=self._parse_decl())

    def _parse_decl(self) -> NodeRef:
        return self._parse_func_decl()

    def _parse_func_decl(self) -> NodeRef:
        """Parse 'func' IDENTIFIER '(' ')' return_type statement."""
        self._expect(TokenKind.KW_FUNC)
        name_token = self._expect(TokenKind.IDENT)
        self._expect(TokenKind.LPAREN)
        self._expect(TokenKind.RPAREN)

        # Return type is validated only; the tree does not keep it
        self._expect_one_of(RETURN_TYPES)

        body = self._parse_stmt()
        return FuncDecl.new(self.arena, name=name_token.text, body=body)

    def _parse_stmt(self) -> NodeRef:
        """Parse any statement, dispatching on the next token."""
        with self._nested():
            token = self.lexer.peek()

            if token is None:
                self._diagnose(f"expected statement, found {END_OF_FILE}")
                raise ExpectedStatementError()

            if token.kind == TokenKind.LCURLY:
                return self._parse_block()
            if token.kind == TokenKind.KW_RETURN:
                return self._parse_return()

            # Expression statement: the expression node itself
            expr = self._parse_expr()
            self._expect(TokenKind.SEMICOLON)
            return expr

    def _parse_block(self) -> NodeRef:
        """Parse '{' statement* '}'."""
        # Opening brace already confirmed by _parse_stmt
        self.lexer.next()

        statements: list[NodeRef] = []
        while (token := self.lexer.peek()) is not None:
            if token.kind == TokenKind.RCURLY:
                break
            statements.append(self._parse_stmt())

        if self.lexer.peek() is None:
            message = f"expected closing brace, found {END_OF_FILE}"
            self._diagnose(message)
            raise UnexpectedTokenError((TokenKind.RCURLY,), None, message)

        self.lexer.next()
        return Block.new(self.arena, statements=tuple(statements))

    def _parse_return(self) -> NodeRef:
        """Parse 'return' expr ';'."""
        self._expect(TokenKind.KW_RETURN)
        value = self._parse_expr()
        self._expect(TokenKind.SEMICOLON)
        return Return.new(self.arena, value=value)

    def _parse_expr(self) -> NodeRef:
        """Parse an expression: a call if it starts with an identifier."""
        with self._nested():
            token = self.lexer.peek()

            if token is None:
                self._diagnose(f"expected statement, found {END_OF_FILE}")
                raise ExpectedStatementError()

            if token.kind == TokenKind.IDENT:
                return self._parse_func_call()

            return self._parse_integer()

    def _parse_func_call(self) -> NodeRef:
        """Parse IDENTIFIER '(' expr ')'."""
        # Identifier already confirmed by _parse_expr
        name_token = self.lexer.next()

        self._expect(TokenKind.LPAREN)
        argument = self._parse_expr()
        self._expect(TokenKind.RPAREN)

        return FuncCall.new(self.arena, name=name_token.text, argument=argument)

    def _parse_integer(self) -> NodeRef:
        """Parse an INTEGER literal."""
        token = self._expect(TokenKind.INTEGER)
        text = token.text

        # The lexer only emits in-range literals of ASCII decimal digits
        if not (text.isascii() and text.isdigit()):
            raise InternalCompilerError(
                f"integer token {text!r} is not a decimal number"
            )
        if exceeds_u64(text):
            raise InternalCompilerError(
                f"integer token {text!r} is outside the 64-bit range"
            )

        return Integer.new(self.arena, value=int(text.lstrip("0") or "0"))

    # =========================================================================
    # Token Consumption Helpers
    # =========================================================================

    def _expect(self, kind: TokenKind) -> Token:
        """
        Consume the next token, which must be of ``kind``.

        Raises:
            UnexpectedTokenError: On a different kind or end of input
        """
        return self._expect_one_of((kind,))

    def _expect_one_of(self, kinds: tuple[TokenKind, ...]) -> Token:
        """
        Consume the next token, which must be of one of ``kinds``.

        Raises:
            UnexpectedTokenError: On another kind or end of input
        """
        token = self.lexer.next()

        if token is None:
            error = UnexpectedTokenError(kinds, None)
            self._diagnose(error.message)
            raise error

        if token.kind not in kinds:
            error = UnexpectedTokenError(kinds, token.kind)
            self._diagnose(error.message)
            raise error

        return token

    def _diagnose(self, message: str) -> None:
        """Write a diagnostic line to the diagnostic stream."""
        if self.config.diagnostics:
            logger.error(message)

    @contextmanager
    def _nested(self) -> Iterator[None]:
        """Track statement/expression nesting depth."""
        self._depth += 1
        self._deepest = max(self._deepest, self._depth)
        try:
            if self._depth > self.config.max_depth:
                raise NestingLimitError(self.config.max_depth)
            yield
        finally:
            self._depth -= 1


# =============================================================================
# Parse Result
# =============================================================================

@dataclass
class SyntaxTree:
    """
    A parsed program together with the arena owning its nodes.

    Attributes:
        arena: Arena holding every node
        root: Handle of the Program node
    """
    arena: Arena
    root: NodeRef

    def __enter__(self) -> "SyntaxTree":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __getitem__(self, ref: NodeRef):
        return self.arena[ref]

    @property
    def program(self) -> Program:
        """The root node."""
        return self.arena[self.root]

    @property
    def function(self) -> FuncDecl:
        """The single function declaration."""
        return self.arena[self.program.declaration]

    def format(self) -> str:
        """One-line constructor-style form."""
        return format_tree(self.arena, self.root)

    def pretty(self) -> str:
        """Indented human-readable form."""
        return ASTPrinter(self.arena).print(self.root)

    def to_dict(self) -> dict:
        """Nested dictionary form, suitable for JSON."""
        return to_dict(self.arena, self.root)

    def release(self) -> None:
        """Release the arena and with it the whole tree."""
        self.arena.release()


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: str,
    arena: Optional[Arena] = None,
    config: Optional[FrontendConfig] = None,
) -> SyntaxTree:
    """
    Parse program text into a SyntaxTree.

    Args:
        source: The program text
        arena: Arena to allocate into (a new one if None)
        config: Session configuration (process default if None)

    Returns:
        SyntaxTree owning the arena and the root handle

    Raises:
        ParseError: If parsing fails
        LexicalError: If the text contains invalid characters or literals
    """
    if arena is None:
        arena = Arena()
    root = Parser(source, arena, config).parse()
    return SyntaxTree(arena, root)

