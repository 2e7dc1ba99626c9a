"""
Funclang - Front End for a Minimal C-like Language
==================================================

This package provides the front end of a minimal compiler: a lexer, a
recursive descent parser and an arena-owned abstract syntax tree for a
tiny language such as:

    func main() void {
        print(add(1));
        return 0;
    }

Main Components
---------------
- **frontend**: lexer, parser and AST
    Turns program text into a tree of nodes owned by an Arena

- **config**: session configuration
    Defaults, environment overrides and logging setup

- **cli**: command-line tools (funcc)
    Parses a file and prints its token stream or AST

Quick Start
-----------
    >>> from funclang import parse_source
    >>> with parse_source("func main() void { return 0; }") as tree:
    ...     print(tree.pretty())
    Program
      Function: main
        Block
          Return 0

Or use the command-line tool:
    $ funcc main.fl
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from funclang.errors import FunclangError, SourceLocation
from funclang.config import FrontendConfig, get_default_config, set_default_config
from funclang.frontend import (
    Arena,
    NodeRef,
    Program,
    FuncDecl,
    Block,
    Return,
    FuncCall,
    Integer,
    Lexer,
    Token,
    TokenKind,
    Parser,
    SyntaxTree,
    parse_source,
    format_tree,
    LexicalError,
    ParseError,
    ParseErrorKind,
    UnexpectedTokenError,
    ExpectedStatementError,
    InternalCompilerError,
)

__all__ = [
    "__version__",
    # Errors
    "FunclangError",
    "SourceLocation",
    "LexicalError",
    "ParseError",
    "ParseErrorKind",
    "UnexpectedTokenError",
    "ExpectedStatementError",
    "InternalCompilerError",
    # Configuration
    "FrontendConfig",
    "get_default_config",
    "set_default_config",
    # Front end
    "Arena",
    "NodeRef",
    "Program",
    "FuncDecl",
    "Block",
    "Return",
    "FuncCall",
    "Integer",
    "Lexer",
    "Token",
    "TokenKind",
    "Parser",
    "SyntaxTree",
    "parse_source",
    "format_tree",
]
