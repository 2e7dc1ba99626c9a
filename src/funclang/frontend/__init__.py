"""
Funclang Front End
==================

Lexer, parser and AST for Funclang, a tiny C-like language with one
function declaration per program, blocks, return statements, integer
literals and single-argument calls.

Pipeline
--------
    Source → Lexer → Parser → AST (in an Arena)

Usage
-----
>>> from funclang.frontend import parse_source
>>> tree = parse_source("func f() i32 return g(5);")
>>> tree.format()
'Program(FuncDecl("f", Return(FuncCall("g", Integer(5)))))'
>>> tree.release()
"""

from funclang.frontend.errors import (
    LexicalError,
    InvalidCharacterError,
    IntegerLiteralError,
    ParseErrorKind,
    ParseError,
    UnexpectedTokenError,
    ExpectedStatementError,
    InternalCompilerError,
    NestingLimitError,
    ArenaError,
    ArenaReleasedError,
    InvalidNodeRefError,
)
from funclang.frontend.lexer import Lexer, Token, TokenKind
from funclang.frontend.ast import (
    Arena,
    NodeRef,
    ASTNode,
    Program,
    FuncDecl,
    Block,
    Return,
    FuncCall,
    Integer,
    ASTVisitor,
    ASTPrinter,
    format_tree,
    to_dict,
)
from funclang.frontend.parser import Parser, SyntaxTree, parse_source

__all__ = [
    # Errors
    "LexicalError",
    "InvalidCharacterError",
    "IntegerLiteralError",
    "ParseErrorKind",
    "ParseError",
    "UnexpectedTokenError",
    "ExpectedStatementError",
    "InternalCompilerError",
    "NestingLimitError",
    "ArenaError",
    "ArenaReleasedError",
    "InvalidNodeRefError",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    # AST
    "Arena",
    "NodeRef",
    "ASTNode",
    "Program",
    "FuncDecl",
    "Block",
    "Return",
    "FuncCall",
    "Integer",
    "ASTVisitor",
    "ASTPrinter",
    "format_tree",
    "to_dict",
    # Parser
    "Parser",
    "SyntaxTree",
    "parse_source",
]
