"""
Funclang Abstract Syntax Tree (AST) Definitions
===============================================

This module defines the AST node types produced by the parser and the
arena that owns them.

Node Hierarchy
--------------
ASTNode (base)
├── Program - root node, exactly one declaration
├── FuncDecl - function declaration (return type is not retained)
├── Block - compound statement { ... }
├── Return - return statement
├── FuncCall - single-argument function call
└── Integer - unsigned 64-bit integer literal

Ownership
---------
Nodes never point at each other directly. Every node is stored in an
Arena and children are referred to through NodeRef handles, which are
plain indices into that arena. The arena is created before parsing,
handed to the parser explicitly, and released as a unit once the tree
is no longer needed. Individual nodes are never freed.

Design Notes
------------
- All nodes are frozen dataclasses; a Block's statement list is collected
  while the block is parsed and frozen into a tuple when it is built
- Children are owned by exactly one parent, so the tree has no sharing
  and no cycles
- Strings (function names) are slices of the source text

Example
-------
>>> arena = Arena()
>>> zero = Integer.new(arena, value=0)
>>> ret = Return.new(arena, value=zero)
>>> format_tree(arena, ret)
'Return(Integer(0))'
"""

from dataclasses import dataclass, fields
from itertools import count
from typing import Any, Iterator, Optional
import logging

from funclang.frontend.errors import ArenaReleasedError, InvalidNodeRefError


logger = logging.getLogger(__name__)


# =============================================================================
# Node Handles
# =============================================================================

@dataclass(frozen=True)
class NodeRef:
    """
    Handle naming one node inside one arena.

    Attributes:
        index: Position of the node in its arena
        arena_id: Identity of the owning arena
    """
    index: int
    arena_id: int

    def __repr__(self) -> str:
        return f"NodeRef({self.index})"


# =============================================================================
# AST Node Base Class
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Subclasses are allocated through ``new``, which takes the arena as an
    explicit argument and returns the node's handle.
    """

    @classmethod
    def new(cls, arena: "Arena", **values: Any) -> NodeRef:
        """Construct a node of this type inside ``arena``."""
        return arena.alloc(cls(**values))

    def children(self) -> tuple[NodeRef, ...]:
        """Handles of the direct children, in source order."""
        result: list[NodeRef] = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, NodeRef):
                result.append(value)
            elif isinstance(value, tuple):
                result.extend(v for v in value if isinstance(v, NodeRef))
        return tuple(result)


# =============================================================================
# Node Types
# =============================================================================

@dataclass(frozen=True)
class Program(ASTNode):
    """
    Root node: the whole compilation unit.

    Attributes:
        declaration: The single top-level declaration
    """
    declaration: NodeRef


@dataclass(frozen=True)
class FuncDecl(ASTNode):
    """
    Function declaration.

    The return type is checked by the parser and then dropped.

    Attributes:
        name: Function name
        body: The body statement (usually, but not necessarily, a Block)
    """
    name: str
    body: NodeRef


@dataclass(frozen=True)
class Block(ASTNode):
    """
    Compound statement.

    Attributes:
        statements: Statements in program order
    """
    statements: tuple[NodeRef, ...] = ()


@dataclass(frozen=True)
class Return(ASTNode):
    """Return statement with its value."""
    value: NodeRef


@dataclass(frozen=True)
class FuncCall(ASTNode):
    """
    Function call with exactly one argument.

    Attributes:
        name: Called function's name
        argument: The argument expression
    """
    name: str
    argument: NodeRef


@dataclass(frozen=True)
class Integer(ASTNode):
    """Integer literal, 0 <= value < 2**64."""
    value: int


# =============================================================================
# Arena
# =============================================================================

class Arena:
    """
    Owner of every node of a parse.

    Nodes are appended and addressed by NodeRef. They are only ever freed
    all together, by ``release()`` or by leaving a ``with`` block.
    ``mark()`` and ``rollback()`` let the parser discard the nodes of a
    failed parse.

    Usage:
        with Arena() as arena:
            root = Parser(source, arena).parse()
            program = arena[root]
    """

    _ids = count(1)

    def __init__(self):
        self.id = next(Arena._ids)
        self._nodes: Optional[list[ASTNode]] = []

    def __repr__(self) -> str:
        if self._nodes is None:
            return f"Arena(id={self.id}, released)"
        return f"Arena(id={self.id}, nodes={len(self._nodes)})"

    def __enter__(self) -> "Arena":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def released(self) -> bool:
        """True once release() has been called."""
        return self._nodes is None

    def _live_nodes(self) -> list[ASTNode]:
        if self._nodes is None:
            raise ArenaReleasedError()
        return self._nodes

    def alloc(self, node: ASTNode) -> NodeRef:
        """
        Store a node and return its handle.

        Args:
            node: The node to store

        Returns:
            NodeRef naming the node in this arena
        """
        nodes = self._live_nodes()
        nodes.append(node)
        return NodeRef(len(nodes) - 1, self.id)

    def __getitem__(self, ref: NodeRef) -> ASTNode:
        nodes = self._live_nodes()
        if not isinstance(ref, NodeRef):
            raise InvalidNodeRefError(ref, "not a NodeRef")
        if ref.arena_id != self.id:
            raise InvalidNodeRefError(ref, f"belongs to arena {ref.arena_id}, not {self.id}")
        if not 0 <= ref.index < len(nodes):
            raise InvalidNodeRefError(ref, "no such node")
        return nodes[ref.index]

    def __len__(self) -> int:
        return len(self._live_nodes())

    def __iter__(self) -> Iterator[ASTNode]:
        return iter(list(self._live_nodes()))

    def mark(self) -> int:
        """Return the current size, for a later rollback()."""
        return len(self._live_nodes())

    def rollback(self, mark: int) -> None:
        """Discard every node allocated since ``mark``."""
        nodes = self._live_nodes()
        if not 0 <= mark <= len(nodes):
            raise ValueError(f"invalid arena mark {mark} (size {len(nodes)})")
        dropped = len(nodes) - mark
        del nodes[mark:]
        logger.debug(f"Arena {self.id}: rolled back {dropped} nodes")

    def release(self) -> None:
        """Free every node at once. Safe to call more than once."""
        if self._nodes is not None:
            logger.debug(f"Arena {self.id}: released {len(self._nodes)} nodes")
            self._nodes = None


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Nodes are resolved through the arena, then dispatched to a
    ``visit_<NodeName>`` method. Subclasses override the ones they need.

    Usage:
        class CallCollector(ASTVisitor):
            def __init__(self, arena):
                super().__init__(arena)
                self.names = []

            def visit_FuncCall(self, node):
                self.names.append(node.name)
                self.generic_visit(node)

        CallCollector(arena).visit(root)
    """

    def __init__(self, arena: Arena):
        self.arena = arena

    def visit(self, ref: NodeRef) -> Any:
        """
        Visit the node named by ``ref``.

        Returns:
            The result of the visit method (varies by node type)
        """
        node = self.arena[ref]
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all children of ``node``."""
        for child in node.children():
            self.visit(child)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Indented, human-readable dump of a tree.

    Usage:
        printer = ASTPrinter(arena)
        print(printer.print(root))

    Output for ``func main() void { print(1); return 0; }``::

        Program
          Function: main
            Block
              Call: print(1)
              Return 0
    """

    def __init__(self, arena: Arena):
        super().__init__(arena)
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, ref: NodeRef) -> str:
        """Print the subtree under ``ref`` and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(ref)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _nested(self, ref: NodeRef) -> None:
        self.indent_level += 1
        self.visit(ref)
        self.indent_level -= 1

    def visit_Program(self, node: Program):
        self._emit("Program")
        self._nested(node.declaration)

    def visit_FuncDecl(self, node: FuncDecl):
        self._emit(f"Function: {node.name}")
        self._nested(node.body)

    def visit_Block(self, node: Block):
        self._emit("Block")
        for stmt in node.statements:
            self._nested(stmt)

    def visit_Return(self, node: Return):
        self._emit(f"Return {self._expr_str(node.value)}")

    def visit_FuncCall(self, node: FuncCall):
        self._emit(f"Call: {self._expr_str_node(node)}")

    def visit_Integer(self, node: Integer):
        self._emit(f"Integer: {node.value}")

    def _expr_str(self, ref: NodeRef) -> str:
        return self._expr_str_node(self.arena[ref])

    def _expr_str_node(self, node: ASTNode) -> str:
        """Convert an expression node to its source-like form."""
        if isinstance(node, Integer):
            return str(node.value)
        if isinstance(node, FuncCall):
            return f"{node.name}({self._expr_str(node.argument)})"
        return f"<{type(node).__name__}>"


# =============================================================================
# Compact and Structured Forms
# =============================================================================

class _CompactFormatter(ASTVisitor):
    """Renders a subtree as a single constructor-style expression."""

    def visit_Program(self, node: Program) -> str:
        return f"Program({self.visit(node.declaration)})"

    def visit_FuncDecl(self, node: FuncDecl) -> str:
        return f'FuncDecl("{node.name}", {self.visit(node.body)})'

    def visit_Block(self, node: Block) -> str:
        inner = ", ".join(self.visit(stmt) for stmt in node.statements)
        return f"Block([{inner}])"

    def visit_Return(self, node: Return) -> str:
        return f"Return({self.visit(node.value)})"

    def visit_FuncCall(self, node: FuncCall) -> str:
        return f'FuncCall("{node.name}", {self.visit(node.argument)})'

    def visit_Integer(self, node: Integer) -> str:
        return f"Integer({node.value})"


class _DictBuilder(ASTVisitor):
    """Renders a subtree as nested dictionaries."""

    def generic_visit(self, node: ASTNode) -> dict:
        result: dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            value = getattr(node, f.name)
            if isinstance(value, NodeRef):
                result[f.name] = self.visit(value)
            elif isinstance(value, tuple):
                result[f.name] = [self.visit(v) for v in value]
            else:
                result[f.name] = value
        return result


def format_tree(arena: Arena, ref: NodeRef) -> str:
    """
    One-line form of a subtree.

    >>> format_tree(arena, root)
    'Program(FuncDecl("main", Block([Return(Integer(0))])))'
    """
    return _CompactFormatter(arena).visit(ref)


def to_dict(arena: Arena, ref: NodeRef) -> dict:
    """JSON-ready nested dictionary form of a subtree."""
    return _DictBuilder(arena).visit(ref)
