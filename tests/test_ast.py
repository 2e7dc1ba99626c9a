"""
Funclang AST and Arena Tests
============================

Tests for node allocation, handle validation, arena lifetime and the
tree walkers (visitor, printer, compact and dictionary forms).
"""

from dataclasses import FrozenInstanceError

import pytest
from funclang.frontend.ast import (
    Arena,
    ASTPrinter,
    ASTVisitor,
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
from funclang.frontend.errors import ArenaReleasedError, InvalidNodeRefError
from funclang.frontend.parser import parse_source


# =============================================================================
# Arena Tests
# =============================================================================

class TestArena:
    """Tests for node storage and handles."""

    def test_alloc_and_lookup(self, arena):
        """Allocated nodes are returned unchanged by their handle."""
        ref = Integer.new(arena, value=7)
        assert isinstance(ref, NodeRef)
        assert ref.index == 0
        assert arena[ref] == Integer(7)
        assert len(arena) == 1

    def test_handles_are_sequential(self, arena):
        """Handles index nodes in allocation order."""
        a = Integer.new(arena, value=1)
        b = Integer.new(arena, value=2)
        assert (a.index, b.index) == (0, 1)
        assert [n.value for n in arena] == [1, 2]

    def test_foreign_handle_rejected(self):
        """A handle from another arena is not valid here."""
        with Arena() as first, Arena() as second:
            ref = Integer.new(first, value=1)
            Integer.new(second, value=2)
            with pytest.raises(InvalidNodeRefError):
                second[ref]

    def test_out_of_range_handle_rejected(self, arena):
        """A handle past the end of the arena is rejected."""
        with pytest.raises(InvalidNodeRefError):
            arena[NodeRef(3, arena.id)]

    def test_non_handle_rejected(self, arena):
        """Only NodeRef values can index an arena."""
        Integer.new(arena, value=1)
        with pytest.raises(InvalidNodeRefError):
            arena[0]

    def test_release(self):
        """Released arenas refuse every access."""
        arena = Arena()
        ref = Integer.new(arena, value=1)
        arena.release()
        assert arena.released
        with pytest.raises(ArenaReleasedError):
            arena[ref]
        with pytest.raises(ArenaReleasedError):
            Integer.new(arena, value=2)

    def test_release_twice(self):
        """Releasing twice is harmless."""
        arena = Arena()
        arena.release()
        arena.release()
        assert arena.released

    def test_context_manager_releases(self):
        """Leaving a with block releases the arena."""
        with Arena() as arena:
            Integer.new(arena, value=1)
        assert arena.released

    def test_rollback(self, arena):
        """rollback() discards nodes allocated after the mark."""
        Integer.new(arena, value=1)
        mark = arena.mark()
        Integer.new(arena, value=2)
        Integer.new(arena, value=3)
        arena.rollback(mark)
        assert len(arena) == 1

    def test_rollback_bad_mark(self, arena):
        """A mark beyond the current size is rejected."""
        with pytest.raises(ValueError):
            arena.rollback(5)


# =============================================================================
# Node Tests
# =============================================================================

class TestNodes:
    """Tests for the node types."""

    def test_nodes_are_immutable(self):
        """Nodes cannot be changed once built."""
        node = Integer(1)
        with pytest.raises(FrozenInstanceError):
            node.value = 2

    def test_children(self, arena):
        """children() lists handles in source order."""
        one = Integer.new(arena, value=1)
        two = Integer.new(arena, value=2)
        block = Block(statements=(one, two))
        assert block.children() == (one, two)
        assert Integer(5).children() == ()

    def test_empty_block_default(self):
        """A Block built without statements is empty."""
        assert Block().statements == ()

    def test_each_node_has_one_parent(self):
        """No handle appears twice among the children of a parsed tree."""
        tree = parse_source("func f() void { a(1); { b(c(2)); } return 3; }")
        seen = []
        for node in tree.arena:
            seen.extend(node.children())
        assert len(seen) == len(set(seen))
        # Every node except the root is somebody's child
        assert len(seen) == len(tree.arena) - 1
        assert tree.root not in seen


# =============================================================================
# Tree Walker Tests
# =============================================================================

class CallCollector(ASTVisitor):
    def __init__(self, arena):
        super().__init__(arena)
        self.names = []

    def visit_FuncCall(self, node):
        self.names.append(node.name)
        self.generic_visit(node)


class TestWalkers:
    """Tests for the visitor and the output forms."""

    SOURCE = "func main() void { print(1); return 0; }"

    def test_visitor_dispatch(self):
        """Visitor methods are called by node type, generic_visit recurses."""
        tree = parse_source("func f() void { a(b(1)); { c(2); } return d(3); }")
        collector = CallCollector(tree.arena)
        collector.visit(tree.root)
        assert collector.names == ["a", "b", "c", "d"]

    def test_printer(self):
        """ASTPrinter renders an indented tree."""
        tree = parse_source(self.SOURCE)
        assert ASTPrinter(tree.arena).print(tree.root) == "\n".join([
            "Program",
            "  Function: main",
            "    Block",
            "      Call: print(1)",
            "      Return 0",
        ])

    def test_printer_nested_call_and_integer(self):
        """Nested calls print inline; bare integers get their own label."""
        tree = parse_source("func f() void { { 4; } return g(h(5)); }")
        assert tree.pretty() == "\n".join([
            "Program",
            "  Function: f",
            "    Block",
            "      Block",
            "        Integer: 4",
            "      Return g(h(5))",
        ])

    def test_format_tree_subtree(self, arena):
        """format_tree works on any subtree."""
        arg = Integer.new(arena, value=2)
        call = FuncCall.new(arena, name="f", argument=arg)
        assert format_tree(arena, call) == 'FuncCall("f", Integer(2))'

    def test_to_dict(self):
        """to_dict expands handles into nested dictionaries."""
        tree = parse_source(self.SOURCE)
        assert to_dict(tree.arena, tree.root) == {
            "type": "Program",
            "declaration": {
                "type": "FuncDecl",
                "name": "main",
                "body": {
                    "type": "Block",
                    "statements": [
                        {
                            "type": "FuncCall",
                            "name": "print",
                            "argument": {"type": "Integer", "value": 1},
                        },
                        {
                            "type": "Return",
                            "value": {"type": "Integer", "value": 0},
                        },
                    ],
                },
            },
        }

    def test_hand_built_tree(self, arena):
        """Trees built by hand format like parsed ones."""
        zero = Integer.new(arena, value=0)
        ret = Return.new(arena, value=zero)
        body = Block.new(arena, statements=(ret,))
        func = FuncDecl.new(arena, name="main", body=body)
        root = Program.new(arena, declaration=func)
        assert format_tree(arena, root) == (
            parse_source("func main() void { return 0; }").format()
        )


# =============================================================================
# SyntaxTree Tests
# =============================================================================

class TestSyntaxTree:
    """Tests for the parse result wrapper."""

    def test_accessors(self):
        tree = parse_source("func main() void { return 0; }")
        assert isinstance(tree.program, Program)
        assert tree.function.name == "main"
        assert tree[tree.function.body] == tree.arena[tree.function.body]

    def test_release(self):
        tree = parse_source("func main() void { return 0; }")
        tree.release()
        with pytest.raises(ArenaReleasedError):
            tree.program
