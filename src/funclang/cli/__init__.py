"""
Funclang Command-Line Interface
===============================

This package provides the command-line tools of Funclang:

- **funcc**: front end driver (tokens, AST dump)

Each tool is implemented as a Click-based CLI application.
"""

__all__ = ["funcc"]
