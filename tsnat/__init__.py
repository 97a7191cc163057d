"""Parser, AST and structural type system for a TypeScript-like language."""

__version__ = "0.1.0"