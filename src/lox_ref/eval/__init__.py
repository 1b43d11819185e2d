"""Evaluator helper modules for the Lox runtime."""

__all__ = [
    "expr",
]
