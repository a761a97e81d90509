"""Evaluator helper modules for the Monkey runtime."""

__all__ = [
    "control",
    "expr",
    "fn",
    "helpers",
    "literals",
]
