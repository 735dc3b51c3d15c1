"""
Monkey error codes and the runtime exception.

Syntax errors are collected by the parser and runtime errors travel as
``Error`` objects; ``MonkeyError`` is only raised at the runtime facade and
when an internal invariant is broken.
"""

from typing import List, Optional


E_PARSE_ERROR = "E_PARSE_ERROR"
E_RUNTIME_ERROR = "E_RUNTIME_ERROR"
E_INVALID_BINDING = "E_INVALID_BINDING"
E_INVALID_NODE = "E_INVALID_NODE"
E_IO_ERROR = "E_IO_ERROR"


class MonkeyError(Exception):
    """Base exception for Monkey runtime errors"""
    def __init__(
        self,
        code: str,
        message: str,
        errors: Optional[List[str]] = None,
        positions: Optional[List[int]] = None,
    ):
        self.code = code
        self.message = message
        self.errors = list(errors) if errors else []
        self.positions = list(positions) if positions else []
        super().__init__(f"[{code}] {message}")


__all__ = [
    'MonkeyError',
    'E_PARSE_ERROR',
    'E_RUNTIME_ERROR',
    'E_INVALID_BINDING',
    'E_INVALID_NODE',
    'E_IO_ERROR',
]
