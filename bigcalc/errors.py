# errors.py

"""
Error classes for the expression pipeline.

Each stage raises its own kind so the shell (and the tests) can tell a bad
character apart from a grammar violation or an arithmetic domain error.
All of them abort the current evaluation only.
"""

from typing import Optional


class EvalError(Exception):
    """Base class for every error raised while evaluating an expression."""
    kind = "EvalError"


class LexError(EvalError):
    """Raised when the input contains a character the lexer does not know."""
    kind = "LexError"

    def __init__(self, character: str, line: int, message: Optional[str] = None):
        self.character = character
        self.line = line
        if message is None:
            message = f"Unexpected character {character!r} in expression at line {line}"
        super().__init__(message)


class ParseError(EvalError):
    """Raised for grammar violations: unexpected token, missing ')', trailing junk."""
    kind = "ParseError"


class InterpreterError(EvalError):
    """Raised when executing a compiled program fails."""
    kind = "InterpreterError"
