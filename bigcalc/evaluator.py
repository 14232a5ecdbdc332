# evaluator.py

"""
The evaluate operation: text in, integer out.

Each call lexes, compiles and runs the expression with its own constant
pool and value stack, so calls never share state.
"""

from typing import Optional

from .compiler import Program, parse
from .config import Settings
from .interpreter import Interpreter
from .lexer import tokenize


class Calculator:
    """Evaluates expressions using the capacities from Settings."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    def compile(self, text: str) -> Program:
        """Lex and compile ``text`` without running it."""
        return parse(tokenize(text), self.settings.pool_capacity)

    def evaluate(self, text: str) -> int:
        """
        Evaluate one expression.

        Args:
            text: The expression, e.g. ``"(1 + 2) * 3"``.

        Returns:
            The exact integer result.

        Raises:
            LexError, ParseError, InterpreterError: all subclasses of EvalError.
        """
        program = self.compile(text)
        return Interpreter(self.settings.stack_capacity).run(program.code, program.constants)


def evaluate(text: str, settings: Optional[Settings] = None) -> int:
    """Evaluate ``text`` with default (or the given) settings."""
    return Calculator(settings).evaluate(text)
