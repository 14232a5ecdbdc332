"""Arbitrary-precision integer calculator: lexer, compiler and stack interpreter."""

from .compiler import ConstantPool, Instruction, Opcode, Program, compile_source, disassemble, parse
from .errors import EvalError, InterpreterError, LexError, ParseError
from .evaluator import Calculator, evaluate
from .interpreter import Interpreter, interpret
from .lexer import Token, TokenList, TokenType, tokenize

__version__ = "1.0.0"

__all__ = [
    "Calculator",
    "ConstantPool",
    "EvalError",
    "Instruction",
    "Interpreter",
    "InterpreterError",
    "LexError",
    "Opcode",
    "ParseError",
    "Program",
    "Token",
    "TokenList",
    "TokenType",
    "compile_source",
    "disassemble",
    "evaluate",
    "interpret",
    "parse",
    "tokenize",
]
