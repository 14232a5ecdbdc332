# compiler.py

"""
Recursive descent compiler from tokens to a flat stack-machine program.

Grammar:
    expr   : term   ((PLUS|MINUS) expr)?
    term   : factor ((STAR|SLASH|PERCENT) term)?
    factor : atom   (CARET factor)?
    atom   : INTEGER | LPAREN expr RPAREN

Every binary level recurses into itself for its right operand, so all
operators are right-associative: ``10 - 3 - 2`` is ``10 - (3 - 2)`` and
``8 / 4 / 2`` is ``8 / (4 / 2)``. Code is emitted in post-order, the right
operand's code first and then the operator.

Integer literals go into a ConstantPool and are referenced by index from
PUSH_INTEGER instructions.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .errors import ParseError
from .lexer import Token, TokenList, TokenType, tokenize

logger = logging.getLogger(__name__)

DEFAULT_POOL_CAPACITY = 128

# Literals longer than this are converted piecewise, so Python's int/str
# digit limit never applies to source text.
_LITERAL_CHUNK = 1000


# ---------------------------
# Instructions
# ---------------------------

class Opcode:
    """Enumeration of opcodes."""
    ADD = 'ADD'
    SUB = 'SUB'
    MUL = 'MUL'
    DIV = 'DIV'
    MOD = 'MOD'
    POW = 'POW'
    PUSH_INTEGER = 'PUSH_INTEGER'


BINARY_OPCODES = {
    TokenType.PLUS: Opcode.ADD,
    TokenType.MINUS: Opcode.SUB,
    TokenType.STAR: Opcode.MUL,
    TokenType.SLASH: Opcode.DIV,
    TokenType.PERCENT: Opcode.MOD,
    TokenType.CARET: Opcode.POW,
}

_ADD_OPS = (TokenType.PLUS, TokenType.MINUS)
_MUL_OPS = (TokenType.STAR, TokenType.SLASH, TokenType.PERCENT)


@dataclass(frozen=True)
class Instruction:
    """One step of a program. Only PUSH_INTEGER has an operand: a pool index."""
    opcode: str
    operand: Optional[int] = None

    def __repr__(self) -> str:
        if self.operand is None:
            return f"Instruction({self.opcode})"
        return f"Instruction({self.opcode}, {self.operand})"


class ConstantPool:
    """
    Integer literals of one program, indexed in the order they were added.

    The pool has a fixed capacity; adding past it is a compile error.
    """

    def __init__(self, capacity: int = DEFAULT_POOL_CAPACITY):
        self.capacity = capacity
        self._values: List[int] = []

    def add(self, value: int) -> int:
        """Store ``value`` and return its index."""
        if len(self._values) >= self.capacity:
            raise ParseError(f"Too many integer literals in expression (limit is {self.capacity})")
        self._values.append(value)
        return len(self._values) - 1

    def __getitem__(self, index: int) -> int:
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"ConstantPool({self._values!r}, capacity={self.capacity})"


@dataclass(frozen=True)
class Program:
    """Compiled code plus the constants it refers to. Unpacks as ``(code, constants)``."""
    code: Tuple[Instruction, ...]
    constants: ConstantPool

    def __iter__(self):
        return iter((self.code, self.constants))


def parse_decimal(digits: str) -> int:
    """Convert a string of decimal digits of any length to an int."""
    if len(digits) <= _LITERAL_CHUNK:
        return int(digits, 10)
    value = 0
    for start in range(0, len(digits), _LITERAL_CHUNK):
        chunk = digits[start:start + _LITERAL_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk, 10)
    return value


# ---------------------------
# Parser / code generator
# ---------------------------

class Compiler:
    """
    Parses a TokenList and emits instructions while it goes.

    A Compiler is single use: create one per TokenList.
    """

    def __init__(self, tokens: TokenList, pool_capacity: int = DEFAULT_POOL_CAPACITY):
        self.tokens = tokens
        self.pos = 0
        self.code: List[Instruction] = []
        self.constants = ConstantPool(pool_capacity)

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        # END is never consumed, so the cursor cannot run off the list.
        if token.type != TokenType.END:
            self.pos += 1
        return token

    def _describe(self, token: Token) -> str:
        if token.type == TokenType.END:
            return "end of expression"
        return f"{token.type} {self.tokens.lexeme(token)!r}"

    def _expect(self, type_: str) -> Token:
        token = self._peek()
        if token.type != type_:
            raise ParseError(f"Expected {type_}, got {self._describe(token)} at position {token.offset}")
        return self._advance()

    def _emit(self, opcode: str, operand: Optional[int] = None) -> None:
        self.code.append(Instruction(opcode, operand))

    def compile(self) -> Program:
        """
        Compile the whole token list.

        Raises:
            ParseError: on a grammar violation, on tokens left over after the
                expression, or when the expression has too many literals.
        """
        try:
            self.expr()
        except RecursionError:
            raise ParseError("Expression is nested too deeply") from None
        token = self._peek()
        if token.type != TokenType.END:
            raise ParseError(f"Junk at end of expression: {self._describe(token)} at position {token.offset}")
        return Program(tuple(self.code), self.constants)

    def expr(self) -> None:
        """expr : term ((PLUS|MINUS) expr)?"""
        self.term()
        if self._peek().type in _ADD_OPS:
            op = self._advance()
            self.expr()
            self._emit(BINARY_OPCODES[op.type])

    def term(self) -> None:
        """term : factor ((STAR|SLASH|PERCENT) term)?"""
        self.factor()
        if self._peek().type in _MUL_OPS:
            op = self._advance()
            self.term()
            self._emit(BINARY_OPCODES[op.type])

    def factor(self) -> None:
        """factor : atom (CARET factor)?"""
        self.atom()
        if self._peek().type == TokenType.CARET:
            self._advance()
            self.factor()
            self._emit(Opcode.POW)

    def atom(self) -> None:
        """atom : INTEGER | LPAREN expr RPAREN"""
        token = self._peek()
        if token.type == TokenType.INTEGER:
            self._advance()
            index = self.constants.add(parse_decimal(self.tokens.lexeme(token)))
            self._emit(Opcode.PUSH_INTEGER, index)
        elif token.type == TokenType.LPAREN:
            self._advance()
            self.expr()
            self._expect(TokenType.RPAREN)
        else:
            raise ParseError(f"Expected integer or '(', got {self._describe(token)} at position {token.offset}")


def parse(tokens: TokenList, pool_capacity: int = DEFAULT_POOL_CAPACITY) -> Program:
    """Compile ``tokens`` into a Program; see :class:`Compiler`."""
    program = Compiler(tokens, pool_capacity).compile()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"{len(tokens)} tokens read, {len(program.code)} instructions generated, "
                     f"{len(program.constants)}/{program.constants.capacity} constants used")
        logger.debug(f"Code: {disassemble(program)}")
    return program


def compile_source(text: str, pool_capacity: int = DEFAULT_POOL_CAPACITY) -> Program:
    """Lex and compile ``text`` in one step."""
    return parse(tokenize(text), pool_capacity)


def disassemble(program: Program) -> str:
    """Render a program as ``PUSH_INTEGER 3, PUSH_INTEGER 4, ADD``."""
    parts = []
    for instruction in program.code:
        if instruction.opcode == Opcode.PUSH_INTEGER:
            parts.append(f"{instruction.opcode} {program.constants[instruction.operand]}")
        else:
            parts.append(instruction.opcode)
    return ", ".join(parts)
