# interpreter.py

"""
Stack machine that runs compiled programs on Python ints.

Arithmetic conventions:
    DIV  floor division (rounds toward negative infinity), like ``//``.
    MOD  remainder with the sign of the divisor, like ``%``, so that
         ``a == (a / b) * b + a % b`` holds for every non-zero ``b``.
    POW  the exponent must be in the range 0 .. 2**64 - 1.

Division or modulo by zero and out-of-range exponents are reported as
InterpreterError. Each run uses its own value stack.
"""

import logging
from typing import Callable, Dict, List, Sequence

from .compiler import ConstantPool, Instruction, Opcode, Program
from .errors import InterpreterError

logger = logging.getLogger(__name__)

# Peak stack depth never exceeds a program's literal count, so this matches
# the constant pool capacity.
DEFAULT_STACK_CAPACITY = 128

MAX_EXPONENT = 2 ** 64 - 1

# Powers whose result would need more bits than this are refused up front
# instead of exhausting memory.
MAX_RESULT_BITS = 2 ** 32


# ---------------------------
# Arithmetic
# ---------------------------

def _add(left: int, right: int) -> int:
    return left + right


def _sub(left: int, right: int) -> int:
    return left - right


def _mul(left: int, right: int) -> int:
    return left * right


def _div(left: int, right: int) -> int:
    if right == 0:
        raise InterpreterError("Division by zero")
    return left // right


def _mod(left: int, right: int) -> int:
    if right == 0:
        raise InterpreterError("Modulo by zero")
    return left % right


def _pow(left: int, right: int) -> int:
    if right < 0:
        raise InterpreterError(f"Negative exponent {right} is not supported")
    if right > MAX_EXPONENT:
        raise InterpreterError("Exponent does not fit in an unsigned 64-bit word")
    if abs(left) > 1 and abs(left).bit_length() * right > MAX_RESULT_BITS:
        raise InterpreterError("Result of exponentiation is too large")
    try:
        return left ** right
    except (MemoryError, OverflowError):
        raise InterpreterError("Result of exponentiation is too large") from None


BINARY_OPERATIONS: Dict[str, Callable[[int, int], int]] = {
    Opcode.ADD: _add,
    Opcode.SUB: _sub,
    Opcode.MUL: _mul,
    Opcode.DIV: _div,
    Opcode.MOD: _mod,
    Opcode.POW: _pow,
}


# ---------------------------
# Interpreter
# ---------------------------

class Interpreter:
    """Executes instruction sequences against a bounded value stack."""

    def __init__(self, stack_capacity: int = DEFAULT_STACK_CAPACITY):
        self.stack_capacity = stack_capacity

    def _push(self, stack: List[int], value: int) -> None:
        if len(stack) >= self.stack_capacity:
            raise InterpreterError(f"Stack overflow (limit is {self.stack_capacity} values)")
        stack.append(value)

    def run(self, code: Sequence[Instruction], constants: ConstantPool) -> int:
        """
        Execute ``code`` and return the single value left on the stack.

        Raises:
            InterpreterError: on an unknown opcode, a bad constant index,
                stack overflow or underflow, an arithmetic domain error, or
                when the program does not leave exactly one value behind.
        """
        stack: List[int] = []
        for pc, instruction in enumerate(code):
            opcode = instruction.opcode
            if opcode == Opcode.PUSH_INTEGER:
                index = instruction.operand
                if index is None or not 0 <= index < len(constants):
                    raise InterpreterError(f"Invalid constant index {index!r} at instruction {pc}")
                # ints are immutable, so pushing the pool's value is pushing a copy.
                self._push(stack, constants[index])
            elif opcode in BINARY_OPERATIONS:
                if len(stack) < 2:
                    raise InterpreterError(f"Stack underflow at instruction {pc} ({opcode})")
                right = stack.pop()
                left = stack.pop()
                stack.append(BINARY_OPERATIONS[opcode](left, right))
            else:
                raise InterpreterError(f"Unknown opcode {opcode!r} at instruction {pc}")

        if len(stack) != 1:
            raise InterpreterError(f"Malformed program: {len(stack)} values left on the stack, expected 1")
        result = stack.pop()
        logger.debug(f"Executed {len(code)} instructions, result has {result.bit_length()} bits")
        return result


def interpret(code: Sequence[Instruction], constants: ConstantPool,
              stack_capacity: int = DEFAULT_STACK_CAPACITY) -> int:
    """Run ``code`` with a fresh Interpreter; see :meth:`Interpreter.run`."""
    return Interpreter(stack_capacity).run(code, constants)


def run_program(program: Program, stack_capacity: int = DEFAULT_STACK_CAPACITY) -> int:
    """Run a compiled Program."""
    return interpret(program.code, program.constants, stack_capacity)
