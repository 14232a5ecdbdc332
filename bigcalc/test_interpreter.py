# test_interpreter.py

import pytest

from bigcalc.compiler import ConstantPool, Instruction, Opcode, compile_source
from bigcalc.errors import InterpreterError
from bigcalc.interpreter import MAX_EXPONENT, Interpreter, interpret, run_program


def pool_of(*values):
    pool = ConstantPool()
    for value in values:
        pool.add(value)
    return pool


def push(index):
    return Instruction(Opcode.PUSH_INTEGER, index)


def run_binary(opcode, left, right):
    return interpret([push(0), push(1), Instruction(opcode)], pool_of(left, right))


# ---------------------------
# Arithmetic
# ---------------------------

@pytest.mark.parametrize("opcode,left,right,expected", [
    (Opcode.ADD, 2, 3, 5),
    (Opcode.SUB, 2, 3, -1),
    (Opcode.MUL, 6, 7, 42),
    (Opcode.DIV, 7, 2, 3),
    (Opcode.MOD, 7, 2, 1),
    (Opcode.POW, 3, 4, 81),
    (Opcode.POW, 5, 0, 1),
    (Opcode.POW, 0, 0, 1),
])
def test_binary_operations(opcode, left, right, expected):
    assert run_binary(opcode, left, right) == expected


def test_top_of_stack_is_the_right_operand():
    assert run_binary(Opcode.SUB, 10, 4) == 6
    assert run_binary(Opcode.DIV, 100, 5) == 20


@pytest.mark.parametrize("left,right,quotient,remainder", [
    (-7, 2, -4, 1),
    (7, -2, -4, -1),
    (-7, -2, 3, -1),
    (6, -3, -2, 0),
])
def test_division_floors_and_modulo_follows_divisor(left, right, quotient, remainder):
    assert run_binary(Opcode.DIV, left, right) == quotient
    assert run_binary(Opcode.MOD, left, right) == remainder
    assert quotient * right + remainder == left


def test_division_by_zero():
    with pytest.raises(InterpreterError) as e:
        run_binary(Opcode.DIV, 5, 0)
    assert "Division by zero" in str(e.value)


def test_modulo_by_zero():
    with pytest.raises(InterpreterError) as e:
        run_binary(Opcode.MOD, 5, 0)
    assert "Modulo by zero" in str(e.value)


def test_negative_exponent():
    with pytest.raises(InterpreterError) as e:
        run_binary(Opcode.POW, 2, -1)
    assert "Negative exponent" in str(e.value)


def test_exponent_larger_than_a_word():
    with pytest.raises(InterpreterError) as e:
        run_binary(Opcode.POW, 2, MAX_EXPONENT + 1)
    assert "64-bit" in str(e.value)


def test_exponent_with_unrepresentable_result():
    with pytest.raises(InterpreterError) as e:
        run_binary(Opcode.POW, 10, MAX_EXPONENT)
    assert "too large" in str(e.value)


def test_exponent_guard_bounds_non_power_of_two_bases():
    with pytest.raises(InterpreterError) as e:
        run_binary(Opcode.POW, 3, 2 ** 32)
    assert "too large" in str(e.value)


@pytest.mark.parametrize("base,expected", [(1, 1), (0, 0), (-1, -1)])
def test_trivial_bases_accept_huge_exponents(base, expected):
    assert run_binary(Opcode.POW, base, MAX_EXPONENT) == expected


def test_arbitrary_precision():
    big = 2 ** 200
    assert run_binary(Opcode.MUL, big, big) == 2 ** 400
    assert run_binary(Opcode.ADD, 99999999999999999999999999, 1) == 100000000000000000000000000


# ---------------------------
# Malformed programs
# ---------------------------

def test_unknown_opcode():
    with pytest.raises(InterpreterError) as e:
        interpret([push(0), Instruction('NOPE')], pool_of(1))
    assert "Unknown opcode 'NOPE'" in str(e.value)


def test_empty_program_leaves_no_result():
    with pytest.raises(InterpreterError) as e:
        interpret([], pool_of())
    assert "0 values left" in str(e.value)


def test_extra_values_leave_no_result():
    with pytest.raises(InterpreterError) as e:
        interpret([push(0), push(1)], pool_of(1, 2))
    assert "2 values left" in str(e.value)


def test_stack_underflow():
    with pytest.raises(InterpreterError) as e:
        interpret([push(0), Instruction(Opcode.ADD)], pool_of(1))
    assert "underflow" in str(e.value)


@pytest.mark.parametrize("operand", [None, 1, -1])
def test_bad_constant_index(operand):
    with pytest.raises(InterpreterError) as e:
        interpret([Instruction(Opcode.PUSH_INTEGER, operand)], pool_of(5))
    assert "Invalid constant index" in str(e.value)


def test_stack_capacity_is_enforced():
    program = compile_source("1 + 1 + 1 + 1")  # right-associative: four values pushed before any ADD
    assert run_program(program, stack_capacity=4) == 4
    with pytest.raises(InterpreterError) as e:
        run_program(program, stack_capacity=3)
    assert "Stack overflow" in str(e.value)


def test_constants_are_not_modified_by_execution():
    pool = pool_of(5, 6)
    code = [push(0), push(1), Instruction(Opcode.MUL)]
    interpreter = Interpreter()
    assert interpreter.run(code, pool) == 30
    assert interpreter.run(code, pool) == 30
    assert list(pool) == [5, 6]
