import pytest

from evmachine.instruction import Instr, Instructions, Opcode
from evmachine.refs import FnRef, LocalId, ProgramCounter


def test_opcode_bytes_fixed_by_format():
    assert Opcode(255) is Opcode.END
    assert Opcode.PUSH == 4


def test_unknown_opcode_byte_is_rejected():
    with pytest.raises(ValueError):
        Opcode(17)


def test_instr_accepts_matching_operands():
    assert Instr(Opcode.CALL, FnRef(2)).operand == FnRef(2)
    assert Instr(Opcode.LOAD, LocalId(1)).operand == LocalId(1)
    assert Instr(Opcode.PUSH, 9).operand == 9


def test_instr_coerces_integer_opcode():
    assert Instr(0).opcode is Opcode.ADD


def test_push_without_operand_is_rejected():
    with pytest.raises(TypeError):
        Instr(Opcode.PUSH)


def test_jump_needs_program_counter():
    with pytest.raises(TypeError):
        Instr(Opcode.JUMP, 3)


def test_operand_on_plain_instruction_is_rejected():
    with pytest.raises(ValueError):
        Instr(Opcode.ADD, 3)


def test_push_operand_must_fit_u32():
    with pytest.raises(ValueError):
        Instr(Opcode.PUSH, 2**32)


def test_stream_yields_in_order_then_none():
    stream = [Instr(Opcode.PUSH, 1), Instr(Opcode.PUSH, 2), Instr(Opcode.ADD)]
    instrs = Instructions(stream)
    got = [instrs.next() for _ in stream]
    assert got == stream
    assert instrs.next() is None
    assert len(instrs) == len(stream)


def test_ip_counts_every_next_call():
    instrs = Instructions([Instr(Opcode.END)])
    calls = 3
    for _ in range(calls):
        instrs.next()
    assert instrs.ip() == ProgramCounter(calls)


def test_jump_is_relative_to_current_position():
    stream = [Instr(Opcode.PUSH, n) for n in range(6)]
    instrs = Instructions(stream)
    instrs.next()
    instrs.jump(ProgramCounter(2))
    assert instrs.next() == stream[3]


def test_jump_past_end_yields_none():
    instrs = Instructions([Instr(Opcode.ADD)])
    instrs.jump(ProgramCounter(5))
    assert instrs.next() is None