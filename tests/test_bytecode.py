import pytest

from evmachine.bytecode import BytecodeCompiler
from evmachine.errors import (
    FnParseError,
    InvalidBytecode,
    InvalidInstruction,
    MissingOperand,
)
from evmachine.instruction import Instr, Opcode
from evmachine.refs import FnRef, LocalId, ProgramCounter

HEADER = b"evm :3"
DECL = bytes([1, 1])
END_MARKER = bytes([255, 254, 255, 254])


def declaration(body: bytes, arity: bytes = bytes([1, 0])) -> bytes:
    return HEADER + DECL + b"main\0" + bytes(8) + arity + body + END_MARKER


def op(code: Opcode, operand: int) -> bytes:
    return bytes([code]) + operand.to_bytes(4, "little")


def drain(instructions):
    return list(iter(instructions.next, None))


def test_fn_decl():
    bytecode = bytearray()
    bytecode.extend(b"evm :3")
    bytecode.extend([1, 1])
    bytecode.extend(b"main\0")
    bytecode.extend([0, 0, 0, 0, 0, 0, 0, 0])
    bytecode.extend([1, 0])
    bytecode.extend([255])
    bytecode.extend([255, 254, 255, 254])

    _objs, instrs, fns = BytecodeCompiler(bytes(bytecode)).read_evm_bytecode()

    fndef = fns.get(FnRef(0))
    assert fndef.name == "main"
    assert fndef.arity == 1
    assert fndef.jump_ip == ProgramCounter(23)
    assert drain(instrs) == [Instr(Opcode.END)]


def test_operands_are_decoded():
    body = (
        op(Opcode.PUSH, 7)
        + op(Opcode.JUMP, 2)
        + op(Opcode.CALL, 0)
        + op(Opcode.LOAD, 3)
        + op(Opcode.STORE, 3)
        + bytes([Opcode.DUP, Opcode.END])
    )
    _, instrs, _ = BytecodeCompiler(declaration(body)).read_evm_bytecode()
    assert drain(instrs) == [
        Instr(Opcode.PUSH, 7),
        Instr(Opcode.JUMP, ProgramCounter(2)),
        Instr(Opcode.CALL, FnRef(0)),
        Instr(Opcode.LOAD, LocalId(3)),
        Instr(Opcode.STORE, LocalId(3)),
        Instr(Opcode.DUP),
        Instr(Opcode.END),
    ]


def test_only_one_function_declared():
    _, _, fns = BytecodeCompiler(declaration(bytes([255]))).read_evm_bytecode()
    assert len(fns) == 1
    assert fns.get(FnRef(1)) is None


@pytest.mark.parametrize("data", [b"", b"evm", b"evm :2", b"xvm :3\x01\x01"])
def test_invalid_header(data):
    with pytest.raises(InvalidBytecode):
        BytecodeCompiler(data).read_evm_bytecode()


def test_header_only_yields_nothing():
    objs, instrs, fns = BytecodeCompiler(HEADER + b"\x01").read_evm_bytecode()
    assert len(fns) == 0
    assert len(instrs) == 0
    assert len(objs) == 0


def test_unknown_section():
    with pytest.raises(InvalidBytecode):
        BytecodeCompiler(HEADER + b"\x02\x02main\0").read_evm_bytecode()


def test_invalid_utf8_name():
    data = HEADER + DECL + b"\xc3\x28\0" + bytes(10)
    with pytest.raises(FnParseError) as info:
        BytecodeCompiler(data).read_evm_bytecode()
    assert info.value.reason == "invalid utf-8 in function name"


def test_truncated_index():
    data = HEADER + DECL + b"main\0" + bytes(3)
    with pytest.raises(FnParseError) as info:
        BytecodeCompiler(data).read_evm_bytecode()
    assert info.value.reason == "invalid index (lacking bytes)"


def test_truncated_arity():
    data = HEADER + DECL + b"main\0" + bytes(8)
    with pytest.raises(FnParseError) as info:
        BytecodeCompiler(data).read_evm_bytecode()
    assert info.value.reason == "invalid arity (lacking bytes)"


def test_end_byte_without_enough_trailing_bytes():
    data = HEADER + DECL + b"main\0" + bytes(8) + bytes([1, 0]) + bytes([0, 255, 254])
    with pytest.raises(FnParseError) as info:
        BytecodeCompiler(data).read_evm_bytecode()
    assert info.value.reason == "end of function, with not enough ending bytes"


def test_missing_end_marker():
    data = HEADER + DECL + b"main\0" + bytes(8) + bytes([1, 0]) + bytes([0, 0, 13])
    with pytest.raises(FnParseError) as info:
        BytecodeCompiler(data).read_evm_bytecode()
    assert info.value.reason == "missing end of function marker"


def test_invalid_instruction():
    with pytest.raises(InvalidInstruction) as info:
        BytecodeCompiler(declaration(bytes([200, 255]))).read_evm_bytecode()
    assert info.value.instr == 200
    assert info.value.offset == 23


def test_missing_operand():
    with pytest.raises(MissingOperand) as info:
        BytecodeCompiler(declaration(bytes([Opcode.PUSH, 1]))).read_evm_bytecode()
    assert info.value.instr == 4


def test_arity_little_endian():
    _, _, fns = BytecodeCompiler(
        declaration(bytes([255]), arity=bytes([3, 0]))
    ).read_evm_bytecode()
    assert fns.get(FnRef(0)).arity == 3


def test_reading_twice_gives_same_result():
    compiler = BytecodeCompiler(declaration(op(Opcode.PUSH, 9) + bytes([255])))
    first = compiler.read_evm_bytecode()
    second = compiler.read_evm_bytecode()
    assert drain(first[1]) == drain(second[1])
    assert first[2].get(FnRef(0)) == second[2].get(FnRef(0))