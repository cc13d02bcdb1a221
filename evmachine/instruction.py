"""Instruction set and the instruction stream."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Union

from .refs import FnRef, LocalId, ProgramCounter, check_u32


class Opcode(IntEnum):
    """Instruction opcodes, valued by their byte in bytecode."""

    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3
    PUSH = 4
    CMP_VAL = 5
    CMP_OBJ = 6
    JUMP = 7
    JUMP_IF_GR = 8
    JUMP_IF_EQ = 9
    JUMP_IF_LE = 10
    CALL = 11
    RETURN = 12
    DUP = 13
    LOAD = 14
    STORE = 15
    ALLOC_LOCAL = 16
    END = 255

    @property
    def operand_type(self) -> Optional[type]:
        """Type of the operand this opcode carries, or None."""
        return _OPERAND_TYPES.get(self)


_OPERAND_TYPES = {
    Opcode.PUSH: int,
    Opcode.JUMP: ProgramCounter,
    Opcode.JUMP_IF_GR: ProgramCounter,
    Opcode.JUMP_IF_EQ: ProgramCounter,
    Opcode.JUMP_IF_LE: ProgramCounter,
    Opcode.CALL: FnRef,
    Opcode.LOAD: LocalId,
    Opcode.STORE: LocalId,
}

Operand = Union[int, ProgramCounter, FnRef, LocalId]


@dataclass(frozen=True)
class Instr:
    """A decoded instruction with its operand, if it takes one."""

    opcode: Opcode
    operand: Optional[Operand] = None

    def __post_init__(self) -> None:
        opcode = Opcode(self.opcode)
        object.__setattr__(self, "opcode", opcode)
        expected = opcode.operand_type
        if expected is None:
            if self.operand is not None:
                raise ValueError(f"{opcode.name} takes no operand")
            return
        if isinstance(self.operand, bool) or not isinstance(self.operand, expected):
            raise TypeError(
                f"{opcode.name} needs an operand of type {expected.__name__}"
            )
        if expected is int:
            check_u32(self.operand, "push operand")


class Instructions:
    """A stream of instructions with an instruction pointer."""

    def __init__(self, stream: Iterable[Instr] = ()) -> None:
        self._stream: List[Instr] = list(stream)
        self._ptr = 0

    def next(self) -> Optional[Instr]:
        """Return the instruction under the pointer and advance; None past the end."""
        instr = self._stream[self._ptr] if self._ptr < len(self._stream) else None
        self._ptr += 1
        return instr

    def jump(self, new_ip: ProgramCounter) -> None:
        """Move the pointer forward by ``new_ip`` instructions."""
        self._ptr += new_ip.value

    def ip(self) -> ProgramCounter:
        """Current instruction pointer."""
        return ProgramCounter(self._ptr)

    def __len__(self) -> int:
        return len(self._stream)