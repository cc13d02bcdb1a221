"""The stack machine that runs decoded bytecode."""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from .bytecode import BytecodeCompiler
from .call_stack import CallStack, Frame
from .errors import MissingFn, VmRuntimeError
from .instruction import Instr, Opcode
from .objects import Number, Value
from .refs import U32_MAX, FnRef
from .stack import Stack

MAX_STACK_SIZE = 64

logger = logging.getLogger(__name__)


@dataclass
class VmFlags:
    """Comparison flags; each is cleared when a jump consumes it."""

    equal: bool = False
    greater: bool = False
    lesser: bool = False

    def consume_eq(self) -> bool:
        """Return and clear the equal flag."""
        old, self.equal = self.equal, False
        return old

    def consume_le(self) -> bool:
        """Return and clear the lesser flag."""
        old, self.lesser = self.lesser, False
        return old

    def consume_gr(self) -> bool:
        """Return and clear the greater flag."""
        old, self.greater = self.greater, False
        return old


class Variable:
    """A global variable holding raw bytes of a fixed size."""

    def __init__(self, content: bytes) -> None:
        self.content = bytearray(content)

    @property
    def var_size(self) -> int:
        """Size of the variable in bytes."""
        return len(self.content)

    @classmethod
    def test_variable(cls) -> "Variable":
        """A four-byte variable with every bit set."""
        return cls(bytes([255, 255, 255, 255]))

    def write_to(self, data: bytes) -> None:
        """Overwrite the content; ``data`` must have the variable's size."""
        if len(data) != len(self.content):
            raise ValueError(
                f"variable holds {len(self.content)} bytes, got {len(data)}"
            )
        self.content[:] = data


class Variables:
    """Global variables keyed by index."""

    def __init__(self, extra: Optional[Iterable[Variable]] = None) -> None:
        self._map: Dict[int, Variable] = dict(enumerate(extra or ()))

    def push(self, id: int, var: Variable) -> None:
        """Set the variable under ``id``."""
        self._map[id] = var

    def is_here(self, id: int) -> bool:
        """Whether a variable exists under ``id``."""
        return id in self._map

    def get(self, id: int) -> Variable:
        """Return the variable under ``id``, raising VariableNotFound."""
        from .errors import VariableNotFound

        try:
            return self._map[id]
        except KeyError:
            raise VariableNotFound(id) from None

    def __len__(self) -> int:
        return len(self._map)


class Vm:
    """Executes a bytecode program, starting at its main function."""

    def __init__(self, code: bytes) -> None:
        objects, instructions, functions = BytecodeCompiler(code).read_evm_bytecode()
        self.stack: Stack[Value] = Stack(MAX_STACK_SIZE)
        self.instructions = instructions
        self.flags = VmFlags()
        self.variables = Variables([Variable.test_variable()])
        self.functions = functions
        self.call_stack = CallStack()
        self.objects = objects

        self._call(FnRef.MAIN_FN)

    def _current_frame(self) -> Frame:
        frame = self.call_stack.current_frame()
        if frame is None:
            raise RuntimeError("no call frame; the main function frame is missing")
        return frame

    def debug_report(self, opcode: Optional[Instr], show_stack: bool) -> str:
        """Describe the machine state after ``opcode``."""
        flags = self.flags
        lines = [
            f"[vm] (instruction: {opcode!r}) | stack ptr: {self.stack.stack_pointer()}"
            f" | instr ptr: {self.instructions.ip().value}"
            f" | stack left: {self.stack.free()} |",
            f"[vm] flags: eq: {str(flags.equal).lower()}, "
            f"gt: {str(flags.greater).lower()}, le: {str(flags.lesser).lower()}",
            f"call stack: {len(self.call_stack)} frame(s)",
        ]
        if show_stack:
            slots = "".join(f"{value!r:>6}\n" for value in self.stack.buffer())
            lines.append(f"stack after instruction: [\n{slots}]\n")
        return "\n".join(lines)

    def interpret_one(self) -> bool:
        """Execute one instruction; return whether execution should go on."""
        op = self.instructions.next()
        if op is None:
            return False

        keep_going = True
        operand = op.operand
        match op.opcode:
            case Opcode.ADD:
                self._math(lambda x, y: x + y)
            case Opcode.SUB:
                self._math(lambda x, y: x - y)
            case Opcode.MUL:
                self._math(lambda x, y: x * y)
            case Opcode.DIV:
                self._math(lambda x, y: x // y)
            case Opcode.PUSH:
                self.stack.push(Number(operand))
            case Opcode.CMP_VAL:
                self._compare()
            case Opcode.CMP_OBJ:
                raise VmRuntimeError("object comparison is not supported")
            case Opcode.JUMP:
                self.instructions.jump(operand)
            case Opcode.JUMP_IF_EQ:
                if self.flags.consume_eq():
                    self.instructions.jump(operand)
            case Opcode.JUMP_IF_GR:
                if self.flags.consume_gr():
                    self.instructions.jump(operand)
            case Opcode.JUMP_IF_LE:
                if self.flags.consume_le():
                    self.instructions.jump(operand)
            case Opcode.CALL:
                self._call(operand)
            case Opcode.RETURN:
                self.instructions.jump(self._current_frame().return_address())
            case Opcode.LOAD:
                value = self._current_frame().load_local(operand, self.stack)
                self.stack.push(value)
            case Opcode.STORE:
                new_value = self.stack.pop()
                self._current_frame().store_local(operand, self.stack, new_value)
            case Opcode.ALLOC_LOCAL:
                self._current_frame().allocate_local(self.stack)
            case Opcode.DUP:
                self.stack.duplicate()
            case Opcode.END:
                keep_going = False

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s", self.debug_report(op, True))
        return keep_going

    def interpret_all(self) -> None:
        """Run until an END instruction or the end of the stream."""
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s", self.debug_report(None, False))
        while self.interpret_one():
            pass

    def _pop_numbers(self) -> tuple:
        lhs = self.stack.pop()
        rhs = self.stack.pop()
        if not (isinstance(lhs, Number) and isinstance(rhs, Number)):
            raise TypeError("operation needs two numbers on the stack")
        return lhs.value, rhs.value

    def _math(self, op: Callable[[int, int], int]) -> None:
        lhs, rhs = self._pop_numbers()
        self.stack.push(Number(op(lhs, rhs) & U32_MAX))

    def _compare(self) -> None:
        lhs, rhs = self._pop_numbers()
        if rhs < lhs:
            self.flags.lesser = True
        elif rhs > lhs:
            self.flags.greater = True
        else:
            self.flags.equal = True

    def _call(self, fn_ref: FnRef) -> None:
        function = self.functions.get(fn_ref)
        if function is None:
            raise MissingFn(fn_ref.value)
        self.call_stack.new_frame(fn_ref, self.instructions.ip())
        self.instructions.jump(function.jump_ip)