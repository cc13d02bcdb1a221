"""Errors raised by the virtual machine and the bytecode reader."""

LOCAL_VARS_PER_FRAME = 255


class VmRuntimeError(Exception):
    """Base class of every error the machine raises."""


class StackTooLow(VmRuntimeError):
    """The stack held too few values for an operation."""

    def __init__(self) -> None:
        super().__init__("the stack wasn't occupied enough to execute this operation")


class StackOverflow(VmRuntimeError):
    """A stack ran out of room."""

    def __init__(self) -> None:
        super().__init__("the machine overflowed it's stack")


class VariableNotFound(VmRuntimeError):
    """A global variable index was not defined."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"global variable at index: @{index} was not found")


class TooMuchLocalVariables(VmRuntimeError):
    """A frame cannot hold another local variable."""

    def __init__(self) -> None:
        super().__init__(
            f"the amount of local variables exceeded {LOCAL_VARS_PER_FRAME}"
        )


class LocalVariableMissing(VmRuntimeError):
    """A local variable was accessed that does not exist."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(
            f"attempted to access a local variable at index: #{index} which was not found"
        )


class MissingFn(VmRuntimeError):
    """A function reference does not name a known function."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"this executable has no main function (at index {index})")


class BytecodeError(VmRuntimeError):
    """Base class of errors found while reading bytecode."""


class InvalidBytecode(BytecodeError):
    """The input is not an evm bytecode file."""

    def __init__(self) -> None:
        super().__init__("something went wrong")


class FnParseError(BytecodeError):
    """A function declaration could not be parsed."""

    def __init__(self, reason: str, offset: int) -> None:
        self.reason = reason
        self.offset = offset
        super().__init__(
            f"error during parsing function\nreason: {reason}\nat offset {offset} in file"
        )


class InvalidInstruction(BytecodeError):
    """An unknown opcode byte was found."""

    def __init__(self, offset: int, instr: int) -> None:
        self.offset = offset
        self.instr = instr
        super().__init__(
            f"invalid instruction encountered ({instr}) at offset {offset} in data"
        )


class MissingOperand(BytecodeError):
    """An instruction lacks the bytes of its operand."""

    def __init__(self, offset: int, instr: int) -> None:
        self.offset = offset
        self.instr = instr
        super().__init__(
            "missing operands for instruction encountered at "
            f"({offset}) for instruction {instr}"
        )