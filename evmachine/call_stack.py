"""Call frames, their local variables and the call stack."""

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import LocalVariableMissing, MissingFn, TooMuchLocalVariables
from .objects import Functions, Value
from .refs import FnRef, LocalId, ProgramCounter
from .stack import Stack

MAX_LOCAL_VARIABLES = 512
# eight bytes per machine value, times 256
MAX_CALL_STACK_DEPTH = 8 * 256


@dataclass(frozen=True)
class LocalVariable:
    """A local variable, identified by its slot on the value stack."""

    address: int

    def load(self, stack: Stack) -> Value:
        """Read the variable's stack slot."""
        slots = stack.buffer()
        if self.address >= len(slots):
            raise LocalVariableMissing(self.address)
        return slots[self.address]

    def store(self, stack: Stack, value: Value) -> None:
        """Overwrite the variable's stack slot."""
        try:
            stack.set(self.address, value)
        except IndexError:
            raise LocalVariableMissing(self.address) from None


@dataclass
class LocalVars:
    """The local variables allocated in one frame."""

    _locals: List[LocalVariable] = field(default_factory=list)

    def push(self, local: LocalVariable) -> None:
        """Add a local, raising TooMuchLocalVariables when the frame is full."""
        if len(self._locals) == MAX_LOCAL_VARIABLES - 1:
            raise TooMuchLocalVariables()
        self._locals.append(local)

    def get(self, idx: LocalId) -> Optional[LocalVariable]:
        """Return the local with id ``idx``, or None."""
        if idx.value < len(self._locals):
            return self._locals[idx.value]
        return None

    def __len__(self) -> int:
        return len(self._locals)


@dataclass
class Frame:
    """One function activation."""

    function: FnRef
    previous_ip: ProgramCounter
    locals: LocalVars = field(default_factory=LocalVars)

    def allocate_local(self, stack: Stack) -> LocalVariable:
        """Allocate a local at the current stack pointer."""
        local = LocalVariable(stack.stack_pointer())
        self.locals.push(local)
        return local

    def _local(self, id: LocalId) -> LocalVariable:
        local = self.locals.get(id)
        if local is None:
            raise LocalVariableMissing(id.value)
        return local

    def load_local(self, id: LocalId, stack: Stack) -> Value:
        """Read a local variable."""
        return self._local(id).load(stack)

    def store_local(self, id: LocalId, stack: Stack, value: Value) -> None:
        """Write a local variable."""
        self._local(id).store(stack, value)

    def name(self, functions: Functions) -> str:
        """Name of the function that opened this frame."""
        func = functions.get(self.function)
        if func is None:
            raise MissingFn(self.function.value)
        return func.name

    def return_address(self) -> ProgramCounter:
        """Instruction after the call that opened this frame."""
        return self.previous_ip.advanced()


class CallStack:
    """Stack of active frames."""

    def __init__(self) -> None:
        self._frames: Stack[Frame] = Stack(MAX_CALL_STACK_DEPTH)

    def current_frame(self) -> Optional[Frame]:
        """The innermost frame, or None when nothing is running."""
        frames = self._frames.buffer()
        return frames[-1] if frames else None

    def new_frame(self, fnref: FnRef, ip: ProgramCounter) -> Frame:
        """Open a frame for ``fnref`` called from ``ip``."""
        frame = Frame(fnref, ip)
        self._frames.push(frame)
        return frame

    def __len__(self) -> int:
        return self._frames.stack_pointer()