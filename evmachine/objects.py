"""Runtime values, the function table and the object store."""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Union

from .refs import FnRef, ProgramCounter, check_u32

U16_MAX = 0xFFFF


@dataclass(frozen=True)
class ObjRef:
    """Index of an allocated object."""

    index: int

    def __post_init__(self) -> None:
        check_u32(self.index, "object reference")


@dataclass(frozen=True)
class Number:
    """An unsigned 32-bit number on the stack."""

    value: int

    def __post_init__(self) -> None:
        check_u32(self.value, "number")


@dataclass(frozen=True)
class Nil:
    """The absence of a value."""


@dataclass(frozen=True)
class ObjectValue:
    """A value referring to an allocated object."""

    ref: ObjRef


@dataclass(frozen=True)
class FunctionValue:
    """A value referring to a function."""

    ref: FnRef


Value = Union[ObjectValue, Number, Nil, FunctionValue]


@dataclass(frozen=True)
class Func:
    """A declared function: where its code starts, its name and arity."""

    jump_ip: ProgramCounter
    name: str
    arity: int

    def __post_init__(self) -> None:
        if isinstance(self.jump_ip, int):
            object.__setattr__(self, "jump_ip", ProgramCounter(self.jump_ip))
        if isinstance(self.arity, bool) or not isinstance(self.arity, int):
            raise TypeError("arity must be an integer")
        if not 0 <= self.arity <= U16_MAX:
            raise ValueError(f"arity must fit in 16 unsigned bits, got {self.arity}")


class Functions:
    """Table of functions, indexed by `FnRef`."""

    def __init__(self) -> None:
        self._funcs: List[Func] = []

    def insert(self, f: Func) -> None:
        """Append a function; its reference is its position."""
        self._funcs.append(f)

    def get(self, fn_ref: FnRef) -> Optional[Func]:
        """Return the function behind ``fn_ref``, or None."""
        if fn_ref.value < len(self._funcs):
            return self._funcs[fn_ref.value]
        return None

    def __len__(self) -> int:
        return len(self._funcs)

    def __iter__(self) -> Iterator[Func]:
        return iter(self._funcs)


class Objects:
    """Store of allocated runtime objects."""

    def __init__(self) -> None:
        self._storage: List[Any] = []

    def insert(self, obj: Any) -> None:
        """Append an object to the store."""
        self._storage.append(obj)

    def get(self, idx: int) -> Optional[Any]:
        """Return the object at ``idx``, or None when there is none."""
        if 0 <= idx < len(self._storage):
            return self._storage[idx]
        return None

    def __len__(self) -> int:
        return len(self._storage)