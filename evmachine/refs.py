"""Index and address types shared across the machine."""

from dataclasses import dataclass
from typing import ClassVar

U32_MAX = 0xFFFF_FFFF


def check_u32(value: int, what: str) -> int:
    """Return ``value`` if it is an unsigned 32-bit integer, otherwise raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"{what} must fit in 32 unsigned bits, got {value}")
    return value


@dataclass(frozen=True, order=True)
class ProgramCounter:
    """Position in an instruction stream."""

    value: int

    def __post_init__(self) -> None:
        check_u32(self.value, "program counter")

    def advanced(self, by: int = 1) -> "ProgramCounter":
        """Return a counter moved forward by ``by`` instructions."""
        return ProgramCounter(self.value + by)


@dataclass(frozen=True, order=True)
class FnRef:
    """Index of a function in the function table."""

    value: int
    MAIN_FN: ClassVar["FnRef"]

    def __post_init__(self) -> None:
        check_u32(self.value, "function reference")


FnRef.MAIN_FN = FnRef(0)


@dataclass(frozen=True, order=True)
class LocalId:
    """Index of a local variable inside a call frame."""

    value: int

    def __post_init__(self) -> None:
        check_u32(self.value, "local id")