"""Reader that turns an evm bytecode file into instructions and functions."""

from typing import Iterator, List, Tuple

from .errors import FnParseError, InvalidBytecode, InvalidInstruction, MissingOperand
from .instruction import Instr, Instructions, Opcode
from .objects import Func, Functions, Objects

EVM_MARKER = b"evm :3"
FN_DECL = b"\x01\x01"
FN_END = b"\xff\xfe\xff\xfe"
BYTEORDER = "little"

_INDEX_SIZE = 8
_ARITY_SIZE = 2
_OPERAND_SIZE = 4


class BytecodeCompiler:
    """Parses the header, a function declaration and its instructions."""

    def __init__(self, src: bytes) -> None:
        self._src = bytes(src)
        self._pos = 0

    def read_evm_bytecode(self) -> Tuple[Objects, Instructions, Functions]:
        """Parse the whole input into objects, instructions and functions."""
        self._pos = 0
        objects = Objects()
        functions = Functions()
        instrs: List[Instr] = []

        if not self._src.startswith(EVM_MARKER):
            raise InvalidBytecode()
        self._pos = len(EVM_MARKER)

        section = self._src[self._pos:self._pos + len(FN_DECL)]
        if len(section) == len(FN_DECL):
            self._pos += len(FN_DECL)
            if section != FN_DECL:
                raise InvalidBytecode()
            instrs.extend(self._parse_fn_decl(functions))

        return objects, Instructions(instrs), functions

    def _parse_fn_decl(self, functions: Functions) -> List[Instr]:
        src = self._src
        nul = src.find(b"\0", self._pos)
        name_end = len(src) if nul < 0 else nul
        try:
            name = src[self._pos:name_end].decode("utf-8")
        except UnicodeDecodeError:
            raise FnParseError("invalid utf-8 in function name", name_end) from None

        # The index field starts at the name's terminating nul byte.
        self._pos = name_end
        if len(src[self._pos:self._pos + _INDEX_SIZE]) != _INDEX_SIZE:
            raise FnParseError("invalid index (lacking bytes)", self._pos + _INDEX_SIZE)
        self._pos += _INDEX_SIZE

        arity_bytes = src[self._pos + 1:self._pos + 1 + _ARITY_SIZE]
        if len(arity_bytes) != _ARITY_SIZE:
            raise FnParseError("invalid arity (lacking bytes)", self._pos + _ARITY_SIZE)
        arity = int.from_bytes(arity_bytes, BYTEORDER)
        self._pos += _ARITY_SIZE

        fn_start = self._pos + 1
        functions.insert(Func(fn_start, name, arity))

        fn_end = self._find_fn_end()
        return list(self._compile(fn_start, fn_end))

    def _find_fn_end(self) -> int:
        src = self._src
        start = self._pos
        while True:
            at = src.find(0xFF, start)
            if at < 0:
                raise FnParseError("missing end of function marker", len(src))
            window = src[at:at + len(FN_END)]
            if len(window) < len(FN_END):
                raise FnParseError(
                    "end of function, with not enough ending bytes", at + 1
                )
            if window == FN_END:
                self._pos = at + 1 + len(FN_END)
                return at
            start = at + 1

    def _compile(self, start: int, end: int) -> Iterator[Instr]:
        body = self._src[start:end]
        pos = 0
        while pos < len(body):
            byte = body[pos]
            try:
                opcode = Opcode(byte)
            except ValueError:
                raise InvalidInstruction(start + pos, byte) from None

            kind = opcode.operand_type
            if kind is None:
                yield Instr(opcode)
                pos += 1
                continue

            raw = body[pos + 1:pos + 1 + _OPERAND_SIZE]
            if len(raw) < _OPERAND_SIZE:
                raise MissingOperand(start + pos, byte)
            yield Instr(opcode, kind(int.from_bytes(raw, BYTEORDER)))
            pos += 1 + _OPERAND_SIZE