# evmachine

A small stack-based virtual machine that reads a compact bytecode format
and executes it.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Bytecode format

A program starts with the marker `evm :3`, followed by a function
declaration introduced by the bytes `1 1`:

- the function name in UTF-8, terminated by a NUL byte;
- an 8-byte index field, which begins at that NUL byte;
- one further byte, then a 2-byte little-endian arity;
- the function body, starting right after the arity: a stream of one-byte
  opcodes, some followed by a 4-byte little-endian operand;
- the terminator `255 254 255 254`.

The opcodes are listed in `evmachine.instruction.Opcode`: arithmetic
(`ADD`, `SUB`, `MUL`, `DIV`), `PUSH`, comparison (`CMP_VAL`, `CMP_OBJ`),
jumps (`JUMP`, `JUMP_IF_GR`, `JUMP_IF_EQ`, `JUMP_IF_LE`), `CALL`,
`RETURN`, `DUP`, local variables (`LOAD`, `STORE`, `ALLOC_LOCAL`) and
`END` (byte 255). Jump operands move the instruction pointer forward by
the given number of instructions.

## Reading bytecode

```python
from evmachine.bytecode import BytecodeCompiler
from evmachine.refs import FnRef

data = (
    b"evm :3" + bytes([1, 1]) + b"main\0" + bytes(8) + bytes([1, 0])
    + bytes([255]) + bytes([255, 254, 255, 254])
)

objects, instructions, functions = BytecodeCompiler(data).read_evm_bytecode()
main_fn = functions.get(FnRef(0))
print(main_fn.name, main_fn.arity, main_fn.jump_ip)  # main 1 ProgramCounter(value=23)
```

Malformed input raises a subclass of `evmachine.errors.BytecodeError`:
`InvalidBytecode`, `FnParseError`, `InvalidInstruction` or
`MissingOperand`.

## Running a program

`evmachine.vm.Vm(code)` reads the bytecode, opens a call frame for the
function at `FnRef.MAIN_FN` and jumps to it. `interpret_one()` executes a
single instruction and returns whether execution should continue;
`interpret_all()` runs until an `END` instruction or the end of the
stream. The value stack holds at most 64 values (`evmachine.stack.Stack`),
arithmetic wraps to 32 unsigned bits, and comparison sets flags in
`VmFlags` that the conditional jumps consume.

`Vm.debug_report()` returns a text description of the machine state; when
the `evmachine.vm` logger is enabled at DEBUG level, it is logged after
every instruction.

Runtime failures raise subclasses of `evmachine.errors.VmRuntimeError`,
such as `StackTooLow`, `StackOverflow`, `LocalVariableMissing`,
`TooMuchLocalVariables` and `MissingFn`.

## Other modules

- `evmachine.refs`: `ProgramCounter`, `FnRef` and `LocalId`.
- `evmachine.objects`: the runtime values (`Number`, `Nil`,
  `ObjectValue`, `FunctionValue`), `Func`, the `Functions` table and the
  `Objects` store.
- `evmachine.call_stack`: `LocalVariable`, `LocalVars`, `Frame` and
  `CallStack`.
- `evmachine.collector.write_barrier`: `Mutation`, a wrapper giving access
  to data through `get()`.

## What this package does not do

There is no command-line program; the machine is used from Python only.
The `evmachine.collector` package holds only the `Mutation` wrapper: it
provides no heap, no managed pointers and no garbage collection.