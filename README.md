# evmkit

Building blocks for an Ethereum Virtual Machine interpreter, in plain Python
with no third-party dependencies.

## Modules

### `evmkit.opcodes`

- `Revision` — an `IntEnum` of EVM revisions from `FRONTIER` to `CANCUN`,
  ordered by activation; `Revision.latest()` returns the newest one.
- `Opcode` — an `IntEnum` of every defined instruction byte. Each member has a
  `since` property giving the first revision that has the instruction
  (for example `Opcode.PUSH0.since` is `Revision.SHANGHAI`).
- `is_defined(op)`, `is_push(op)` (PUSH1..PUSH32), `immediate_size(op)`
  (number of data bytes after a push, otherwise 0), `is_terminating(op)`
  (STOP, RETURN, REVERT, INVALID, SELFDESTRUCT) and `opcode_name(op)`
  (the mnemonic, or `None` for an undefined byte). All of them raise
  `ValueError` for a value outside 0..255.

### `evmkit.eof`

EVM Object Format (EOF) containers:

- `is_eof_code(code)` — whether the code starts with the `0xEF00` magic.
- `get_eof_version(container)` — the version byte after the magic, or 0 for
  legacy code.
- `EOF1Header(code_size, data_size)` with `code_begin()`, the offset of the code
  section (7 without a data section, 10 with one).
- `read_valid_eof1_header(code)` — reads the section sizes of a container that
  is already known to be valid.
- `validate_eof(rev, container)` — checks the prefix, version, section headers,
  section body sizes and the instructions of the code section under the given
  revision. It returns the `EOF1Header`, or raises `EOFValidationFailure`
  (a `ValueError`) whose `error` attribute is an `EOFValidationError` member.
  Version 1 is only accepted from `Revision.SHANGHAI` on.

### `evmkit.execution_state`

- `StackSpace` — holds stack items in `items`, with the 1024-item `limit`.
- `Memory` — byte-addressable memory that grows in multiples of 32 bytes with
  `grow(new_size)`, zero-filling the new part; `clear()` sets the size back to
  zero. Supports `len()`, indexing and contiguous slice assignment within the
  current size, plus `size`, `data` and `capacity`.
- `Message` — the call parameters (`gas`, `flags`, `depth`, `recipient`,
  `sender`, `input_data`, `value`, `code_address`); `Message.STATIC` is the
  static-call flag.
- `ExecutionState` — gas left and refund, memory, stack space, revision, code,
  return data, status and output range. `reset(message, revision, code)`
  prepares it for another execution; `in_static_mode()` reports the static
  flag of the current message.

### `evmkit.analysis`

- `analyze_jumpdests(code)` — marks every `JUMPDEST` that is not inside push
  data and pads the code with 33 `STOP` bytes.
- `analyze(rev, code)` — the same, but from Shanghai on an EOF container is
  analysed on its code section only.
- `CodeAnalysis` — `padded_code`, `jumpdest_map`, `code_size` and
  `is_jumpdest(offset)`.

## Example

```python
from evmkit.analysis import analyze
from evmkit.eof import validate_eof, EOFValidationFailure
from evmkit.opcodes import Revision

code = bytes.fromhex("6004565b00")   # PUSH1 4, JUMP, JUMPDEST, STOP
result = analyze(Revision.LONDON, code)
print(result.is_jumpdest(3))   # True
print(result.is_jumpdest(1))   # False

try:
    validate_eof(Revision.SHANGHAI, bytes.fromhex("ef0001010001"))
except EOFValidationFailure as exc:
    print(exc.error)   # EOFValidationError.SECTION_HEADERS_NOT_TERMINATED
```

## What it does not do

evmkit does not execute bytecode. There is no instruction dispatch loop, no
gas cost tables, no instruction implementations and no host interface for
accounts, storage or calls. The modules give you the opcode tables, EOF
validation, state containers and jump destination analysis on which such an
interpreter would be built.

## Running the tests

```
pip install evmkit[test]
pytest
```