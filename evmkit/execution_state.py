"""Stack space, memory and the generic state of one EVM execution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from evmkit.opcodes import Revision

_STATUS_SUCCESS = 0


class StackSpace:
    """Storage for the EVM stack, bounded by the stack item limit."""

    limit: ClassVar[int] = 1024

    def __init__(self) -> None:
        self.items: list[int] = []

    def __len__(self) -> int:
        return len(self.items)


class Memory:
    """EVM memory that grows in 32-byte words.

    Capacity starts at one 4 KiB page and doubles, rounding up to whole pages
    when doubling is not enough.
    """

    page_size: ClassVar[int] = 4 * 1024

    def __init__(self) -> None:
        self._size = 0
        self.capacity = self.page_size
        self._buf = bytearray(self.capacity)

    def __len__(self) -> int:
        return self._size

    @property
    def size(self) -> int:
        """The current (virtual) memory size in bytes."""
        return self._size

    @property
    def data(self) -> bytes:
        """A copy of the memory contents within the current size."""
        return bytes(self._buf[: self._size])

    def _check_index(self, index: int) -> int:
        if not 0 <= index < self._size:
            raise IndexError(f"memory index out of range: {index}")
        return index

    def __getitem__(self, key: int | slice) -> int | bytes:
        if isinstance(key, slice):
            start, stop, step = key.indices(self._size)
            return bytes(self._buf[start:stop:step])
        return self._buf[self._check_index(key)]

    def __setitem__(self, key: int | slice, value) -> None:
        if isinstance(key, slice):
            start, stop, step = key.indices(self._size)
            if step != 1:
                raise ValueError("memory slices must be contiguous")
            data = bytes(value)
            if len(data) != max(0, stop - start):
                raise ValueError("memory slice assignment cannot change size")
            self._buf[start:stop] = data
        else:
            self._buf[self._check_index(key)] = value

    def grow(self, new_size: int) -> None:
        """Grow to new_size bytes, zero-filling the extension.

        The new size must be a multiple of 32 and larger than the current size.
        """
        if new_size % 32 != 0:
            raise ValueError(f"memory size must be a multiple of 32: {new_size}")
        if new_size <= self._size:
            raise ValueError(f"memory can only grow: {new_size} <= {self._size}")

        if new_size > self.capacity:
            self.capacity *= 2
            if self.capacity < new_size:
                page = self.page_size
                self.capacity = ((new_size + page - 1) // page) * page
            self._buf.extend(bytes(self.capacity - len(self._buf)))

        self._buf[self._size : new_size] = bytes(new_size - self._size)
        self._size = new_size

    def clear(self) -> None:
        """Set the size to zero; the capacity is kept."""
        self._size = 0


@dataclass
class Message:
    """The parameters of a call being executed."""

    STATIC: ClassVar[int] = 1

    gas: int = 0
    flags: int = 0
    depth: int = 0
    recipient: bytes = bytes(20)
    sender: bytes = bytes(20)
    input_data: bytes = b""
    value: int = 0
    code_address: bytes = bytes(20)


class ExecutionState:
    """Generic execution state shared by instruction implementations."""

    def __init__(
        self,
        message: Message | None = None,
        revision: Revision = Revision.FRONTIER,
        code: bytes = b"",
    ) -> None:
        self.memory = Memory()
        self.stack_space = StackSpace()
        self.analysis: object | None = None
        self.msg: Message | None = None
        self.gas_left = 0
        self._assign(message, revision, code)

    def _assign(self, message: Message | None, revision: Revision, code: bytes) -> None:
        self.msg = message
        self.gas_left = message.gas if message is not None else 0
        self.gas_refund = 0
        self.rev = Revision(revision)
        self.return_data = b""
        self.code = bytes(code)
        self.original_code = self.code
        self.status = _STATUS_SUCCESS
        self.output_offset = 0
        self.output_size = 0

    def reset(self, message: Message, revision: Revision, code: bytes) -> None:
        """Reinitialise the state so it can be reused for another execution."""
        self.memory.clear()
        self._assign(message, revision, code)

    def in_static_mode(self) -> bool:
        """Whether the current message forbids state modifications."""
        if self.msg is None:
            raise RuntimeError("execution state has no message")
        return (self.msg.flags & Message.STATIC) != 0