"""EVM Object Format (EOF) container detection, header reading and validation."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from evmkit.opcodes import Revision, is_defined, immediate_size, is_terminating, Opcode

MAGIC = b"\xef\x00"
_TERMINATOR = 0x00
_CODE_SECTION = 0x01
_DATA_SECTION = 0x02


class EOFValidationError(enum.Enum):
    """The reasons an EOF container can be rejected."""

    SUCCESS = "success"
    STARTS_WITH_FORMAT = "starts_with_format"
    INVALID_PREFIX = "invalid_prefix"
    EOF_VERSION_MISMATCH = "eof_version_mismatch"
    EOF_VERSION_UNKNOWN = "eof_version_unknown"

    INCOMPLETE_SECTION_SIZE = "incomplete_section_size"
    CODE_SECTION_MISSING = "code_section_missing"
    MULTIPLE_CODE_SECTIONS = "multiple_code_sections"
    MULTIPLE_DATA_SECTIONS = "multiple_data_sections"
    UNKNOWN_SECTION_ID = "unknown_section_id"
    ZERO_SECTION_SIZE = "zero_section_size"
    SECTION_HEADERS_NOT_TERMINATED = "section_headers_not_terminated"
    INVALID_SECTION_BODIES_SIZE = "invalid_section_bodies_size"
    UNDEFINED_INSTRUCTION = "undefined_instruction"
    MISSING_TERMINATING_INSTRUCTION = "missing_terminating_instruction"

    IMPOSSIBLE = "impossible"


class EOFValidationFailure(ValueError):
    """Raised when a container is not valid EOF; carries the specific error."""

    def __init__(self, error: EOFValidationError) -> None:
        super().__init__(error.value)
        self.error = error


@dataclass(frozen=True)
class EOF1Header:
    """Section sizes of an EOF version 1 container."""

    code_size: int = 0
    data_size: int = 0

    def code_begin(self) -> int:
        """Offset of the code section start within the container."""
        if self.code_size == 0:
            raise ValueError("EOF1 header has no code section")
        if self.data_size == 0:
            return 7  # MAGIC + VERSION + SECTION_ID + SIZE + TERMINATOR
        return 10  # MAGIC + VERSION + SECTION_ID + SIZE + SECTION_ID + SIZE + TERMINATOR


def is_eof_code(code: bytes) -> bool:
    """Whether the code starts with the EOF magic; the format is not validated."""
    return len(code) > 1 and code[:2] == MAGIC


def read_valid_eof1_header(code: bytes) -> EOF1Header:
    """Read the section sizes, assuming the container is already known to be valid."""
    code_size_offset = 4  # MAGIC + VERSION + CODE_SECTION_ID
    code_size = (code[code_size_offset] << 8) | code[code_size_offset + 1]
    data_size = 0
    if code[code_size_offset + 2] == _DATA_SECTION:
        data_size_offset = code_size_offset + 3
        data_size = (code[data_size_offset] << 8) | code[data_size_offset + 1]
    return EOF1Header(code_size, data_size)


def get_eof_version(container: bytes) -> int:
    """The EOF version from the container prefix, or 0 for legacy code."""
    if len(container) >= 3 and container[:2] == MAGIC:
        return container[2]
    return 0


def _validate_headers(container: bytes) -> tuple[dict[int, int], int]:
    """Parse section headers; return the sizes and the offset where bodies begin."""
    sizes = {_CODE_SECTION: 0, _DATA_SECTION: 0}
    end = len(container)
    pos = len(MAGIC) + 1
    section_id = 0
    expecting_size = False
    terminated = False

    while pos != end and not terminated:
        if not expecting_size:
            section_id = container[pos]
            pos += 1
            if section_id == _TERMINATOR:
                if sizes[_CODE_SECTION] == 0:
                    raise EOFValidationFailure(EOFValidationError.CODE_SECTION_MISSING)
                terminated = True
            elif section_id == _DATA_SECTION:
                if sizes[_CODE_SECTION] == 0:
                    raise EOFValidationFailure(EOFValidationError.CODE_SECTION_MISSING)
                if sizes[_DATA_SECTION] != 0:
                    raise EOFValidationFailure(EOFValidationError.MULTIPLE_DATA_SECTIONS)
                expecting_size = True
            elif section_id == _CODE_SECTION:
                if sizes[_CODE_SECTION] != 0:
                    raise EOFValidationFailure(EOFValidationError.MULTIPLE_CODE_SECTIONS)
                expecting_size = True
            else:
                raise EOFValidationFailure(EOFValidationError.UNKNOWN_SECTION_ID)
        else:
            size_hi = container[pos]
            pos += 1
            if pos == end:
                raise EOFValidationFailure(EOFValidationError.INCOMPLETE_SECTION_SIZE)
            size_lo = container[pos]
            pos += 1
            section_size = (size_hi << 8) | size_lo
            if section_size == 0:
                raise EOFValidationFailure(EOFValidationError.ZERO_SECTION_SIZE)
            sizes[section_id] = section_size
            expecting_size = False

    if not terminated:
        raise EOFValidationFailure(EOFValidationError.SECTION_HEADERS_NOT_TERMINATED)

    if sizes[_CODE_SECTION] + sizes[_DATA_SECTION] != end - pos:
        raise EOFValidationFailure(EOFValidationError.INVALID_SECTION_BODIES_SIZE)

    return sizes, pos


def _validate_instructions(rev: Revision, code: bytes) -> None:
    pos = 0
    op = code[0]
    while pos < len(code):
        op = code[pos]
        if not is_defined(op) or Opcode(op).since > rev:
            raise EOFValidationFailure(EOFValidationError.UNDEFINED_INSTRUCTION)
        pos += immediate_size(op) + 1

    if not is_terminating(op):
        raise EOFValidationFailure(EOFValidationError.MISSING_TERMINATING_INSTRUCTION)


def _validate_eof1(rev: Revision, container: bytes) -> EOF1Header:
    sizes, _ = _validate_headers(container)
    header = EOF1Header(sizes[_CODE_SECTION], sizes[_DATA_SECTION])
    begin = header.code_begin()
    _validate_instructions(rev, container[begin : begin + header.code_size])
    return header


def validate_eof(rev: Revision, container: bytes) -> EOF1Header:
    """Validate the container under the rules of the revision.

    Returns the parsed header; raises EOFValidationFailure otherwise.
    """
    container = bytes(container)
    if not is_eof_code(container):
        raise EOFValidationFailure(EOFValidationError.INVALID_PREFIX)

    if get_eof_version(container) == 1:
        if rev < Revision.SHANGHAI:
            raise EOFValidationFailure(EOFValidationError.EOF_VERSION_UNKNOWN)
        return _validate_eof1(rev, container)
    raise EOFValidationFailure(EOFValidationError.EOF_VERSION_UNKNOWN)