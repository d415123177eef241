"""Code analysis for the baseline interpreter: valid jump destinations and padded code."""

from __future__ import annotations

from dataclasses import dataclass

from evmkit.eof import is_eof_code, read_valid_eof1_header
from evmkit.opcodes import Opcode, Revision, immediate_size

# 32 bytes for the data of a PUSH32 truncated at the very end of the code,
# plus one STOP so the padded code always ends with a terminating instruction.
_PADDING = 32 + 1


@dataclass(frozen=True)
class CodeAnalysis:
    """The result of analysing code before execution.

    ``padded_code`` is the analysed code followed by STOP padding.
    ``jumpdest_map`` has one flag per byte of the analysed code.
    """

    padded_code: bytes
    jumpdest_map: tuple[bool, ...]

    def is_jumpdest(self, offset: int) -> bool:
        """Whether the offset is a valid JUMPDEST in the analysed code."""
        return 0 <= offset < len(self.jumpdest_map) and self.jumpdest_map[offset]

    @property
    def code_size(self) -> int:
        """The size of the analysed code, without padding."""
        return len(self.jumpdest_map)


def analyze_jumpdests(code: bytes) -> CodeAnalysis:
    """Find valid JUMPDEST positions, skipping PUSH immediate data, and pad the code."""
    code = bytes(code)
    jumpdests = [False] * len(code)
    pos = 0
    while pos < len(code):
        op = code[pos]
        if op == Opcode.JUMPDEST:
            jumpdests[pos] = True
        pos += immediate_size(op) + 1

    padded = code + bytes([Opcode.STOP]) * _PADDING
    return CodeAnalysis(padded, tuple(jumpdests))


def analyze(rev: Revision, code: bytes) -> CodeAnalysis:
    """Analyse code under the given revision.

    From Shanghai on, EOF containers are analysed on their code section only;
    the container is assumed to be valid.
    """
    code = bytes(code)
    if rev < Revision.SHANGHAI or not is_eof_code(code):
        return analyze_jumpdests(code)

    header = read_valid_eof1_header(code)
    begin = header.code_begin()
    return analyze_jumpdests(code[begin : begin + header.code_size])