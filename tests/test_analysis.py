import pytest

from evmkit.analysis import CodeAnalysis, analyze, analyze_jumpdests
from evmkit.opcodes import Opcode, Revision

JUMPDEST = bytes([Opcode.JUMPDEST])
STOP = bytes([Opcode.STOP])
ADD = bytes([Opcode.ADD])
JUMP = bytes([Opcode.JUMP])
JUMPI = bytes([Opcode.JUMPI])


def push1(value: int) -> bytes:
    return bytes([Opcode.PUSH1, value])


def jumpdest_offsets(analysis: CodeAnalysis) -> list[int]:
    return [i for i, flag in enumerate(analysis.jumpdest_map) if flag]


def eof1_container(code: bytes, data: bytes = b"") -> bytes:
    header = b"\xef\x00\x01\x01" + len(code).to_bytes(2, "big")
    if data:
        header += b"\x02" + len(data).to_bytes(2, "big")
    return header + b"\x00" + code + data


def test_jump1():
    code = push1(2) + push1(4) + ADD + JUMP + JUMPDEST + push1(3) + push1(0)
    analysis = analyze(Revision.BYZANTIUM, code)
    assert jumpdest_offsets(analysis) == [6]
    assert analysis.is_jumpdest(6)
    assert not analysis.is_jumpdest(0)
    assert not analysis.is_jumpdest(7)


def test_empty():
    analysis = analyze(Revision.BYZANTIUM, b"")
    assert analysis.jumpdest_map == ()
    assert analysis.padded_code == bytes(33)


def test_only_jumpdest():
    analysis = analyze(Revision.BYZANTIUM, JUMPDEST)
    assert jumpdest_offsets(analysis) == [0]


def test_jump_dead_code():
    code = push1(6) + JUMP + 3 * ADD + JUMPDEST
    assert jumpdest_offsets(analyze(Revision.BYZANTIUM, code)) == [6]


def test_stop_dead_code():
    code = STOP + 3 * ADD + JUMPDEST
    assert code[4] == Opcode.JUMPDEST
    assert jumpdest_offsets(analyze(Revision.BYZANTIUM, code)) == [4]


def test_dead_code_at_the_end():
    code = STOP + 3 * ADD
    assert jumpdest_offsets(analyze(Revision.BYZANTIUM, code)) == []


def test_jumpdests_groups():
    code = 3 * JUMPDEST + push1(1) + 3 * JUMPDEST + push1(2) + JUMPI
    assert jumpdest_offsets(analyze(Revision.BYZANTIUM, code)) == [0, 1, 2, 5, 6, 7]


def test_jumpdest_in_push_data_is_not_valid():
    code = push1(Opcode.JUMPDEST) + JUMPDEST
    analysis = analyze_jumpdests(code)
    assert not analysis.is_jumpdest(1)
    assert analysis.is_jumpdest(2)


@pytest.mark.parametrize("op", range(Opcode.PUSH1, Opcode.PUSH32 + 1))
def test_truncated_push_at_end(op):
    code = bytes([Opcode.PC, op]) + JUMPDEST
    analysis = analyze_jumpdests(code)
    assert jumpdest_offsets(analysis) == []
    assert len(analysis.jumpdest_map) == len(code)


@pytest.mark.parametrize(
    "code", [b"", JUMPDEST, push1(1) + ADD, bytes([Opcode.PUSH32]) + bytes(10)]
)
def test_padded_code_invariants(code):
    analysis = analyze_jumpdests(code)
    assert analysis.padded_code[: len(code)] == code
    assert analysis.padded_code[len(code) :] == bytes([Opcode.STOP]) * 33
    assert analysis.code_size == len(code)


def test_is_jumpdest_out_of_range():
    analysis = analyze_jumpdests(JUMPDEST)
    assert not analysis.is_jumpdest(-1)
    assert not analysis.is_jumpdest(1)
    assert not analysis.is_jumpdest(100)


def test_eof1_analysis_uses_code_section():
    code = JUMPDEST + STOP
    container = eof1_container(code, bytes.fromhex("deadbeef"))
    analysis = analyze(Revision.SHANGHAI, container)
    assert analysis.jumpdest_map == (True, False)
    assert analysis.padded_code[:2] == code


def test_eof1_without_data_section():
    code = push1(1) + JUMPDEST + STOP
    analysis = analyze(Revision.SHANGHAI, eof1_container(code))
    assert jumpdest_offsets(analysis) == [2]
    assert analysis.code_size == len(code)


def test_eof_container_before_shanghai_is_legacy():
    container = eof1_container(JUMPDEST + STOP)
    analysis = analyze(Revision.LONDON, container)
    assert analysis.code_size == len(container)
    assert analysis.padded_code[: len(container)] == container


def test_legacy_code_on_shanghai():
    code = 3 * JUMPDEST
    assert jumpdest_offsets(analyze(Revision.SHANGHAI, code)) == [0, 1, 2]
    assert analyze(Revision.SHANGHAI, code) == analyze_jumpdests(code)