"""EVM opcode tables, EOF validation, execution state and jump destination analysis."""

__version__ = "0.10.0"
__all__ = ["analysis", "eof", "execution_state", "opcodes"]