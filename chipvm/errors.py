"""Exceptions raised by the CHIP-8 interpreter.

Two tiers: RomLoadError is ordinary validation the caller is expected to
handle, while every FatalError leaves the machine in a state with no defined
continuation and should end the run.
"""
from __future__ import annotations


class Chip8Error(Exception):
    pass


class RomLoadError(Chip8Error, ValueError):
    """Program image rejected before any memory was written."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"ROM is too large for memory: {size} bytes (must be under {limit})")
        self.size = size
        self.limit = limit


class FatalError(Chip8Error, RuntimeError):
    pass


class ProgramCounterError(FatalError):
    pass


class StackOverflowError(FatalError):
    pass


class StackUnderflowError(FatalError):
    pass


class KeyIndexError(FatalError, IndexError):
    pass


class MemoryAccessError(FatalError):
    pass


class UnknownOpcodeError(FatalError):
    def __init__(self, word: int, address: int | None = None):
        where = "" if address is None else f" at PC {address:03X}"
        super().__init__(f"Unknown opcode: {word:04X}{where}")
        self.word = word
        self.address = address
