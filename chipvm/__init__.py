"""CHIP-8 virtual machine."""

from .decoder import Instruction, Op, decode
from .errors import (
    Chip8Error, FatalError, KeyIndexError, MemoryAccessError,
    ProgramCounterError, RomLoadError, StackOverflowError,
    StackUnderflowError, UnknownOpcodeError,
)
from .interpreter import Chip8

__all__ = [
    "Chip8", "Instruction", "Op", "decode",
    "Chip8Error", "FatalError", "KeyIndexError", "MemoryAccessError",
    "ProgramCounterError", "RomLoadError", "StackOverflowError",
    "StackUnderflowError", "UnknownOpcodeError",
]
