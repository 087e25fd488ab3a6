"""Instruction decoding.

``decode`` is a pure function from a 16-bit instruction word to an
``Instruction``: the operand fields are always extracted the same way and the
``Op`` tag names which of the 35 classic instructions the word selects.
Execution lives in the interpreter and never looks at raw bits again.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass

from .errors import UnknownOpcodeError


class Op(enum.Enum):
    CLS = "CLS"
    RET = "RET"
    JP = "JP"
    CALL = "CALL"
    SE_BYTE = "SE_BYTE"
    SNE_BYTE = "SNE_BYTE"
    SE_REG = "SE_REG"
    LD_BYTE = "LD_BYTE"
    ADD_BYTE = "ADD_BYTE"
    LD_REG = "LD_REG"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD_REG = "ADD_REG"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    SNE_REG = "SNE_REG"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT = "LD_DT"
    LD_ST = "LD_ST"
    ADD_I = "ADD_I"
    LD_F = "LD_F"
    BCD = "BCD"
    STORE = "STORE"
    LOAD = "LOAD"


# Low-nibble selector for the 8xyN register/register ALU family
_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

# Low-byte selector for the ExNN key family
_KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

# Low-byte selector for the FxNN misc family
_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT,
    0x18: Op.LD_ST,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.BCD,
    0x55: Op.STORE,
    0x65: Op.LOAD,
}

# Families fully selected by the top nibble
_NIBBLE_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x5: Op.SE_REG,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0x9: Op.SNE_REG,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}


@dataclass(frozen=True)
class Instruction:
    op: Op
    word: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    def __str__(self) -> str:
        op, x, y = self.op, self.x, self.y
        if op in (Op.CLS, Op.RET):
            return op.value
        if op in (Op.JP, Op.CALL):
            return f"{op.value} {self.nnn:03X}"
        if op is Op.LD_I:
            return f"LD I, {self.nnn:03X}"
        if op is Op.JP_V0:
            return f"JP V0, {self.nnn:03X}"
        if op in (Op.SE_BYTE, Op.SNE_BYTE, Op.LD_BYTE, Op.ADD_BYTE, Op.RND):
            return f"{op.value.split('_')[0]} V{x:X}, {self.nn:02X}"
        if op is Op.DRW:
            return f"DRW V{x:X}, V{y:X}, {self.n:X}"
        if op in (Op.SKP, Op.SKNP):
            return f"{op.value} V{x:X}"
        if op in _ALU_OPS.values() or op in (Op.SE_REG, Op.SNE_REG):
            return f"{op.value.split('_')[0]} V{x:X}, V{y:X}"
        return {
            Op.LD_VX_DT: f"LD V{x:X}, DT",
            Op.LD_VX_K: f"LD V{x:X}, K",
            Op.LD_DT: f"LD DT, V{x:X}",
            Op.LD_ST: f"LD ST, V{x:X}",
            Op.ADD_I: f"ADD I, V{x:X}",
            Op.LD_F: f"LD F, V{x:X}",
            Op.BCD: f"LD B, V{x:X}",
            Op.STORE: f"LD [I], V{x:X}",
            Op.LOAD: f"LD V{x:X}, [I]",
        }[op]


def _select(word: int) -> Op | None:
    family = (word & 0xF000) >> 12
    if word == 0x00E0:
        return Op.CLS
    if word == 0x00EE:
        return Op.RET
    if family == 0x8:
        return _ALU_OPS.get(word & 0x000F)
    if family == 0xE:
        return _KEY_OPS.get(word & 0x00FF)
    if family == 0xF:
        return _MISC_OPS.get(word & 0x00FF)
    return _NIBBLE_OPS.get(family)


def decode(word: int, address: int | None = None) -> Instruction:
    """Split ``word`` into its operand fields and tag it with its ``Op``.

    Raises UnknownOpcodeError for any word outside the classic instruction
    set, including every 0nnn other than 00E0 and 00EE. ``address`` is only
    used to make that error message point at the offending PC.
    """
    if not 0 <= word <= 0xFFFF:
        raise UnknownOpcodeError(word, address)
    op = _select(word)
    if op is None:
        raise UnknownOpcodeError(word, address)
    return Instruction(
        op=op,
        word=word,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )
