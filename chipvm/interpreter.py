"""
The CHIP-8 virtual CPU.

A ``Chip8`` instance owns the whole machine: memory, registers, stack,
timers, display buffer and key state. The host drives it with four calls:

    chip8 = Chip8()
    chip8.load(rom_bytes)
    # once per host frame:
    chip8.set_key(k, pressed) for every key
    chip8.step() ipf times
    frame = chip8.consume_frame()   # None when nothing changed

Every step executes exactly one instruction and then ticks both timers once,
so timer speed is tied to instruction rate rather than wall-clock time.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .constants import (
    FLAG_REGISTER, FONT_ADDRESS, FONT_GLYPH_SIZE, FONTSET, INSTRUCTION_WIDTH,
    KEY_COUNT, MAX_ROM_SIZE, MEM_SIZE, NUM_REGISTERS, SCREEN_SIZE, SCREEN_W,
    STACK_DEPTH, START_ADDRESS,
)
from .decoder import Instruction, Op, decode
from .errors import (
    KeyIndexError, MemoryAccessError, ProgramCounterError, RomLoadError,
    StackOverflowError, StackUnderflowError,
)

logger = logging.getLogger(__name__)


def random_byte() -> int:
    return random.randint(0, 255)


@dataclass
class Chip8:
    # source of RND bytes; tests swap in a deterministic one
    rng: Callable[[], int] = random_byte
    memory: bytearray = field(default_factory=lambda: bytearray(MEM_SIZE))
    V: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    I: int = 0
    pc: int = START_ADDRESS
    stack: List[int] = field(default_factory=list)
    delay_timer: int = 0
    sound_timer: int = 0
    display: bytearray = field(default_factory=lambda: bytearray(SCREEN_SIZE))
    keys: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    draw_flag: bool = False

    def __post_init__(self):
        self.memory[FONT_ADDRESS:FONT_ADDRESS + len(FONTSET)] = bytes(FONTSET)

    def reset(self):
        """Return to the power-on state: zeroed memory with the font, PC at 0x200."""
        self.memory = bytearray(MEM_SIZE)
        self.memory[FONT_ADDRESS:FONT_ADDRESS + len(FONTSET)] = bytes(FONTSET)
        self.V = [0] * NUM_REGISTERS
        self.I = 0
        self.pc = START_ADDRESS
        self.stack = []
        self.delay_timer = 0
        self.sound_timer = 0
        self.display = bytearray(SCREEN_SIZE)
        self.keys = [False] * KEY_COUNT
        self.draw_flag = False

    def load(self, data: bytes):
        """Copy a raw program image to 0x200.

        The image must be strictly smaller than the space above 0x200;
        otherwise RomLoadError is raised and memory is left untouched.
        """
        if len(data) >= MAX_ROM_SIZE:
            raise RomLoadError(len(data), MAX_ROM_SIZE)
        self.memory[START_ADDRESS:START_ADDRESS + len(data)] = data
        logger.info("Loaded %d byte ROM at %03X", len(data), START_ADDRESS)

    # =============== Core fetch/decode/execute cycle ===============
    def fetch_opcode(self) -> int:
        if self.pc + 1 >= MEM_SIZE:
            raise ProgramCounterError(f"Program counter overflow: {self.pc:04X}")
        return (self.memory[self.pc] << 8) | self.memory[self.pc + 1]

    def step(self):
        address = self.pc
        ins = decode(self.fetch_opcode(), address)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%03X  %04X  %s", address, ins.word, ins)
        self.pc += INSTRUCTION_WIDTH
        self.execute(ins)
        self._tick_timers()

    def execute(self, ins: Instruction):
        """Apply one decoded instruction. PC has already been advanced past it."""
        op, x, y = ins.op, ins.x, ins.y
        V = self.V

        if op is Op.CLS:
            self.display = bytearray(SCREEN_SIZE)
            self.draw_flag = True
        elif op is Op.RET:
            if not self.stack:
                raise StackUnderflowError("Stack underflow on RET")
            # the stack holds the CALL's own address
            self.pc = self.stack.pop() + INSTRUCTION_WIDTH
        elif op is Op.JP:
            self.pc = ins.nnn
        elif op is Op.CALL:
            if len(self.stack) >= STACK_DEPTH:
                raise StackOverflowError(
                    f"Stack overflow on CALL {ins.nnn:03X} at {self.pc - INSTRUCTION_WIDTH:03X}")
            self.stack.append(self.pc - INSTRUCTION_WIDTH)
            self.pc = ins.nnn
        elif op is Op.SE_BYTE:
            self._skip_if(V[x] == ins.nn)
        elif op is Op.SNE_BYTE:
            self._skip_if(V[x] != ins.nn)
        elif op is Op.SE_REG:
            self._skip_if(V[x] == V[y])
        elif op is Op.SNE_REG:
            self._skip_if(V[x] != V[y])
        elif op is Op.LD_BYTE:
            V[x] = ins.nn
        elif op is Op.ADD_BYTE:
            V[x] = (V[x] + ins.nn) & 0xFF
        elif op is Op.LD_REG:
            V[x] = V[y]
        elif op is Op.OR:
            V[x] |= V[y]
        elif op is Op.AND:
            V[x] &= V[y]
        elif op is Op.XOR:
            V[x] ^= V[y]
        elif op is Op.ADD_REG:
            total = V[x] + V[y]
            V[FLAG_REGISTER] = 1 if total > 0xFF else 0
            V[x] = total & 0xFF
        elif op is Op.SUB:
            diff = V[x] - V[y]
            V[FLAG_REGISTER] = 0 if diff < 0 else 1
            V[x] = diff & 0xFF
        elif op is Op.SUBN:
            diff = V[y] - V[x]
            V[FLAG_REGISTER] = 0 if diff < 0 else 1
            V[x] = diff & 0xFF
        elif op is Op.SHR:
            V[FLAG_REGISTER] = V[x] & 0x01
            V[x] = V[x] >> 1
        elif op is Op.SHL:
            # raw 0x80 mask, not normalised to 1
            V[FLAG_REGISTER] = V[x] & 0x80
            V[x] = (V[x] << 1) & 0xFF
        elif op is Op.LD_I:
            self.I = ins.nnn
        elif op is Op.JP_V0:
            self.pc = ins.nnn + V[0]
        elif op is Op.RND:
            V[x] = (self.rng() & 0xFF) & ins.nn
        elif op is Op.DRW:
            self._draw_sprite(V[x], V[y], ins.n)
        elif op is Op.SKP:
            self._skip_if(self.keys[V[x] & 0xF])
        elif op is Op.SKNP:
            self._skip_if(not self.keys[V[x] & 0xF])
        elif op is Op.LD_VX_DT:
            V[x] = self.delay_timer
        elif op is Op.LD_VX_K:
            key = self._pressed_key()
            if key is None:
                # fetch this instruction again next step
                self.pc -= INSTRUCTION_WIDTH
            else:
                V[x] = key
        elif op is Op.LD_DT:
            self.delay_timer = V[x]
        elif op is Op.LD_ST:
            self.sound_timer = V[x]
        elif op is Op.ADD_I:
            # Also loads the sound timer. Almost certainly a copy slip, kept
            # for bit-compatibility.
            self.sound_timer = V[x]
            self.I += V[x]
            if self.I >= MEM_SIZE:
                self.I %= MEM_SIZE
                V[FLAG_REGISTER] = 1
            else:
                V[FLAG_REGISTER] = 0
        elif op is Op.LD_F:
            self.I = FONT_ADDRESS + (V[x] & 0xF) * FONT_GLYPH_SIZE
        elif op is Op.BCD:
            self._check_range(self.I, 3)
            val = V[x]
            self.memory[self.I] = val // 100
            self.memory[self.I + 1] = (val // 10) % 10
            self.memory[self.I + 2] = val % 10
        elif op is Op.STORE:
            self._check_range(self.I, x + 1)
            for i in range(x + 1):
                self.memory[self.I + i] = V[i]
        elif op is Op.LOAD:
            self._check_range(self.I, x + 1)
            for i in range(x + 1):
                V[i] = self.memory[self.I + i]
        else:  # pragma: no cover - decode() only produces the ops above
            raise AssertionError(f"unhandled op {op}")

    # =============== Host I/O surface ===============
    def set_key(self, index: int, pressed: bool):
        if not 0 <= index < KEY_COUNT:
            raise KeyIndexError(f"Key index out of range: {index}")
        self.keys[index] = bool(pressed)

    def consume_frame(self) -> Optional[bytes]:
        """Snapshot of the display if it changed since the last call, else None."""
        if not self.draw_flag:
            return None
        self.draw_flag = False
        return bytes(self.display)

    # =============== Helpers ===============
    def _skip_if(self, condition: bool):
        if condition:
            self.pc += INSTRUCTION_WIDTH

    def _pressed_key(self) -> int | None:
        for i in range(KEY_COUNT):
            if self.keys[i]:
                return i
        return None

    def _check_range(self, start: int, length: int):
        if start < 0 or start + length > MEM_SIZE:
            raise MemoryAccessError(
                f"Memory access {start:04X}..{start + length - 1:04X} out of bounds")

    def _tick_timers(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def _draw_sprite(self, x_pos: int, y_pos: int, height: int):
        # Wraps through one linear modulo over the whole buffer, so a sprite
        # crossing the right edge continues on the next row down.
        self._check_range(self.I, height)
        self.V[FLAG_REGISTER] = 0
        for row in range(height):
            sprite = self.memory[self.I + row]
            row_offset = (y_pos + row) * SCREEN_W
            for col in range(8):
                if sprite & (0x80 >> col):
                    idx = (x_pos + col + row_offset) % SCREEN_SIZE
                    if self.display[idx] == 1:
                        self.V[FLAG_REGISTER] = 1
                    self.display[idx] ^= 1
        self.draw_flag = True
