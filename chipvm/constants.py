"""Fixed CHIP-8 machine parameters and the built-in font."""

MEM_SIZE = 4096
START_ADDRESS = 0x200
MAX_ROM_SIZE = MEM_SIZE - START_ADDRESS
FONT_ADDRESS = 0x50  # canonical address for font sprites
FONT_GLYPH_SIZE = 5
SCREEN_W, SCREEN_H = 64, 32
SCREEN_SIZE = SCREEN_W * SCREEN_H
NUM_REGISTERS = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16
KEY_COUNT = 16
INSTRUCTION_WIDTH = 2

# Classic CHIP-8 4x5 font (each char 5 bytes)
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
]
