"""
Pygame host for the interpreter.

Keyboard mapping (common layout):

  CHIP-8  =>  Keyboard
  1 2 3 C =>  1 2 3 4
  4 5 6 D =>  Q W E R
  7 8 9 E =>  A S D F
  A 0 B F =>  Z X C V

The frontend owns everything the core deliberately leaves out: the window,
the event loop, frame-rate limiting and the cell-to-colour mapping.
"""
from __future__ import annotations

import logging

import numpy as np
import pygame

from .constants import KEY_COUNT, SCREEN_H, SCREEN_SIZE, SCREEN_W
from .interpreter import Chip8

logger = logging.getLogger(__name__)

# Keyboard mapping: CHIP-8 key index -> pygame key
KEYMAP = {
    0x0: pygame.K_x,
    0x1: pygame.K_1,
    0x2: pygame.K_2,
    0x3: pygame.K_3,
    0x4: pygame.K_q,
    0x5: pygame.K_w,
    0x6: pygame.K_e,
    0x7: pygame.K_a,
    0x8: pygame.K_s,
    0x9: pygame.K_d,
    0xA: pygame.K_z,
    0xB: pygame.K_c,
    0xC: pygame.K_4,
    0xD: pygame.K_r,
    0xE: pygame.K_f,
    0xF: pygame.K_v,
}

# cell value -> RGB
PALETTE = np.array([
    (0x9B, 0xBC, 0x0F),  # off
    (0x0F, 0x38, 0x0F),  # on
], dtype=np.uint8)


def frame_to_rgb(frame: bytes) -> np.ndarray:
    """Map a row-major 64x32 frame to a (width, height, 3) array for surfarray."""
    cells = np.frombuffer(bytes(frame), dtype=np.uint8).reshape(SCREEN_H, SCREEN_W)
    return PALETTE[cells & 1].transpose(1, 0, 2)


class Frontend:
    def __init__(self, chip8: Chip8, scale: int = 8):
        self.chip8 = chip8
        self.scale = max(1, int(scale))
        self.window = pygame.display.set_mode(
            (SCREEN_W * self.scale, SCREEN_H * self.scale))
        pygame.display.set_caption("CHIP-8")
        self.screen = pygame.Surface((SCREEN_W, SCREEN_H))
        self.clock = pygame.time.Clock()
        self.render(bytes(SCREEN_SIZE))

    def poll_keys(self) -> bool:
        """Drain the event queue and push the full key state. False means quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
        pressed = pygame.key.get_pressed()
        for k_idx in range(KEY_COUNT):
            self.chip8.set_key(k_idx, bool(pressed[KEYMAP[k_idx]]))
        return True

    def render(self, frame: bytes):
        pygame.surfarray.blit_array(self.screen, frame_to_rgb(frame))
        pygame.transform.scale(self.screen, self.window.get_size(), self.window)
        pygame.display.flip()

    def run(self, ipf: int = 10, fps: float = 60.0):
        logger.info("Running at %s fps, %d instructions per frame", fps, ipf)
        while self.poll_keys():
            for _ in range(ipf):
                self.chip8.step()
            frame = self.chip8.consume_frame()
            if frame is not None:
                self.render(frame)
            self.clock.tick(fps)
