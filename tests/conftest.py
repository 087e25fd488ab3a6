import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# never open a real window or audio device under test
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from chipvm.interpreter import Chip8


def program(*words: int) -> bytes:
    """Assemble 16-bit instruction words into a big-endian ROM image."""
    return b"".join(w.to_bytes(2, "big") for w in words)


@pytest.fixture
def make_chip8():
    def factory(*words, rng=None):
        chip8 = Chip8() if rng is None else Chip8(rng=rng)
        chip8.load(program(*words))
        return chip8
    return factory
