"""
Command-line entry point.

Run:
  chipvm path/to/rom [--fps 60] [--ipf 10] [--scale 8] [--verbose]
"""
from __future__ import annotations

import argparse
import logging
import sys

from .errors import FatalError, RomLoadError
from .interpreter import Chip8

logger = logging.getLogger(__name__)


def positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def positive_float(text: str) -> float:
    value = float(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipvm", description="A CHIP-8 emulator")
    parser.add_argument("rom", help="Path to CHIP-8 ROM")
    parser.add_argument("--fps", type=positive_float, default=60.0,
                        help="frames per second (default 60)")
    parser.add_argument("--ipf", type=positive_int, default=10,
                        help="instructions per frame (default 10)")
    parser.add_argument("--scale", type=positive_int, default=8,
                        help="Pixel scale factor (default 8)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging, including an instruction trace")
    return parser


def load_rom(chip8: Chip8, path: str) -> None:
    with open(path, "rb") as f:
        rom_data = f.read()
    chip8.load(rom_data)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s")

    chip8 = Chip8()
    try:
        load_rom(chip8, args.rom)
    except (OSError, RomLoadError) as e:
        logger.error("Cannot load %s: %s", args.rom, e)
        return 1

    # pygame is only needed once there is something to show
    import pygame
    from .frontend import Frontend

    pygame.init()
    try:
        Frontend(chip8, scale=args.scale).run(ipf=args.ipf, fps=args.fps)
    except FatalError as e:
        logger.error("Emulation halted: %s", e)
        return 2
    except KeyboardInterrupt:
        logger.info("Exiting.")
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
