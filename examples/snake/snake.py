"""Play snake, or any program drawing to the screen at $0200, in a terminal."""  # noqa: INP001

import argparse
import logging
import sys
import time
from pathlib import Path
from queue import Empty, Queue
from threading import Thread

import numpy as np

from mos6502.cpu import CPU6502, run
from mos6502.peripherals import KeyInput, RandomByteSource, monitor_stdin, restored_terminal
from mos6502.programs import SNAKE_GAME
from mos6502.screen import ScreenSampler

STEERING_KEYS = (b"w", b"a", b"s", b"d")


def build_arg_parser() -> argparse.ArgumentParser:  # noqa: D103
    parser = argparse.ArgumentParser(
        prog="snake.py",
        description="Run a 6502 program with the 32x32 screen rendered in the terminal. Steer with w/a/s/d, quit with "
                    "Ctrl+C.",
    )
    parser.add_argument(
        "program",
        type=Path,
        nargs="?",
        help="Binary to load at $0600. Defaults to the bundled snake game.",
    )
    parser.add_argument(
        "--steps-per-frame",
        type=int,
        default=2000,
        help="Instructions executed between two screen samples.",
    )
    parser.add_argument(
        "--frame-delay",
        type=float,
        default=0.02,
        help="Seconds to sleep after each frame.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def draw(frame: np.ndarray) -> None:
    """Draw an RGB frame with two terminal cells per pixel."""
    lines = ["\x1b[H"]
    for row in frame:
        lines.append("".join(f"\x1b[48;2;{r};{g};{b}m  " for r, g, b in row) + "\x1b[0m\r\n")
    sys.stdout.write("".join(lines))
    sys.stdout.flush()


def main(argv: list[str] | None = None) -> int:  # noqa: D103
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level)

    program = args.program.read_bytes() if args.program else SNAKE_GAME
    cpu = CPU6502()
    cpu.load(program)
    cpu.reset()

    input_queue: Queue[bytes | None] = Queue()
    with restored_terminal():
        Thread(target=monitor_stdin, args=(input_queue,), daemon=True).start()
        return play(cpu, input_queue, args.steps_per_frame, args.frame_delay)


def play(cpu: CPU6502, input_queue: Queue[bytes | None], steps_per_frame: int, frame_delay: float) -> int:
    """Run `cpu` frame by frame, feeding it keys from `input_queue`. Returns the exit code of the host."""
    keys = KeyInput(cpu.memory)
    random_source = RandomByteSource()
    sampler = ScreenSampler()

    sys.stdout.write("\x1b[2J")
    while True:
        try:
            while (ch := input_queue.get_nowait()) is not None:
                if ch in STEERING_KEYS:
                    keys.press(ch)
            return 0
        except Empty:
            pass

        steps = run(cpu, random_source, max_steps=steps_per_frame)
        state = sampler.sample(cpu.memory)
        if state.changed:
            draw(state.frame)
        if steps < steps_per_frame:
            logging.getLogger(__name__).warning(f"CPU halted at ${cpu.pc:04x}")
            return 1
        time.sleep(frame_delay)


if __name__ == "__main__":
    sys.exit(main())
