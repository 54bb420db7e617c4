"""Host input devices for emulated programs."""

import logging
import sys
import termios
import tty
from collections.abc import Iterator
from contextlib import contextmanager
from queue import Queue
from typing import ClassVar

import numpy as np

from mos6502.cpu import CPU6502
from mos6502.memory import Memory

logger = logging.getLogger(__name__)


class KeyInput:
    """Keyboard latch that stores the last pressed key as an ASCII byte in memory."""

    ADDRESS: ClassVar[int] = 0x00ff

    def __init__(self, memory: Memory, address: int = ADDRESS) -> None:  # noqa: D107
        self.memory = memory
        self.address = address

    def press(self, key: bytes | str) -> None:
        """Latch a single character key.

        Raises:
            ValueError: If `key` is not a single ASCII character.

        """
        if len(key) != 1 or not key.isascii():
            msg = f"Expected a single ASCII character, got {key!r}."
            raise ValueError(msg)
        logger.debug(f"Key {key!r} latched at ${self.address:04x}")
        self.memory.write(self.address, ord(key))


class RandomByteSource:
    """Step callback that stores a fresh random byte between 1 and 255 in memory before every instruction."""

    ADDRESS: ClassVar[int] = 0x00fe

    def __init__(self, address: int = ADDRESS, seed: int | None = None) -> None:
        """Initialize the source.

        Args:
            address: Memory location the random byte is written to.
            seed: Seed of the random generator, for reproducible runs.

        """
        self.address = address
        self.rng = np.random.default_rng(seed)

    def __call__(self, cpu: CPU6502) -> bool:
        """Write a new random byte into the memory of `cpu`. Never asks `run` to stop."""
        cpu.memory.write(self.address, int(self.rng.integers(1, 256)))
        return True


@contextmanager
def restored_terminal() -> Iterator[None]:
    """Save the settings of the terminal on stdin and restore them when the block exits, also on exceptions.

    A daemon thread running `monitor_stdin` is killed at interpreter exit without restoring the terminal, so hosts
    wrap their main loop in this as well.
    """
    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def monitor_stdin(input_queue: Queue[bytes | None]) -> None:
    """Set terminal to raw mode and put incoming bytes on stdin into a queue.

    When this function receives a Ctrl+C (0x03) or encounters an exception, it restores the terminal to its
    previous state. A None on the queue marks the end of input.
    """
    with restored_terminal():
        tty.setraw(sys.stdin.fileno())
        while True:
            ch = sys.stdin.buffer.read(1)
            if ch in (b"\x03", b""):  # Ctrl+C / End of Text, or stdin closed
                input_queue.put(None)
                return
            input_queue.put(ch)
