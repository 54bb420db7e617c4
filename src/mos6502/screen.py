"""Sampling of the memory-mapped screen into RGB frames."""

from dataclasses import dataclass

import numpy as np

from mos6502.memory import Memory

SCREEN_START = 0x0200
SCREEN_WIDTH = 32
SCREEN_HEIGHT = 32

# Indexed by the low nibble of a screen cell.
PALETTE: np.ndarray = np.array([
    (0, 0, 0),        # black
    (255, 255, 255),  # white
    (128, 128, 128),  # grey
    (255, 0, 0),      # red
    (0, 255, 0),      # green
    (0, 0, 255),      # blue
    (255, 0, 255),    # magenta
    (255, 255, 0),    # yellow
    (0, 255, 255),    # cyan
    (128, 128, 128),
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
    (255, 0, 255),
    (255, 255, 0),
    (0, 255, 255),
], dtype=np.uint8)


@dataclass(frozen=True)
class ScreenState:
    """A sampled frame and whether it differs from the frame sampled before it."""

    frame: np.ndarray
    """RGB pixels of shape `(height, width, 3)` and dtype `uint8`."""

    changed: bool


def render_frame(
    memory: Memory,
    start: int = SCREEN_START,
    width: int = SCREEN_WIDTH,
    height: int = SCREEN_HEIGHT,
    palette: np.ndarray = PALETTE,
) -> np.ndarray:
    """Read a row-major grid of screen cells and map them through the palette.

    Raises:
        MemoryAccessError: If the screen window exceeds `memory`.

    """
    cells = np.frombuffer(memory.read_bytes(start, width * height), dtype=np.uint8)
    return palette[cells & 0x0f].reshape(height, width, 3)


def blank_screen_state(width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT) -> ScreenState:
    """Return an all black, unchanged state, the state of a screen before its first sample."""
    return ScreenState(np.zeros((height, width, 3), dtype=np.uint8), changed=False)


def read_screen_state(memory: Memory, previous: ScreenState | None = None) -> ScreenState:
    """Sample the default screen window and compare it to `previous`.

    Without a previous state the frame is compared to a black screen.
    """
    if previous is None:
        previous = blank_screen_state()
    frame = render_frame(memory)
    return ScreenState(frame, not np.array_equal(frame, previous.frame))


class ScreenSampler:
    """Samples a screen window and remembers the last frame for change detection."""

    def __init__(
        self,
        start: int = SCREEN_START,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        palette: np.ndarray = PALETTE,
    ) -> None:
        """Initialize a sampler for a screen window.

        Args:
            start: Address of the top left cell.
            width: Number of cells per row.
            height: Number of rows.
            palette: Array of 16 RGB colors, indexed by the low nibble of a cell.

        Raises:
            ValueError: If the palette does not have the shape `(16, 3)`.

        """
        palette = np.asarray(palette, dtype=np.uint8)
        if palette.shape != (16, 3):
            msg = f"Palette must have shape (16, 3), got {palette.shape}."
            raise ValueError(msg)
        self.start = start
        self.width = width
        self.height = height
        self.palette = palette
        self.state = blank_screen_state(width, height)

    def sample(self, memory: Memory) -> ScreenState:
        """Return the current frame of the screen window in `memory`."""
        frame = render_frame(memory, self.start, self.width, self.height, self.palette)
        self.state = ScreenState(frame, not np.array_equal(frame, self.state.frame))
        return self.state
