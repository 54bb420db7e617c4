"""Disassembly and per-step execution traces."""

import logging
from collections import deque
from collections.abc import Iterator

from mos6502.cpu import CPU6502
from mos6502.instructions import AddressingMode, lookup
from mos6502.memory import Memory, MemoryAccessError
from mos6502.utils import assert_never

logger = logging.getLogger(__name__)


def format_operand(mode: AddressingMode, operand: bytes, next_pc: int) -> str:
    """Format the operand bytes of an instruction in assembler syntax.

    Args:
        mode: Addressing mode of the instruction.
        operand: Operand bytes following the opcode, little-endian.
        next_pc: Address of the instruction after this one, the base of relative branches.

    """
    value = int.from_bytes(operand, "little")
    match mode:
        case AddressingMode.IMPLIED:
            return ""
        case AddressingMode.ACCUMULATOR:
            return "A"
        case AddressingMode.IMMEDIATE:
            return f"#${value:02X}"
        case AddressingMode.ZERO_PAGE:
            return f"${value:02X}"
        case AddressingMode.ZERO_PAGE_X:
            return f"${value:02X},X"
        case AddressingMode.ZERO_PAGE_Y:
            return f"${value:02X},Y"
        case AddressingMode.ABSOLUTE:
            return f"${value:04X}"
        case AddressingMode.ABSOLUTE_X:
            return f"${value:04X},X"
        case AddressingMode.ABSOLUTE_Y:
            return f"${value:04X},Y"
        case AddressingMode.INDIRECT:
            return f"(${value:04X})"
        case AddressingMode.INDIRECT_X:
            return f"(${value:02X},X)"
        case AddressingMode.INDIRECT_Y:
            return f"(${value:02X}),Y"
        case AddressingMode.RELATIVE:
            offset = value - 0x100 if value > 0x7f else value  # noqa: PLR2004
            return f"${(next_pc + offset) & 0xffff:04X}"
        case _:
            assert_never(mode)


def disassemble(memory: Memory, address: int) -> tuple[str, int]:
    """Disassemble the instruction at `address`.

    Unknown opcodes disassemble to a `.byte` directive, bytes that can't be read to `???`.

    Returns:
        (text, length): Hex dump and assembler text of the instruction, and its length in bytes.

    """
    try:
        opcode = memory.read(address)
        instruction = lookup(opcode)
        if instruction is None:
            return f"{opcode:02X}        .byte ${opcode:02X}", 1
        operand = memory.read_bytes(address + 1, instruction.length - 1)
    except MemoryAccessError:
        return "??        ???", 1

    dump = " ".join(f"{b:02X}" for b in bytes([opcode]) + operand)
    text = f"{instruction.mnemonic.name} {format_operand(instruction.mode, operand, address + instruction.length)}"
    return f"{dump:<8}  {text.rstrip()}", instruction.length


def format_state(cpu: CPU6502) -> str:
    """Format the instruction at the program counter and the register file of `cpu` as one line."""
    text, _ = disassemble(cpu.memory, cpu.pc)
    return (
        f"{cpu.pc:04X}  {text:<32}"
        f"A:{cpu.a:02X} X:{cpu.x:02X} Y:{cpu.y:02X} P:{cpu.status:02X} SP:{cpu.sp:02X} CYC:{cpu.cycles}"
    )


class TraceRecorder:
    """Step callback that keeps the most recent trace lines in a ring buffer.

    Every recorded line is also logged at DEBUG level. An instance can be passed as `callback` to `run`, optionally
    stopping the loop once the program counter reaches `stop_at`.
    """

    def __init__(self, capacity: int = 256, stop_at: int | None = None) -> None:
        """Initialize an empty recorder.

        Args:
            capacity: Number of lines to keep, older lines are dropped.
            stop_at: Program counter at which the recorder asks `run` to stop. Never stops if None.

        Raises:
            ValueError: If capacity is not positive.

        """
        if capacity <= 0:
            msg = "Trace capacity must be positive."
            raise ValueError(msg)
        self.stop_at = stop_at
        self._lines: deque[str] = deque(maxlen=capacity)

    def __call__(self, cpu: CPU6502) -> bool:
        """Record the state of `cpu` and return False when it reached `stop_at`."""
        line = format_state(cpu)
        self._lines.append(line)
        logger.debug(line)
        return cpu.pc != self.stop_at

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    @property
    def last(self) -> str | None:
        """The most recently recorded line."""
        return self._lines[-1] if self._lines else None

    def clear(self) -> None:
        """Drop all recorded lines."""
        self._lines.clear()
