"""CPU Logic."""

import enum
import logging
from collections.abc import Callable
from functools import partial
from typing import Any, ClassVar, Literal, Protocol, cast, runtime_checkable

from mos6502 import alu
from mos6502.instructions import INSTRUCTIONS, OPCODE_TABLE, AddressingMode, Mnemonic
from mos6502.memory import Memory, MemoryAccessError, create_system_memory
from mos6502.utils import assert_never

logger = logging.getLogger(__name__)


class StepResult(enum.Enum):
    """Result of a CPU fetch/execute step."""

    NORMAL = enum.auto()
    BRK = enum.auto()
    UNKNOWN_OPCODE = enum.auto()
    HALTED = enum.auto()


@runtime_checkable
class MnemonicFunction(Protocol):
    """A callable with generic arguments that carries a `mnemonics` attribute."""

    mnemonics: list[tuple[Mnemonic, dict[str, Any]]]
    def __call__(self, *args: Any, **kwargs: Any) -> None:  # noqa: ANN401, D102
        ...


def handles(mnemonic: Mnemonic, **kwargs: Any) -> Callable[..., MnemonicFunction]:  # noqa: ANN401
    """Register a method as the handler of a mnemonic, called with a fixed set of keyword arguments."""
    def decorator(func: Callable[..., None]) -> MnemonicFunction:
        func = cast("MnemonicFunction", func)
        if not hasattr(func, "mnemonics"):
            func.mnemonics = []
        if mnemonic in (m for m, _ in func.mnemonics):
            msg = f"Mnemonic {mnemonic.name} has already been registered for this function."
            raise ValueError(msg)
        func.mnemonics.append((mnemonic, kwargs))
        return func
    return decorator


Handler = Callable[[AddressingMode, int], None]


class CPU6502:
    """A behavioral model of the MOS6502.

    Every handler is called with the addressing mode of the instruction and the effective address the mode resolved
    to. Handlers that take no operand ignore both.
    """

    STATUS_C = alu.STATUS_C
    STATUS_Z = alu.STATUS_Z
    STATUS_I = alu.STATUS_I
    STATUS_D = alu.STATUS_D
    STATUS_B = alu.STATUS_B
    STATUS_U = alu.STATUS_U
    STATUS_V = alu.STATUS_V
    STATUS_N = alu.STATUS_N

    STACK_ROOT: ClassVar[int] = 0x0100
    STACK_RESET: ClassVar[int] = 0xff

    RST_VECTOR: ClassVar[int] = 0xfffc

    PROGRAM_ORIGIN: ClassVar[int] = 0x0600
    MAX_PROGRAM_SIZE: ClassVar[int] = 0xc000

    def __init__(self, memory: Memory | None = None) -> None:
        """Initialize a CPU with memory.

        Args:
            memory: Address space of the CPU. Defaults to a zero-filled system memory map.

        """
        # Registers
        self.a: int = 0
        self.x: int = 0
        self.y: int = 0
        self.pc: int = 0
        self.sp: int = self.STACK_RESET
        self.status: int = 1 << self.STATUS_U
        self.cycles: int = 0

        self.memory = memory if memory is not None else create_system_memory()
        self.dispatch_table = self.build_dispatch_table()

    def build_dispatch_table(self) -> list[Handler | None]:
        """Return a list of 256 handlers indexed by opcode.

        Slots of opcodes that are not official and the slot of BRK, which `step` handles itself, are None.

        Raises:
            ValueError: If a mnemonic has more than one handler, or a mnemonic in the instruction table has none.

        """
        handlers: dict[Mnemonic, Handler] = {}
        for attr_name in dir(self):
            attr = getattr(self, attr_name)
            func = getattr(attr, "__func__", attr)

            if not isinstance(func, MnemonicFunction):
                continue

            for mnemonic, kwargs in func.mnemonics:
                if mnemonic in handlers:
                    msg = f"Mnemonic {mnemonic.name} has already been registered."
                    raise ValueError(msg)
                handlers[mnemonic] = partial(attr, **kwargs)

        missing = {instruction.mnemonic for instruction in INSTRUCTIONS} - handlers.keys() - {Mnemonic.BRK}
        if missing:
            msg = f"No handler registered for {', '.join(sorted(m.name for m in missing))}."
            raise ValueError(msg)

        return [None if instruction is None else handlers.get(instruction.mnemonic) for instruction in OPCODE_TABLE]

    def load(self, program: bytes, origin: int = PROGRAM_ORIGIN) -> None:
        """Copy a program into memory and point the reset vector at it.

        Args:
            program: Raw 6502 machine code.
            origin: Address of the first program byte.

        Raises:
            ValueError: If the program is larger than `MAX_PROGRAM_SIZE`.

        """
        if len(program) > self.MAX_PROGRAM_SIZE:
            msg = f"Program of {len(program)} bytes exceeds the maximum of {self.MAX_PROGRAM_SIZE} bytes."
            raise ValueError(msg)
        for offset, byte in enumerate(program):
            self.memory.write(origin + offset, byte)
        self.memory.write_word(self.RST_VECTOR, origin)
        logger.info(f"Loaded {len(program)} bytes at ${origin:04x}")

    def reset(self) -> None:
        """Reinitialize the registers and continue at the address stored in the reset vector."""
        self.a = 0
        self.x = 0
        self.y = 0
        self.status = 1 << self.STATUS_U
        self.sp = self.STACK_RESET
        self.cycles = 0
        self.pc = self.memory.read_word(self.RST_VECTOR)

    def step(self) -> StepResult:
        """Step one CPU tick.

        This function executes the next CPU instruction. When a memory access fails while the instruction executes,
        the registers are restored to their values after the operand fetch, so the instruction has no effect besides
        advancing the program counter. A failed opcode or operand fetch halts the CPU.
        """
        try:
            opcode = self.memory.read(self.pc)
        except MemoryAccessError:
            logger.warning(f"Could not fetch opcode at ${self.pc:04x}")
            return StepResult.HALTED

        opcode_address = self.pc
        self.pc = (self.pc + 1) & 0xffff
        instruction = OPCODE_TABLE[opcode]
        if instruction is None:
            logger.warning(f"Unhandled opcode 0x{opcode:02x} at ${opcode_address:04x}")
            return StepResult.UNKNOWN_OPCODE

        # BRK pushes nothing and takes no vector
        if instruction.mnemonic is Mnemonic.BRK:
            return StepResult.BRK

        try:
            address = self.resolve_address(instruction.mode)
        except MemoryAccessError:
            logger.warning(f"Could not fetch operand of {instruction.mnemonic.name} at ${opcode_address:04x}")
            return StepResult.HALTED

        handler = cast("Handler", self.dispatch_table[opcode])

        snapshot = self.registers()
        try:
            self.cycles += instruction.cycles
            handler(instruction.mode, address)
        except MemoryAccessError as e:
            logger.warning(f"{instruction.mnemonic.name} at ${opcode_address:04x} skipped: {e}")
            self.restore_registers(snapshot)

        return StepResult.NORMAL

    def registers(self) -> tuple[int, int, int, int, int, int, int]:
        """Return the register file as `(a, x, y, pc, sp, status, cycles)`."""
        return self.a, self.x, self.y, self.pc, self.sp, self.status, self.cycles

    def restore_registers(self, registers: tuple[int, int, int, int, int, int, int]) -> None:
        """Restore a register file returned by `registers`."""
        self.a, self.x, self.y, self.pc, self.sp, self.status, self.cycles = registers

    def flag(self, flag_index: int) -> int:
        """Return the status flag at `flag_index` as 0 or 1."""
        return alu.get_flag(self.status, flag_index)

    def set_flag(self, flag_index: int, value: int | bool) -> None:  # noqa: FBT001
        """Set the status flag at `flag_index` to `value`."""
        self.status = alu.set_flag(self.status, flag_index, value)

    def update_zero_and_negative_flags(self, result: int) -> None:
        """Update the zero (Z) and negative (N) flags of the status register based on the result of an operation.

        Args:
            result: Byte resulting from an operation that updates the status register.

        """
        self.status = alu.update_zero_negative(self.status, result)

    def fetch_byte(self) -> int:
        """Read the byte at the program counter and advance past it."""
        value = self.memory.read(self.pc)
        self.pc = (self.pc + 1) & 0xffff
        return value

    def fetch_word(self) -> int:
        """Read the little-endian word at the program counter and advance past it."""
        lo = self.fetch_byte()
        hi = self.fetch_byte()
        return (hi << 8) | lo

    def _read_pointer(self, lo_address: int, hi_address: int) -> int:
        """Return the word stored at the two given addresses, 0 if they can't be read."""
        try:
            return (self.memory.read(hi_address) << 8) | self.memory.read(lo_address)
        except MemoryAccessError:
            logger.warning(f"Could not read pointer at ${lo_address:04x}")
            return 0

    def resolve_address(self, mode: AddressingMode) -> int:
        """Resolve the effective address for a given addressing mode.

        The program counter is advanced past the operand bytes of the mode. Indexed absolute and indirect indexed
        addresses are not wrapped to 16 bits, an index that carries past $FFFF yields an address that fails on access.

        Args:
            mode: The addressing mode to resolve.

        Returns:
            addr: The effective memory address. Zero for modes without a memory operand.

        """
        addr: int
        match mode:
            case AddressingMode.IMMEDIATE:
                addr = self.pc
                self.pc = (self.pc + 1) & 0xffff
            case AddressingMode.ZERO_PAGE:
                addr = self.fetch_byte()
            case AddressingMode.ZERO_PAGE_X:
                addr = (self.fetch_byte() + self.x) & 0xff
            case AddressingMode.ZERO_PAGE_Y:
                addr = (self.fetch_byte() + self.y) & 0xff
            case AddressingMode.ABSOLUTE:
                addr = self.fetch_word()
            case AddressingMode.ABSOLUTE_X:
                addr = self.fetch_word() + self.x
            case AddressingMode.ABSOLUTE_Y:
                addr = self.fetch_word() + self.y
            case AddressingMode.INDIRECT:
                pointer = self.fetch_word()
                # this reproduces the NMOS 6502's hardware bug
                pointer_incremented = (pointer & 0xff00) | ((pointer + 1) & 0x00ff)
                addr = self._read_pointer(pointer, pointer_incremented)
            case AddressingMode.INDIRECT_X:
                pointer = (self.fetch_byte() + self.x) & 0xff
                addr = self._read_pointer(pointer, (pointer + 1) & 0xff)
            case AddressingMode.INDIRECT_Y:
                pointer = self.fetch_byte()
                addr = self._read_pointer(pointer, (pointer + 1) & 0xff) + self.y
            case AddressingMode.RELATIVE:
                offset = self.fetch_byte()
                # convert negative offsets to signed values
                if offset > 0x7f:  # noqa: PLR2004
                    offset -= 0x100
                addr = (self.pc + offset) & 0xffff
            case AddressingMode.ACCUMULATOR | AddressingMode.IMPLIED:
                addr = 0
            case _:
                assert_never(mode)

        return addr

    def operand_value(self, mode: AddressingMode, address: int) -> int:
        """Return the operand of an instruction given its addressing mode and resolved address.

        The accumulator is the operand in accumulator mode, implied instructions have an operand of zero. A memory
        operand that can't be read is zero as well.
        """
        match mode:
            case AddressingMode.ACCUMULATOR:
                return self.a
            case AddressingMode.IMPLIED:
                return 0
            case _:
                try:
                    return self.memory.read(address)
                except MemoryAccessError:
                    logger.warning(f"Could not read operand at ${address:04x}")
                    return 0

    def push_byte_to_stack(self, byte: int) -> None:
        """Push a byte to the stack and update stack pointer.

        Note: This method does not update the status register. The stack pointer wraps around within the stack page.

        Args:
            byte: Byte to push onto the stack.

        """
        self.memory.write(self.STACK_ROOT + self.sp, byte)
        self.sp = (self.sp - 1) & 0xff

    def pull_byte_from_stack(self) -> int:
        """Pull a byte from the stack and update the stack pointer.

        Note: This method does not update the status register. The stack pointer wraps around within the stack page.

        Returns:
            byte: Byte pulled from the stack.

        """
        self.sp = (self.sp + 1) & 0xff
        return self.memory.read(self.STACK_ROOT + self.sp)

    def push_word_to_stack(self, word: int) -> None:
        """Push a 16 bit word to the stack, high byte first."""
        self.push_byte_to_stack((word >> 8) & 0xff)
        self.push_byte_to_stack(word & 0xff)

    def pull_word_from_stack(self) -> int:
        """Pull a 16 bit word from the stack, low byte first."""
        lo = self.pull_byte_from_stack()
        hi = self.pull_byte_from_stack()
        return (hi << 8) | lo

    # System instructions

    @handles(Mnemonic.BPL, flag_index=STATUS_N, flag_value=0)
    @handles(Mnemonic.BMI, flag_index=STATUS_N, flag_value=1)
    @handles(Mnemonic.BVC, flag_index=STATUS_V, flag_value=0)
    @handles(Mnemonic.BVS, flag_index=STATUS_V, flag_value=1)
    @handles(Mnemonic.BCC, flag_index=STATUS_C, flag_value=0)
    @handles(Mnemonic.BCS, flag_index=STATUS_C, flag_value=1)
    @handles(Mnemonic.BNE, flag_index=STATUS_Z, flag_value=0)
    @handles(Mnemonic.BEQ, flag_index=STATUS_Z, flag_value=1)
    def branch(self, mode: AddressingMode, address: int, flag_index: int, flag_value: int) -> None:  # noqa: ARG002
        """Branch to the resolved relative address if specified flag is set or clear.

        Args:
            mode: Addressing mode, always relative.
            address: Branch target.
            flag_index: Index of the flag in the status register to check.
            flag_value: The value the flag should have for the branch to be taken (0 or 1).

        """
        if self.flag(flag_index) == flag_value:
            self.pc = address

    @handles(Mnemonic.JMP)
    def jmp(self, mode: AddressingMode, address: int) -> None:  # noqa: ARG002
        """Execute the JuMP (JMP) instruction.

        Note: In indirect mode the resolved address carries the hardware bug of the original NMOS 6502 in which the
        high byte of the target address is fetched from the beginning of the same page when the low byte is 0xff.
        """
        self.pc = address

    @handles(Mnemonic.JSR)
    def jsr(self, mode: AddressingMode, address: int) -> None:  # noqa: ARG002
        """Execute the Jump to SubRoutine (JSR) instruction."""
        # point to last byte of jsr instruction
        return_addr = (self.pc - 1) & 0xffff
        self.push_word_to_stack(return_addr)
        self.pc = address

    @handles(Mnemonic.NOP)
    def nop(self, *_: object) -> None:
        """Execute No OPeration (NOP) instruction."""

    @handles(Mnemonic.RTS)
    def rts(self, *_: object) -> None:
        """Execute the ReTurn from Subroutine (RTS) instruction."""
        self.pc = (self.pull_word_from_stack() + 1) & 0xffff

    @handles(Mnemonic.RTI)
    def rti(self, *_: object) -> None:
        """Execute the ReTurn from Interrupt (RTI) instruction."""
        self.status = self.pull_byte_from_stack() | (1 << self.STATUS_U)
        self.pc = self.pull_word_from_stack()

    # Flag instructions

    @handles(Mnemonic.CLC)
    def clc(self, *_: object) -> None:
        """Execute the CLear Carry (CLC) instruction."""
        self.set_flag(self.STATUS_C, 0)

    @handles(Mnemonic.SEC)
    def sec(self, *_: object) -> None:
        """Execute the SEt Carry (SEC) instruction."""
        self.set_flag(self.STATUS_C, 1)

    @handles(Mnemonic.CLI)
    def cli(self, *_: object) -> None:
        """Execute the CLear Interrupt (CLI) instruction."""
        self.set_flag(self.STATUS_I, 0)

    @handles(Mnemonic.SEI)
    def sei(self, *_: object) -> None:
        """Execute the SEt Interrupt (SEI) instruction."""
        self.set_flag(self.STATUS_I, 1)

    @handles(Mnemonic.CLD)
    def cld(self, *_: object) -> None:
        """Execute the CLear Decimal (CLD) instruction."""
        self.set_flag(self.STATUS_D, 0)

    @handles(Mnemonic.SED)
    def sed(self, *_: object) -> None:
        """Execute the SEt Decimal (SED) instruction.

        The flag is stored, but arithmetic stays binary.
        """
        self.set_flag(self.STATUS_D, 1)

    @handles(Mnemonic.CLV)
    def clv(self, *_: object) -> None:
        """Execute the CLear oVerflow (CLV) instruction."""
        self.set_flag(self.STATUS_V, 0)

    # Register loading

    @handles(Mnemonic.LDA)
    def lda(self, mode: AddressingMode, address: int) -> None:
        """Execute LDA instruction with specified addressing mode."""
        self.a = self.operand_value(mode, address)
        self.update_zero_and_negative_flags(self.a)

    @handles(Mnemonic.LDX)
    def ldx(self, mode: AddressingMode, address: int) -> None:
        """Execute LDX instruction with specified addressing mode."""
        self.x = self.operand_value(mode, address)
        self.update_zero_and_negative_flags(self.x)

    @handles(Mnemonic.LDY)
    def ldy(self, mode: AddressingMode, address: int) -> None:
        """Execute LDY instruction with specified addressing mode."""
        self.y = self.operand_value(mode, address)
        self.update_zero_and_negative_flags(self.y)

    # Register storing

    @handles(Mnemonic.STA)
    def sta(self, mode: AddressingMode, address: int) -> None:  # noqa: ARG002
        """Execute the STore A (STA) instruction."""
        self.memory.write(address, self.a)

    @handles(Mnemonic.STX)
    def stx(self, mode: AddressingMode, address: int) -> None:  # noqa: ARG002
        """Execute the STore X (STX) instruction."""
        self.memory.write(address, self.x)

    @handles(Mnemonic.STY)
    def sty(self, mode: AddressingMode, address: int) -> None:  # noqa: ARG002
        """Execute the STore Y (STY) instruction."""
        self.memory.write(address, self.y)

    # Register transfer

    @handles(Mnemonic.TAX)
    def tax(self, *_: object) -> None:
        """Execute the Transfer Accumulator to X (TAX) instruction."""
        self.x = self.a
        self.update_zero_and_negative_flags(self.x)

    @handles(Mnemonic.TAY)
    def tay(self, *_: object) -> None:
        """Execute the Transfer Accumulator to Y (TAY) instruction."""
        self.y = self.a
        self.update_zero_and_negative_flags(self.y)

    @handles(Mnemonic.TSX)
    def tsx(self, *_: object) -> None:
        """Execute the Transfer Stack Pointer to X (TSX) instruction."""
        self.x = self.sp
        self.update_zero_and_negative_flags(self.x)

    @handles(Mnemonic.TXA)
    def txa(self, *_: object) -> None:
        """Execute the Transfer X to Accumulator (TXA) instruction."""
        self.a = self.x
        self.update_zero_and_negative_flags(self.a)

    @handles(Mnemonic.TXS)
    def txs(self, *_: object) -> None:
        """Execute the Transfer X to Stack Pointer (TXS) instruction."""
        self.sp = self.x

    @handles(Mnemonic.TYA)
    def tya(self, *_: object) -> None:
        """Execute the Transfer Y to Accumulator (TYA) instruction."""
        self.a = self.y
        self.update_zero_and_negative_flags(self.a)

    # Stack instructions

    @handles(Mnemonic.PHA)
    def pha(self, *_: object) -> None:
        """Execute the PusH Accumulator (PHA) instruction."""
        self.push_byte_to_stack(self.a)

    @handles(Mnemonic.PHP)
    def php(self, *_: object) -> None:
        """Execute the PusH Processor status (PHP) instruction."""
        status_to_push = self.status | (1 << self.STATUS_B) | (1 << self.STATUS_U)
        self.push_byte_to_stack(status_to_push)

    @handles(Mnemonic.PLA)
    def pla(self, *_: object) -> None:
        """Execute the PuLl Accumulator (PLA) instruction."""
        self.a = self.pull_byte_from_stack()
        self.update_zero_and_negative_flags(self.a)

    @handles(Mnemonic.PLP)
    def plp(self, *_: object) -> None:
        """Execute the PuLl Processor status (PLP) instruction.

        The Break bit is not taken from the stack, the CPU keeps the Break bit it had before the pull.
        """
        break_mask = 1 << self.STATUS_B
        pulled_status = self.pull_byte_from_stack() | (1 << self.STATUS_U)
        self.status = (pulled_status & ~break_mask) | (self.status & break_mask)

    # Unary arithmetic

    @handles(Mnemonic.INC, delta=1)
    @handles(Mnemonic.DEC, delta=-1)
    def step_memory(self, mode: AddressingMode, address: int, delta: int) -> None:  # noqa: ARG002
        """Execute the INCrement (INC) and DECrement (DEC) instructions."""
        byte = (self.memory.read(address) + delta) & 0xff
        self.memory.write(address, byte)
        self.update_zero_and_negative_flags(byte)

    @handles(Mnemonic.DEX)
    def dex(self, *_: object) -> None:
        """Execute the DEcrement X (DEX) instruction."""
        self.x = (self.x - 1) & 0xff
        self.update_zero_and_negative_flags(self.x)

    @handles(Mnemonic.DEY)
    def dey(self, *_: object) -> None:
        """Execute the DEcrement Y (DEY) instruction."""
        self.y = (self.y - 1) & 0xff
        self.update_zero_and_negative_flags(self.y)

    @handles(Mnemonic.INX)
    def inx(self, *_: object) -> None:
        """Execute the INcrement X (INX) instruction."""
        self.x = (self.x + 1) & 0xff
        self.update_zero_and_negative_flags(self.x)

    @handles(Mnemonic.INY)
    def iny(self, *_: object) -> None:
        """Execute the INcrement Y (INY) instruction."""
        self.y = (self.y + 1) & 0xff
        self.update_zero_and_negative_flags(self.y)

    @handles(Mnemonic.ASL, operation=alu.shift_left)
    @handles(Mnemonic.LSR, operation=alu.shift_right)
    def shift(self, mode: AddressingMode, address: int, operation: Callable[[int], tuple[int, int]]) -> None:
        """Execute the Arithmetic Shift Left (ASL) and Logic Shift Right (LSR) instructions.

        In accumulator mode the shift is performed on the accumulator, otherwise on the byte at `address`.
        """
        self._read_modify_write(mode, address, operation)

    @handles(Mnemonic.ROL, operation=alu.rotate_left)
    @handles(Mnemonic.ROR, operation=alu.rotate_right)
    def rotate(self, mode: AddressingMode, address: int, operation: Callable[[int, int], tuple[int, int]]) -> None:
        """Execute the Rotate Left (ROL) and Rotate Right (ROR) instructions.

        In accumulator mode the rotation is performed on the accumulator, otherwise on the byte at `address`.
        """
        self._read_modify_write(mode, address, partial(operation, carry_in=self.flag(self.STATUS_C)))

    def _read_modify_write(
        self,
        mode: AddressingMode,
        address: int,
        operation: Callable[[int], tuple[int, int]],
    ) -> None:
        value: int
        carry: int
        if mode is AddressingMode.ACCUMULATOR:
            value, carry = operation(self.a)
            self.a = value
        else:
            value, carry = operation(self.memory.read(address))
            self.memory.write(address, value)

        self.set_flag(self.STATUS_C, carry)
        self.update_zero_and_negative_flags(value)

    # Binary arithmetic

    @handles(Mnemonic.ADC)
    def adc(self, mode: AddressingMode, address: int) -> None:
        """Execute the ADd with Carry (ADC) instruction."""
        operand = self.operand_value(mode, address)
        result, carry, overflow = alu.add_with_carry(self.a, operand, self.flag(self.STATUS_C))
        self._commit_arithmetic(result, carry, overflow)

    @handles(Mnemonic.SBC)
    def sbc(self, mode: AddressingMode, address: int) -> None:
        """Execute the SuBtract with Carry / borrow (SBC) instruction."""
        operand = self.operand_value(mode, address)
        result, carry, overflow = alu.subtract_with_carry(self.a, operand, self.flag(self.STATUS_C))
        self._commit_arithmetic(result, carry, overflow)

    def _commit_arithmetic(self, result: int, carry: int, overflow: int) -> None:
        self.a = result
        self.set_flag(self.STATUS_C, carry)
        self.set_flag(self.STATUS_V, overflow)
        self.update_zero_and_negative_flags(result)

    @handles(Mnemonic.AND)
    def and_op(self, mode: AddressingMode, address: int) -> None:
        """Execute the AND instruction."""
        self.a &= self.operand_value(mode, address)
        self.update_zero_and_negative_flags(self.a)

    @handles(Mnemonic.EOR)
    def eor(self, mode: AddressingMode, address: int) -> None:
        """Execute the Exclusive OR instruction."""
        self.a ^= self.operand_value(mode, address)
        self.update_zero_and_negative_flags(self.a)

    @handles(Mnemonic.ORA)
    def ora(self, mode: AddressingMode, address: int) -> None:
        """Execute the OR with Accumulator instruction."""
        self.a |= self.operand_value(mode, address)
        self.update_zero_and_negative_flags(self.a)

    # Binary logic

    @handles(Mnemonic.BIT)
    def bit(self, mode: AddressingMode, address: int) -> None:
        """Execute the BIT test (BIT) instruction."""
        operand = self.operand_value(mode, address)
        self.set_flag(self.STATUS_Z, (operand & self.a) == 0)
        self.set_flag(self.STATUS_N, (operand >> 7) & 1)
        self.set_flag(self.STATUS_V, (operand >> 6) & 1)

    @handles(Mnemonic.CMP, register="a")
    @handles(Mnemonic.CPX, register="x")
    @handles(Mnemonic.CPY, register="y")
    def compare(self, mode: AddressingMode, address: int, register: Literal["a", "x", "y"]) -> None:
        """Execute the compare instruction (CMP, CPX, CPY)."""
        if register == "a":
            register_value = self.a
        elif register == "x":
            register_value = self.x
        elif register == "y":
            register_value = self.y
        else:
            msg = f"Invalid register '{register}'."
            raise ValueError(msg)

        result, carry = alu.compare(register_value, self.operand_value(mode, address))
        self.set_flag(self.STATUS_C, carry)
        self.update_zero_and_negative_flags(result)


TraceCallback = Callable[[CPU6502], bool | None]
"""Host hook called with the CPU before every instruction fetch. Returning False stops `run`."""


def run(
    cpu: CPU6502,
    callback: TraceCallback | None = None,
    max_steps: int | None = None,
) -> int:
    """Let a CPU run it's program.

    The loop has no stop condition of its own besides an opcode fetch failing. BRK and unknown opcodes are stepped
    over.

    Args:
        cpu: CPU to let run.
        callback: Called with the CPU before every instruction fetch. The loop stops when it returns False.
        max_steps: Maximum number of instructions to execute. If set to None there is no limit on number of
        instructions.

    Returns:
        steps: Number of instructions executed.

    """
    steps = 0
    while max_steps is None or steps < max_steps:
        if callback is not None and callback(cpu) is False:
            break

        if cpu.step() == StepResult.HALTED:
            break
        steps += 1

    logger.debug(f"Stopped after {steps} steps at ${cpu.pc:04x}")
    return steps


def load_and_run(
    cpu: CPU6502,
    program: bytes,
    callback: TraceCallback | None = None,
    max_steps: int | None = None,
) -> int:
    """Load a program at the default origin, reset the CPU and run it.

    See `run` for the meaning of `callback` and `max_steps`.
    """
    cpu.load(program)
    cpu.reset()
    return run(cpu, callback, max_steps)
