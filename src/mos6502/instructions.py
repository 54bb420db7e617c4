"""Static description of the official 6502 instruction set."""

import enum
from dataclasses import dataclass
from types import MappingProxyType


class AddressingMode(enum.Enum):
    """Addressing mode of a 6502 instruction."""

    ACCUMULATOR = enum.auto()
    IMMEDIATE = enum.auto()
    ZERO_PAGE = enum.auto()
    ZERO_PAGE_X = enum.auto()
    ZERO_PAGE_Y = enum.auto()
    ABSOLUTE = enum.auto()
    ABSOLUTE_X = enum.auto()
    ABSOLUTE_Y = enum.auto()
    INDIRECT = enum.auto()
    INDIRECT_X = enum.auto()
    INDIRECT_Y = enum.auto()
    RELATIVE = enum.auto()
    IMPLIED = enum.auto()


OPERAND_SIZES: MappingProxyType[AddressingMode, int] = MappingProxyType({
    AddressingMode.ACCUMULATOR: 0,
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.INDIRECT: 2,
    AddressingMode.INDIRECT_X: 1,
    AddressingMode.INDIRECT_Y: 1,
    AddressingMode.RELATIVE: 1,
    AddressingMode.IMPLIED: 0,
})
"""Number of operand bytes following the opcode for each addressing mode."""


class Mnemonic(enum.Enum):
    """The 56 official 6502 mnemonics."""

    ADC = enum.auto()
    AND = enum.auto()
    ASL = enum.auto()
    BCC = enum.auto()
    BCS = enum.auto()
    BEQ = enum.auto()
    BIT = enum.auto()
    BMI = enum.auto()
    BNE = enum.auto()
    BPL = enum.auto()
    BRK = enum.auto()
    BVC = enum.auto()
    BVS = enum.auto()
    CLC = enum.auto()
    CLD = enum.auto()
    CLI = enum.auto()
    CLV = enum.auto()
    CMP = enum.auto()
    CPX = enum.auto()
    CPY = enum.auto()
    DEC = enum.auto()
    DEX = enum.auto()
    DEY = enum.auto()
    EOR = enum.auto()
    INC = enum.auto()
    INX = enum.auto()
    INY = enum.auto()
    JMP = enum.auto()
    JSR = enum.auto()
    LDA = enum.auto()
    LDX = enum.auto()
    LDY = enum.auto()
    LSR = enum.auto()
    NOP = enum.auto()
    ORA = enum.auto()
    PHA = enum.auto()
    PHP = enum.auto()
    PLA = enum.auto()
    PLP = enum.auto()
    ROL = enum.auto()
    ROR = enum.auto()
    RTI = enum.auto()
    RTS = enum.auto()
    SBC = enum.auto()
    SEC = enum.auto()
    SED = enum.auto()
    SEI = enum.auto()
    STA = enum.auto()
    STX = enum.auto()
    STY = enum.auto()
    TAX = enum.auto()
    TAY = enum.auto()
    TSX = enum.auto()
    TXA = enum.auto()
    TXS = enum.auto()
    TYA = enum.auto()


@dataclass(frozen=True)
class Instruction:
    """One entry of the instruction table."""

    opcode: int
    mnemonic: Mnemonic
    mode: AddressingMode
    cycles: int
    """Base cycle count. Informational only, page crossings and taken branches are not accounted for."""

    @property
    def length(self) -> int:
        """Number of bytes of the instruction including the opcode."""
        return 1 + OPERAND_SIZES[self.mode]


def _build_instructions() -> tuple[Instruction, ...]:
    m = Mnemonic
    a = AddressingMode
    table = [
        (0x69, m.ADC, a.IMMEDIATE, 2),
        (0x65, m.ADC, a.ZERO_PAGE, 3),
        (0x75, m.ADC, a.ZERO_PAGE_X, 4),
        (0x6d, m.ADC, a.ABSOLUTE, 4),
        (0x7d, m.ADC, a.ABSOLUTE_X, 4),
        (0x79, m.ADC, a.ABSOLUTE_Y, 4),
        (0x61, m.ADC, a.INDIRECT_X, 6),
        (0x71, m.ADC, a.INDIRECT_Y, 5),

        (0x29, m.AND, a.IMMEDIATE, 2),
        (0x25, m.AND, a.ZERO_PAGE, 3),
        (0x35, m.AND, a.ZERO_PAGE_X, 4),
        (0x2d, m.AND, a.ABSOLUTE, 4),
        (0x3d, m.AND, a.ABSOLUTE_X, 4),
        (0x39, m.AND, a.ABSOLUTE_Y, 4),
        (0x21, m.AND, a.INDIRECT_X, 6),
        (0x31, m.AND, a.INDIRECT_Y, 5),

        (0x0a, m.ASL, a.ACCUMULATOR, 2),
        (0x06, m.ASL, a.ZERO_PAGE, 5),
        (0x16, m.ASL, a.ZERO_PAGE_X, 6),
        (0x0e, m.ASL, a.ABSOLUTE, 6),
        (0x1e, m.ASL, a.ABSOLUTE_X, 7),

        (0x90, m.BCC, a.RELATIVE, 2),
        (0xb0, m.BCS, a.RELATIVE, 2),
        (0xf0, m.BEQ, a.RELATIVE, 2),
        (0x30, m.BMI, a.RELATIVE, 2),
        (0xd0, m.BNE, a.RELATIVE, 2),
        (0x10, m.BPL, a.RELATIVE, 2),
        (0x50, m.BVC, a.RELATIVE, 2),
        (0x70, m.BVS, a.RELATIVE, 2),

        (0x24, m.BIT, a.ZERO_PAGE, 3),
        (0x2c, m.BIT, a.ABSOLUTE, 4),

        (0x00, m.BRK, a.IMPLIED, 7),

        (0x18, m.CLC, a.IMPLIED, 2),
        (0xd8, m.CLD, a.IMPLIED, 2),
        (0x58, m.CLI, a.IMPLIED, 2),
        (0xb8, m.CLV, a.IMPLIED, 2),

        (0xc9, m.CMP, a.IMMEDIATE, 2),
        (0xc5, m.CMP, a.ZERO_PAGE, 3),
        (0xd5, m.CMP, a.ZERO_PAGE_X, 4),
        (0xcd, m.CMP, a.ABSOLUTE, 4),
        (0xdd, m.CMP, a.ABSOLUTE_X, 4),
        (0xd9, m.CMP, a.ABSOLUTE_Y, 4),
        (0xc1, m.CMP, a.INDIRECT_X, 6),
        (0xd1, m.CMP, a.INDIRECT_Y, 5),

        (0xe0, m.CPX, a.IMMEDIATE, 2),
        (0xe4, m.CPX, a.ZERO_PAGE, 3),
        (0xec, m.CPX, a.ABSOLUTE, 4),

        (0xc0, m.CPY, a.IMMEDIATE, 2),
        (0xc4, m.CPY, a.ZERO_PAGE, 3),
        (0xcc, m.CPY, a.ABSOLUTE, 4),

        (0xc6, m.DEC, a.ZERO_PAGE, 5),
        (0xd6, m.DEC, a.ZERO_PAGE_X, 6),
        (0xce, m.DEC, a.ABSOLUTE, 6),
        (0xde, m.DEC, a.ABSOLUTE_X, 7),

        (0xca, m.DEX, a.IMPLIED, 2),
        (0x88, m.DEY, a.IMPLIED, 2),

        (0x49, m.EOR, a.IMMEDIATE, 2),
        (0x45, m.EOR, a.ZERO_PAGE, 3),
        (0x55, m.EOR, a.ZERO_PAGE_X, 4),
        (0x4d, m.EOR, a.ABSOLUTE, 4),
        (0x5d, m.EOR, a.ABSOLUTE_X, 4),
        (0x59, m.EOR, a.ABSOLUTE_Y, 4),
        (0x41, m.EOR, a.INDIRECT_X, 6),
        (0x51, m.EOR, a.INDIRECT_Y, 5),

        (0xe6, m.INC, a.ZERO_PAGE, 5),
        (0xf6, m.INC, a.ZERO_PAGE_X, 6),
        (0xee, m.INC, a.ABSOLUTE, 6),
        (0xfe, m.INC, a.ABSOLUTE_X, 7),

        (0xe8, m.INX, a.IMPLIED, 2),
        (0xc8, m.INY, a.IMPLIED, 2),

        (0x4c, m.JMP, a.ABSOLUTE, 3),
        (0x6c, m.JMP, a.INDIRECT, 5),
        (0x20, m.JSR, a.ABSOLUTE, 6),

        (0xa9, m.LDA, a.IMMEDIATE, 2),
        (0xa5, m.LDA, a.ZERO_PAGE, 3),
        (0xb5, m.LDA, a.ZERO_PAGE_X, 4),
        (0xad, m.LDA, a.ABSOLUTE, 4),
        (0xbd, m.LDA, a.ABSOLUTE_X, 4),
        (0xb9, m.LDA, a.ABSOLUTE_Y, 4),
        (0xa1, m.LDA, a.INDIRECT_X, 6),
        (0xb1, m.LDA, a.INDIRECT_Y, 5),

        (0xa2, m.LDX, a.IMMEDIATE, 2),
        (0xa6, m.LDX, a.ZERO_PAGE, 3),
        (0xb6, m.LDX, a.ZERO_PAGE_Y, 4),
        (0xae, m.LDX, a.ABSOLUTE, 4),
        (0xbe, m.LDX, a.ABSOLUTE_Y, 4),

        (0xa0, m.LDY, a.IMMEDIATE, 2),
        (0xa4, m.LDY, a.ZERO_PAGE, 3),
        (0xb4, m.LDY, a.ZERO_PAGE_X, 4),
        (0xac, m.LDY, a.ABSOLUTE, 4),
        (0xbc, m.LDY, a.ABSOLUTE_X, 4),

        (0x4a, m.LSR, a.ACCUMULATOR, 2),
        (0x46, m.LSR, a.ZERO_PAGE, 5),
        (0x56, m.LSR, a.ZERO_PAGE_X, 6),
        (0x4e, m.LSR, a.ABSOLUTE, 6),
        (0x5e, m.LSR, a.ABSOLUTE_X, 7),

        (0xea, m.NOP, a.IMPLIED, 2),

        (0x09, m.ORA, a.IMMEDIATE, 2),
        (0x05, m.ORA, a.ZERO_PAGE, 3),
        (0x15, m.ORA, a.ZERO_PAGE_X, 4),
        (0x0d, m.ORA, a.ABSOLUTE, 4),
        (0x1d, m.ORA, a.ABSOLUTE_X, 4),
        (0x19, m.ORA, a.ABSOLUTE_Y, 4),
        (0x01, m.ORA, a.INDIRECT_X, 6),
        (0x11, m.ORA, a.INDIRECT_Y, 5),

        (0x48, m.PHA, a.IMPLIED, 3),
        (0x08, m.PHP, a.IMPLIED, 3),
        (0x68, m.PLA, a.IMPLIED, 4),
        (0x28, m.PLP, a.IMPLIED, 4),

        (0x2a, m.ROL, a.ACCUMULATOR, 2),
        (0x26, m.ROL, a.ZERO_PAGE, 5),
        (0x36, m.ROL, a.ZERO_PAGE_X, 6),
        (0x2e, m.ROL, a.ABSOLUTE, 6),
        (0x3e, m.ROL, a.ABSOLUTE_X, 7),

        (0x6a, m.ROR, a.ACCUMULATOR, 2),
        (0x66, m.ROR, a.ZERO_PAGE, 5),
        (0x76, m.ROR, a.ZERO_PAGE_X, 6),
        (0x6e, m.ROR, a.ABSOLUTE, 6),
        (0x7e, m.ROR, a.ABSOLUTE_X, 7),

        (0x40, m.RTI, a.IMPLIED, 6),
        (0x60, m.RTS, a.IMPLIED, 6),

        (0xe9, m.SBC, a.IMMEDIATE, 2),
        (0xe5, m.SBC, a.ZERO_PAGE, 3),
        (0xf5, m.SBC, a.ZERO_PAGE_X, 4),
        (0xed, m.SBC, a.ABSOLUTE, 4),
        (0xfd, m.SBC, a.ABSOLUTE_X, 4),
        (0xf9, m.SBC, a.ABSOLUTE_Y, 4),
        (0xe1, m.SBC, a.INDIRECT_X, 6),
        (0xf1, m.SBC, a.INDIRECT_Y, 5),

        (0x38, m.SEC, a.IMPLIED, 2),
        (0xf8, m.SED, a.IMPLIED, 2),
        (0x78, m.SEI, a.IMPLIED, 2),

        (0x85, m.STA, a.ZERO_PAGE, 3),
        (0x95, m.STA, a.ZERO_PAGE_X, 4),
        (0x8d, m.STA, a.ABSOLUTE, 4),
        (0x9d, m.STA, a.ABSOLUTE_X, 5),
        (0x99, m.STA, a.ABSOLUTE_Y, 5),
        (0x81, m.STA, a.INDIRECT_X, 6),
        (0x91, m.STA, a.INDIRECT_Y, 6),

        (0x86, m.STX, a.ZERO_PAGE, 3),
        (0x96, m.STX, a.ZERO_PAGE_Y, 4),
        (0x8e, m.STX, a.ABSOLUTE, 4),

        (0x84, m.STY, a.ZERO_PAGE, 3),
        (0x94, m.STY, a.ZERO_PAGE_X, 4),
        (0x8c, m.STY, a.ABSOLUTE, 4),

        (0xaa, m.TAX, a.IMPLIED, 2),
        (0xa8, m.TAY, a.IMPLIED, 2),
        (0xba, m.TSX, a.IMPLIED, 2),
        (0x8a, m.TXA, a.IMPLIED, 2),
        (0x9a, m.TXS, a.IMPLIED, 2),
        (0x98, m.TYA, a.IMPLIED, 2),
    ]
    return tuple(Instruction(opcode, mnemonic, mode, cycles) for opcode, mnemonic, mode, cycles in table)


def _build_opcode_table(instructions: tuple[Instruction, ...]) -> tuple[Instruction | None, ...]:
    slots: list[Instruction | None] = [None] * 256
    for instruction in instructions:
        if slots[instruction.opcode] is not None:
            msg = f"Opcode 0x{instruction.opcode:02x} has already been registered."
            raise ValueError(msg)
        slots[instruction.opcode] = instruction
    return tuple(slots)


INSTRUCTIONS = _build_instructions()
"""Every official opcode, grouped by mnemonic."""

OPCODE_TABLE = _build_opcode_table(INSTRUCTIONS)
"""Dense table indexed by opcode, `None` for undocumented and reserved opcodes."""


def lookup(opcode: int) -> Instruction | None:
    """Return the instruction for `opcode` or None if the opcode is not an official one."""
    return OPCODE_TABLE[opcode & 0xff]
