"""Test instructions for performing binary logic, i.e., BIT, CMP, CPX, CPY, and the shifts."""

import pytest

from mos6502.cpu import CPU6502
from mos6502.instructions import AddressingMode
from tests.unit.cpu import ABSOLUTE_LOCATION, ZERO_PAGE_LOCATION


@pytest.mark.parametrize(
    ("a", "operand", "n", "z", "v"),
    [
        (0x00, 0x00, 0, 1, 0),
        (0x00, 0x80, 1, 1, 0),
        (0x00, 0x40, 0, 1, 1),
        (0xff, 0xfe, 1, 0, 1),
    ],
    ids=[
        "Smoke test",
        "N flag extraction",
        "V Flag extraction",
        "Mask extraction",
    ],
)
def test_bit_zero_page(cpu: CPU6502, a: int, operand: int, n: int, z: int, v: int):  # noqa: D103, PLR0913
    cpu.a = a
    cpu.memory.write_bytes(0, bytes([0x24, ZERO_PAGE_LOCATION]))  # BIT zp
    cpu.memory.write(ZERO_PAGE_LOCATION, operand)
    cpu.step()

    assert (cpu.status >> CPU6502.STATUS_N) & 1 == n
    assert (cpu.status >> CPU6502.STATUS_Z) & 1 == z
    assert (cpu.status >> CPU6502.STATUS_V) & 1 == v
    assert cpu.a == a
    assert cpu.cycles == 3  # noqa: PLR2004


@pytest.mark.parametrize(
    ("register_value", "operand", "n", "z", "c"),
    [
        (0x00, 0x00, 0, 1, 1),
        (0x00, 0x01, 1, 0, 0),
        (0x01, 0x00, 0, 0, 1),
        (0x01, 0x01, 0, 1, 1),
        (0x7f, 0xff, 1, 0, 0),
        (0x00, 0xff, 0, 0, 0),
    ],
    ids=[
        "Smoke test",
        "Negative flag set",
        "Carry flag set",
        "Zero flag set, carry flag set",
        "Signed overflow",
        "Maximum difference",
    ],
)
@pytest.mark.parametrize(
    ("opcode", "register"),
    [
        (0xc9, "a"),
        (0xe0, "x"),
        (0xc0, "y"),
    ],
    ids=["CMP", "CPX", "CPY"],
)
def test_compare(cpu: CPU6502, opcode: int, register: str, register_value: int, operand: int, n: int, z: int, c: int):  # noqa: D103, PLR0913
    setattr(cpu, register, register_value)
    cpu.memory.write_bytes(0, bytes([opcode, operand]))
    cpu.step()

    assert getattr(cpu, register) == register_value
    assert (cpu.status >> CPU6502.STATUS_N) & 1 == n
    assert (cpu.status >> CPU6502.STATUS_Z) & 1 == z
    assert (cpu.status >> CPU6502.STATUS_C) & 1 == c
    assert cpu.cycles == 2  # noqa: PLR2004


def test_compare_rejects_unknown_register(cpu: CPU6502):  # noqa: D103
    with pytest.raises(ValueError, match="Invalid register"):
        cpu.compare(AddressingMode.IMMEDIATE, 0, register="s")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("opcode", "value", "c_in", "result", "c", "z", "n"),
    [
        (0x0a, 0x81, 0, 0x02, 1, 0, 0),
        (0x0a, 0x40, 1, 0x80, 0, 0, 1),
        (0x4a, 0x01, 0, 0x00, 1, 1, 0),
        (0x4a, 0x80, 1, 0x40, 0, 0, 0),
        (0x2a, 0x80, 1, 0x01, 1, 0, 0),
        (0x2a, 0x40, 0, 0x80, 0, 0, 1),
        (0x6a, 0x01, 1, 0x80, 1, 0, 1),
        (0x6a, 0x01, 0, 0x00, 1, 1, 0),
    ],
    ids=[
        "ASL bit 7 into carry",
        "ASL ignores carry",
        "LSR bit 0 into carry",
        "LSR ignores carry",
        "ROL carry into bit 0",
        "ROL into bit 7",
        "ROR carry into bit 7",
        "ROR to zero",
    ],
)
def test_shift_accumulator(cpu: CPU6502, opcode: int, value: int, c_in: int, result: int, c: int, z: int, n: int):  # noqa: D103, PLR0913
    cpu.a = value
    cpu.set_flag(CPU6502.STATUS_C, c_in)
    cpu.memory.write(0, opcode)
    cpu.step()

    assert cpu.a == result
    assert cpu.pc == 1
    assert (cpu.status >> CPU6502.STATUS_C) & 1 == c
    assert (cpu.status >> CPU6502.STATUS_Z) & 1 == z
    assert (cpu.status >> CPU6502.STATUS_N) & 1 == n
    assert cpu.cycles == 2  # noqa: PLR2004


@pytest.mark.parametrize(
    ("opcode", "value", "result"),
    [
        (0x0e, 0x81, 0x02),
        (0x4e, 0x81, 0x40),
        (0x2e, 0x81, 0x03),
        (0x6e, 0x81, 0xc0),
    ],
    ids=["ASL", "LSR", "ROL", "ROR"],
)
def test_shift_memory(cpu: CPU6502, opcode: int, value: int, result: int):
    """Test that the shifts in memory modes write back to memory and leave the accumulator untouched."""
    cpu.a = 0x55
    cpu.sec()
    cpu.memory.write(0, opcode)
    cpu.memory.write_word(1, ABSOLUTE_LOCATION)
    cpu.memory.write(ABSOLUTE_LOCATION, value)
    cpu.step()

    assert cpu.memory.read(ABSOLUTE_LOCATION) == result
    assert cpu.a == 0x55  # noqa: PLR2004
    assert (cpu.status >> CPU6502.STATUS_C) & 1 == 1
    assert cpu.cycles == 6  # noqa: PLR2004
