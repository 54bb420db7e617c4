"""Test instructions for pushing and pulling from the stack."""

import pytest

from mos6502.cpu import CPU6502
from tests.unit.cpu import (
    TEST_VALUE,
)

BREAK_MASK = 1 << CPU6502.STATUS_B
UNUSED_MASK = 1 << CPU6502.STATUS_U


def test_pha(cpu: CPU6502):  # noqa: D103
    stack_byte_address = cpu.STACK_ROOT + cpu.sp
    cpu.sed()
    cpu.sec()
    old_status = cpu.status
    cpu.a = TEST_VALUE
    cpu.memory.write(0, 0x48)  # PHA
    cpu.step()

    assert cpu.memory.read(stack_byte_address) == TEST_VALUE
    assert cpu.sp == 0xfe  # noqa: PLR2004
    assert cpu.cycles == 3  # noqa: PLR2004
    assert cpu.status == old_status


def test_php(cpu: CPU6502):
    """Test that the pushed status has the break and unused bits set, while the status itself is unchanged."""
    cpu.sed()
    cpu.sec()
    cpu.status &= ~UNUSED_MASK
    status = cpu.status
    cpu.memory.write(0, 0x08)  # PHP
    cpu.step()

    assert cpu.status == status
    assert cpu.pull_byte_from_stack() == status | BREAK_MASK | UNUSED_MASK
    assert cpu.cycles == 3  # noqa: PLR2004


def test_pla(cpu: CPU6502):  # noqa: D103
    cpu.push_byte_to_stack(TEST_VALUE)
    cpu.memory.write(0, 0x68)  # PLA
    cpu.step()

    assert cpu.a == TEST_VALUE
    assert cpu.sp == 0xff  # noqa: PLR2004
    assert cpu.cycles == 4  # noqa: PLR2004
    assert (cpu.status >> CPU6502.STATUS_N) & 1 > 0
    assert (cpu.status >> CPU6502.STATUS_Z) & 1 == 0


@pytest.mark.parametrize(
    ("prior_status", "pulled", "expected"),
    [
        (0x20, 0x00, 0x20),
        (0x20, 0xff, 0xef),
        (0x30, 0x00, 0x30),
        (0x30, 0xcf, 0xff),
        (0xff, 0x00, 0x30),
    ],
    ids=[
        "Unused bit forced",
        "Pulled break bit dropped",
        "Prior break bit kept",
        "All flags with prior break bit",
        "Prior flags other than break replaced",
    ],
)
def test_plp(cpu: CPU6502, prior_status: int, pulled: int, expected: int):  # noqa: D103
    cpu.status = prior_status
    cpu.push_byte_to_stack(pulled)
    cpu.memory.write(0, 0x28)  # PLP
    cpu.step()

    assert cpu.status == expected
    assert cpu.cycles == 4  # noqa: PLR2004


@pytest.mark.parametrize("value", [0x00, 0x01, 0x7f, 0x80, 0xff])
@pytest.mark.parametrize("sp", [0xff, 0x80, 0x00])
def test_push_pull_round_trip(cpu: CPU6502, sp: int, value: int):  # noqa: D103
    cpu.sp = sp
    cpu.push_byte_to_stack(value)
    assert cpu.pull_byte_from_stack() == value
    assert cpu.sp == sp


def test_push_wraps_stack_pointer(cpu: CPU6502):  # noqa: D103
    cpu.sp = 0x00
    cpu.push_byte_to_stack(TEST_VALUE)

    assert cpu.memory.read(0x0100) == TEST_VALUE
    assert cpu.sp == 0xff  # noqa: PLR2004


def test_pull_wraps_stack_pointer(cpu: CPU6502):  # noqa: D103
    cpu.sp = 0xff
    cpu.memory.write(0x0100, TEST_VALUE)

    assert cpu.pull_byte_from_stack() == TEST_VALUE
    assert cpu.sp == 0x00


def test_push_word_order(cpu: CPU6502):
    """Test that words are pushed high byte first and pulled low byte first."""
    cpu.push_word_to_stack(0x1234)

    assert cpu.memory.read(0x01ff) == 0x12  # noqa: PLR2004
    assert cpu.memory.read(0x01fe) == 0x34  # noqa: PLR2004
    assert cpu.pull_word_from_stack() == 0x1234  # noqa: PLR2004
