"""Tests for Memory."""

import pytest

from mos6502.memory import MemoryAccessError, MemoryBlock


def test_write_bytes(memory: MemoryBlock):  # noqa: D103
    memory.write_bytes(0, bytes([0xab, 0xcd]))
    assert memory.read(0) == 0xab  # noqa: PLR2004
    assert memory.read(1) == 0xcd  # noqa: PLR2004


def test_write_bytes_hex(memory: MemoryBlock):  # noqa: D103
    memory.write_bytes_hex(0, "ab cd\nef")
    assert memory.read_bytes(0, 3) == bytes([0xab, 0xcd, 0xef])


def test_write_bytes_past_end(memory: MemoryBlock):  # noqa: D103
    with pytest.raises(MemoryAccessError):
        memory.write_bytes(len(memory) - 1, bytes(2))


def test_out_of_bounds_access(memory: MemoryBlock):  # noqa: D103
    with pytest.raises(IndexError, match="out of memory range"):
        memory.read(len(memory.mem))


def test_negative_address(memory: MemoryBlock):  # noqa: D103
    with pytest.raises(MemoryAccessError):
        memory.write(-1, 0)


def test_memory_size():
    """Test if we can read the size of a memory block with the `len` function."""
    mem_size = 1024
    memory = MemoryBlock(mem_size)
    assert len(memory) == mem_size


def test_write_masks_value(memory: MemoryBlock):  # noqa: D103
    memory.write(0, 0x1ff)
    assert memory.read(0) == 0xff  # noqa: PLR2004


def test_words_are_little_endian(memory: MemoryBlock):  # noqa: D103
    memory.write_word(0x10, 0xbeef)
    assert memory.read(0x10) == 0xef  # noqa: PLR2004
    assert memory.read(0x11) == 0xbe  # noqa: PLR2004
    assert memory.read_word(0x10) == 0xbeef  # noqa: PLR2004
