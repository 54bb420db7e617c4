"""Fixtures for testing."""

import pytest

from mos6502.cpu import CPU6502
from mos6502.memory import Memory, MemoryBlock, MemoryMap, create_system_memory


@pytest.fixture
def memory() -> Memory:
    """Return 1K of RAM initialized to zero."""
    return MemoryBlock(1024)


@pytest.fixture
def cpu(memory: Memory) -> CPU6502:
    """Return a CPU with 1K of RAM initialized to zero."""
    return CPU6502(memory)


@pytest.fixture
def flat_cpu() -> CPU6502:
    """Return a CPU with 64K of flat RAM, without mirroring or I/O window."""
    return CPU6502(MemoryBlock(0x10000))


@pytest.fixture
def system_memory() -> MemoryMap:
    """Return the zero-filled address space of the emulated system."""
    return create_system_memory()


@pytest.fixture
def system_cpu(system_memory: MemoryMap) -> CPU6502:
    """Return a CPU attached to the address space of the emulated system."""
    return CPU6502(system_memory)
