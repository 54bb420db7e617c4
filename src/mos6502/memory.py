"""Memory and address decoding for the emulated system."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Self, override

logger = logging.getLogger(__name__)


class MemoryAccessError(IndexError):
    """Raised when an address falls outside of a memory object."""


class Memory(ABC):
    """Abstract interface for computer memory."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of bytes in the memory object."""

    @abstractmethod
    def read(self, address: int) -> int:
        """Return the byte at the given memory location.

        Args:
            address: Memory location to read byte from.

        Returns:
            value: Value of byte read from memory.

        Raises:
            MemoryAccessError: If address is outside of memory.

        """

    @abstractmethod
    def write(self, address: int, value: int) -> None:
        """Write a value to a memory location.

        Args:
            address: Memory location to write the byte to.
            value: Value of the byte. Anything above the eight least significant bits is discarded by a bit mask.

        Raises:
            MemoryAccessError: If address is outside of memory.

        """

    def read_word(self, address: int) -> int:
        """Read a little-endian 16 bit word, low byte at `address`, high byte at `address + 1`."""
        lo = self.read(address)
        hi = self.read(address + 1)
        return (hi << 8) | lo

    def write_word(self, address: int, value: int) -> None:
        """Write a little-endian 16 bit word, low byte first."""
        self.write(address, value & 0xff)
        self.write(address + 1, (value >> 8) & 0xff)

    def read_bytes(self, start_address: int, length: int) -> bytes:
        """Read `length` consecutive bytes starting at `start_address`."""
        return bytes(self.read(start_address + offset) for offset in range(length))


class MemoryBlock(Memory):
    """Simple block of contiguous memory of configurable size."""

    def __init__(self, size: int = 65536) -> None:
        """Initialize empty memory of given size.

        Args:
            size: Number of bytes in the memory.

        """
        super().__init__()
        self.mem = bytearray(size)

    def _check_address_bounds(self, address: int) -> None:
        """Check if memory address is within the bound of this memory."""
        if not (0 <= address < len(self.mem)):
            msg = f"Address {address:04x} out of memory range."
            raise MemoryAccessError(msg)

    @override
    def __len__(self) -> int:
        return len(self.mem)

    @override
    def read(self, address: int) -> int:
        self._check_address_bounds(address)
        return self.mem[address]

    @override
    def write(self, address: int, value: int) -> None:
        self._check_address_bounds(address)
        self.mem[address] = value & 0xff

    def write_bytes(self, start_address: int, sequence: bytes) -> None:
        """Write a sequence of bytes to a memory region.

        Args:
            start_address: First memory address to be overwritten by `sequence`.
            sequence: Sequence of bytes to write to memory region.

        Raises:
            MemoryAccessError: If sequence at specified location exceeds the bounds of the memory.

        """
        self._check_address_bounds(start_address)
        self._check_address_bounds(start_address + len(sequence) - 1)
        self.mem[start_address:start_address + len(sequence)] = sequence

    def write_bytes_hex(self, start_address: int, sequence: str) -> None:
        """Write a sequence of bytes written as a string of hexadecimal digits to a memory region.

        Whitespace between the digits is ignored.
        """
        self.write_bytes(start_address, bytes.fromhex(sequence))


class Bus(Memory):
    """Lower 16K of the address space: mirrored internal RAM and a stub I/O window.

    Internal RAM spans $0000-$1FFF but only the lower eleven address bits are decoded, so the same 2K of cells
    repeat every $0800 bytes. The I/O window at $2000-$3FFF repeats every 8 bytes. No peripheral is attached to it,
    reads return zero and writes are dropped.
    """

    RAM_MIRROR_MASK: ClassVar[int] = 0x07ff
    RAM_END: ClassVar[int] = 0x1fff
    IO_MIRROR_MASK: ClassVar[int] = 0x2007
    IO_END: ClassVar[int] = 0x3fff

    def __init__(self) -> None:  # noqa: D107
        super().__init__()
        self.cpu_vram = bytearray(0x2000)

    def _check_address_bounds(self, address: int) -> None:
        if not (0 <= address <= self.IO_END):
            msg = f"Address {address:04x} out of bus range."
            raise MemoryAccessError(msg)

    @override
    def __len__(self) -> int:
        return self.IO_END + 1

    @override
    def read(self, address: int) -> int:
        self._check_address_bounds(address)
        if address <= self.RAM_END:
            return self.cpu_vram[address & self.RAM_MIRROR_MASK]
        logger.debug(f"Read from unmapped I/O register 0x{address & self.IO_MIRROR_MASK:04x}")
        return 0

    @override
    def write(self, address: int, value: int) -> None:
        self._check_address_bounds(address)
        if address <= self.RAM_END:
            self.cpu_vram[address & self.RAM_MIRROR_MASK] = value & 0xff
            return
        logger.debug(f"Dropped write of 0x{value & 0xff:02x} to I/O register 0x{address & self.IO_MIRROR_MASK:04x}")


@dataclass
class MemoryMapRegion:
    """One memory region entry in a `MemoryMap`."""

    offset: int
    """Offset on the region within the address space of the memory map.

    This is the first address in the memory map that falls into this region.
    """

    memory: Memory
    """Reference to the `Memory` object backing this region."""

    def __contains__(self, address: int) -> bool:
        """Check if the region contains a given address."""
        return address >= self.offset and address <= self.top

    @property
    def top(self) -> int:
        """Highest address within the memory region."""
        return self.offset + len(self.memory) - 1

    def overlaps(self, other: Self) -> bool:
        """Check if two memory regions overlap."""
        return other.offset in self or other.top in self or self.offset in other


class MemoryMap(Memory):
    """Memory map of multiple components.

    Addresses below the top of the highest region that no region covers read as zero and ignore writes. Addresses
    beyond the top of the map raise `MemoryAccessError`.
    """

    def __init__(self) -> None:  # noqa: D107
        super().__init__()
        self.regions: list[MemoryMapRegion] = []

    def add_block(self, offset: int, block: Memory) -> Self:
        """Add a memory block to the map at a given offset address.

        If `offset` is 0x0100, the the first byte within the block can be found at address 0x0100 within the memory map.

        Raises:
            ValueError: If the block overlaps a region already in the map.

        """
        region = MemoryMapRegion(offset, block)
        if any(region.overlaps(r) for r in self.regions):
            msg = "Memory region overlaps existing region in memory map."
            raise ValueError(msg)
        self.regions.append(region)
        return self

    def get_containing_region(self, address: int) -> MemoryMapRegion | None:
        """Return the region containing `address` or None."""
        try:
            return next(r for r in self.regions if address in r)
        except StopIteration:
            return None

    def _check_address_bounds(self, address: int) -> None:
        if not (0 <= address < len(self)):
            msg = f"Address {address:04x} out of memory range."
            raise MemoryAccessError(msg)

    @override
    def __len__(self) -> int:
        return max((r.top + 1 for r in self.regions), default=0)

    @override
    def read(self, address: int) -> int:
        self._check_address_bounds(address)
        region = self.get_containing_region(address)
        if region is None:
            logger.warning(f"Tried to read address 0x{address:04x} that is not part of memory map.")
            return 0
        return region.memory.read(address - region.offset)

    @override
    def write(self, address: int, value: int) -> None:
        self._check_address_bounds(address)
        region = self.get_containing_region(address)
        if region is None:
            logger.warning(f"Tried to write to address 0x{address:04x} that is not part of memory map.")
            return
        region.memory.write(address - region.offset, value)


def create_system_memory() -> MemoryMap:
    """Return the 64K address space of the emulated system.

    The `Bus` decodes $0000-$3FFF, everything from $4000 up is plain flat memory without side effects.
    """
    bus = Bus()
    return (
        MemoryMap()
        .add_block(0x0000, bus)
        .add_block(len(bus), MemoryBlock(0x10000 - len(bus)))
    )
