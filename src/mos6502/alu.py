"""Status register layout and the arithmetic behind the 6502's flag-setting instructions.

All helpers here are pure: they take byte values and return the result together with the flag bits the caller
should commit. None of them consult the Decimal flag, binary-coded decimal arithmetic is not emulated.
"""

STATUS_C = 0
STATUS_Z = 1
STATUS_I = 2
STATUS_D = 3
STATUS_B = 4
STATUS_U = 5
STATUS_V = 6
STATUS_N = 7


def get_flag(status: int, flag_index: int) -> int:
    """Return the flag at `flag_index` of `status` as 0 or 1."""
    return (status >> flag_index) & 1


def set_flag(status: int, flag_index: int, value: int | bool) -> int:  # noqa: FBT001
    """Return `status` with the flag at `flag_index` set to `value`."""
    status &= ~(1 << flag_index)
    status |= (1 if value else 0) << flag_index
    return status & 0xff


def update_zero_negative(status: int, result: int) -> int:
    """Return `status` with Zero and Negative updated for an 8 bit `result`.

    Zero is set iff the result is 0, Negative mirrors bit 7 of the result.
    """
    status = set_flag(status, STATUS_Z, (result & 0xff) == 0)
    return set_flag(status, STATUS_N, (result >> 7) & 1)


def overflowed(a: int, operand: int, result: int) -> int:
    """Return 1 if adding two bytes overflowed in two's complement interpretation, otherwise 0.

    Args:
        a: Accumulator value before the operation.
        operand: Operand of potentially overflowing operation.
        result: Accumulator value after operation.

    """
    inputs_same_sign = ~(a ^ operand) & 0x80
    result_sign_different_from_inputs = (a ^ result) & 0x80
    return ((inputs_same_sign & result_sign_different_from_inputs) >> 7) & 1


def add_with_carry(a: int, operand: int, carry_in: int) -> tuple[int, int, int]:
    """Add two bytes and a carry bit.

    Returns:
        (result, carry, overflow): Byte result, carry out of bit 7 and signed overflow, the latter two as 0 or 1.

    """
    binary_sum = a + operand + carry_in
    result = binary_sum & 0xff
    carry = 1 if binary_sum > 0xff else 0  # noqa: PLR2004
    return result, carry, overflowed(a, operand, result)


def subtract_with_carry(a: int, operand: int, carry_in: int) -> tuple[int, int, int]:
    """Subtract `operand` and the inverted carry from `a`.

    The 6502 subtracts by adding the one's complement of the operand, so carry set means "no borrow".
    """
    return add_with_carry(a, operand ^ 0xff, carry_in)


def compare(register: int, operand: int) -> tuple[int, int]:
    """Return the byte difference `register - operand` and the carry of the comparison."""
    result = (register - operand) & 0xff
    return result, 1 if register >= operand else 0


def shift_left(value: int) -> tuple[int, int]:
    """Arithmetic shift left, bit 7 goes to carry."""
    return (value << 1) & 0xff, (value >> 7) & 1


def shift_right(value: int) -> tuple[int, int]:
    """Logic shift right, bit 0 goes to carry."""
    return (value >> 1) & 0x7f, value & 1


def rotate_left(value: int, carry_in: int) -> tuple[int, int]:
    """Rotate left through carry."""
    return ((value << 1) | carry_in) & 0xff, (value >> 7) & 1


def rotate_right(value: int, carry_in: int) -> tuple[int, int]:
    """Rotate right through carry."""
    return ((carry_in << 7) | (value >> 1)) & 0xff, value & 1
