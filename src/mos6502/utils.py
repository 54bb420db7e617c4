"""Helpers too unspecific for any other module."""

from typing import Never


def assert_never(arg: Never) -> Never:
    """Help the type checker perform exhaustiveness checks of enum matches."""
    msg = f"Unhandled value: {arg!r}"
    raise AssertionError(msg)
