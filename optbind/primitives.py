"""
Fixed-width primitive markers for field annotations.

Python has a single unbounded int and a single double-precision float, so
widths are expressed with typing.NewType markers. At runtime they behave as
the underlying type (Int32(5) is just 5); the coercion registry uses the
marker to pick bounds and precision.

    >>> class Config:
    ...     port: Int16
    ...     ratio: Float32
    ...     grade: Char
"""
from decimal import Decimal
from types import MappingProxyType
from typing import NewType

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
Float32 = NewType("Float32", float)
Char = NewType("Char", str)

# Inclusive signed bounds per integer width.
BOUNDS = MappingProxyType({
    Int8: (-2 ** 7, 2 ** 7 - 1),
    Int16: (-2 ** 15, 2 ** 15 - 1),
    Int32: (-2 ** 31, 2 ** 31 - 1),
    Int64: (-2 ** 63, 2 ** 63 - 1),
})

FLOATS = frozenset({float, Float32})
NUMERICS = frozenset(BOUNDS) | FLOATS | {int, Decimal}


__all__ = (
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Float32",
    "Char",
    "BOUNDS",
)
