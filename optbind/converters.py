"""
Value coercion registry: raw token ⇄ typed value.

Scope
- convert(raw, target): the read direction used by the binder for every token.
- stringify(value, target): the write direction, used for round-trips and display.
- Converter: a read/write pair for any type the built-in rules do not cover,
  or to override the built-in rule for a single field.
- ConverterRegistry: a caller-owned mapping of type → Converter, read-only while binding.

Priority (read direction)
1. explicit field converter, then a converter registered for the target type
2. str: returned unchanged
3. bool: "true" (any case) is True, anything else is False
4. Int8/Int16/Int32/Int64: strict base-10 with per-width overflow checks
5. float / Float32: plain decimal notation or inf/nan, Float32 rounded to single
   precision, magnitudes that overflow to inf rejected
6. Char: exactly one character
7. int / Decimal: unbounded (no interpreter digit limit), plain decimal notation
8. anything else: UnsupportedTypeError

Faults
- NumericParseError for non-numeric or out-of-range numeric text.
- ParseError for wrong-length characters and for exceptions escaping a converter.
- every fault carries the field (when known), the raw value and the field's exit status.
"""
import math
import re
import struct
from collections.abc import Mapping
from decimal import Decimal

from .faults import *
from .primitives import *
from .primitives import FLOATS
from .utils import *


class Converter:
    """
    A read/write pair used instead of the built-in coercion rules.

    - read(string) -> value: called for each raw token bound to the field.
    - write(value) -> string: the inverse, defaults to str.
    """
    __slots__ = ("_read", "_write")

    def __init__(self, read, write=str, /):
        if not callable(read):
            raise TypeError("converter 'read' must be callable")
        if not callable(write):
            raise TypeError("converter 'write' must be callable")
        self._read = read
        self._write = write

    def read(self, string, /):
        return self._read(string)

    def write(self, value, /):
        return self._write(value)

    def __repr__(self):
        return f"converter(read={self._read!r}, write={self._write!r})"

    @classmethod
    def of(cls, source, /):
        """
        Normalize a converter-like object into a Converter.

        Accepts a Converter, or any object (class or instance) exposing callable
        'read' and 'write' attributes.
        """
        if isinstance(source, cls):
            return source
        if callable(getattr(source, "read", None)) and callable(getattr(source, "write", None)):
            return cls(source.read, source.write)
        raise TypeError("converter must expose callable 'read' and 'write' attributes")


class ConverterRegistry(Mapping):
    """
    Caller-owned mapping of target type → Converter.

    Forms
    - registry.register(date, date.fromisoformat, date.isoformat)
    - @registry.register(date)
      class Dates:
          @staticmethod
          def read(string): ...
          @staticmethod
          def write(value): ...

    The binder only reads the registry; registering while a bind is running
    is not supported.
    """

    def __init__(self, converters=Unset, /):
        self._converters = {}
        for target, converter in dict(coalesce(converters, {})).items():
            self._converters[target] = Converter.of(converter)

    def __getitem__(self, target, /):
        return self._converters[target]

    def __iter__(self):
        return iter(self._converters)

    def __len__(self):
        return len(self._converters)

    def __repr__(self):
        return f"converter-registry({self._converters!r})"

    def register(self, target, read=Unset, write=str, /):
        if read is not Unset:
            self._converters[target] = converter = Converter(read, write)
            return converter

        @rename("register")
        def wrapper(source, /):
            self._converters[target] = Converter.of(source)
            return source

        return wrapper


def _label(field):
    return field.label if field is not None else "value"


def _context(field, raw, /):
    return {"field": field, "value": raw, "status": field.status if field is not None else 1}


def _numeric_fault(raw, target, field, reason, hint, /):
    return NumericParseError(
        "cannot parse %r for %s: %s" % (raw, _label(field), reason),
        title="not a number",
        code=FaultCode.NUMERIC_PARSE_FAILURE,
        hint=hint,
        target=target,
        **_context(field, raw)
    )


def _integer(raw, target, field, /):
    # int() alone would accept whitespace and underscores; only plain base-10 passes here.
    if not re.fullmatch(r"[+-]?[0-9]+", raw):
        raise _numeric_fault(raw, target, field, "not a base-10 integer", "provide digits only, optionally signed (e.g., 42 or -7)")
    # Decimal has no digit limit, unlike int(str).
    value = int(Decimal(raw))
    if target in BOUNDS:
        lower, upper = BOUNDS[target]
        if not lower <= value <= upper:
            raise _numeric_fault(
                raw, target, field,
                "out of range for %s" % target.__name__,
                "provide a number between %d and %d" % (lower, upper)
            )
    return value


# Plain decimal notation with an optional exponent; float() and Decimal() alone
# would also accept whitespace, underscores and signalling NaNs.
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPECIAL = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)


def _floating(raw, target, field, /):
    if not _DECIMAL.fullmatch(raw) and not _SPECIAL.fullmatch(raw):
        raise _numeric_fault(raw, target, field, "not a floating point number", "provide a number such as 3.14 or 1e-3")
    value = float(raw)
    if target is Float32:
        # out-of-range magnitudes round to inf (older interpreters raise instead)
        try:
            value = struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError:
            value = math.inf
    if math.isinf(value) and not _SPECIAL.fullmatch(raw):
        raise _numeric_fault(raw, target, field, "out of range for %s" % target.__name__, "provide a smaller magnitude")
    return value


def _decimal(raw, target, field, /):
    if not _DECIMAL.fullmatch(raw):
        raise _numeric_fault(raw, target, field, "not a decimal number", "provide a number such as 10.25")
    return Decimal(raw)


def _character(raw, target, field, /):
    if len(raw) != 1:
        raise ParseError(
            "cannot parse %r for %s: expected exactly 1 character, got %d" % (raw, _label(field), len(raw)),
            title="not a single character",
            code=FaultCode.PARSE_FAILURE,
            hint="provide exactly one character",
            target=target,
            **_context(field, raw)
        )
    return raw


def _unsupported(target, field, /):
    return UnsupportedTypeError(
        "no conversion is known for type %r used by %s" % (target, _label(field)),
        title="unsupported type",
        code=FaultCode.UNSUPPORTED_TYPE,
        hint="register a converter for this type or attach one to the field",
        target=target,
        field=field,
        status=field.status if field is not None else 1
    )


def convert(raw, target, /, *, converter=None, converters=None, field=None):
    """
    Convert a raw token into a value of the target type.

    Parameters
    - raw: str, the token as received.
    - target: the destination type (builtin, primitives marker or any registered type).
    - converter: optional Converter overriding every other rule.
    - converters: optional registry consulted before the built-in rules.
    - field: optional FieldDescriptor, attached to faults for context.

    Raises
    - NumericParseError, ParseError, UnsupportedTypeError.
    """
    if not isinstance(raw, str):
        raise TypeError("convert() first argument must be a string")

    if converter is None and converters is not None:
        converter = converters.get(target)

    if converter is not None:
        try:
            return converter.read(raw)
        except BindingException:
            raise
        except Exception as exception:
            raise ParseError(
                "cannot parse %r for %s: %s" % (raw, _label(field), exception),
                title="conversion failed",
                code=FaultCode.PARSE_FAILURE,
                hint="check the expected format of this value",
                target=target,
                **_context(field, raw)
            ) from exception

    if target is str:
        return raw
    if target is bool:
        return raw.lower() == "true"
    if target in BOUNDS:
        return _integer(raw, target, field)
    if target in FLOATS:
        return _floating(raw, target, field)
    if target is Char:
        return _character(raw, target, field)
    if target is int:
        return _integer(raw, target, field)
    if target is Decimal:
        return _decimal(raw, target, field)

    raise _unsupported(target, field)


def stringify(value, target, /, *, converter=None, converters=None):
    """
    Format a value of the target type so that convert() reads it back unchanged.
    """
    if converter is None and converters is not None:
        converter = converters.get(target)

    if converter is not None:
        return converter.write(value)

    if target is bool:
        return "true" if value else "false"
    if target in FLOATS:
        return repr(float(value))
    if target is int or target in BOUNDS:
        return str(Decimal(value))
    if target in (str, Char, Decimal):
        return str(value)

    raise _unsupported(target, None)


__all__ = (
    "Converter",
    "ConverterRegistry",
    "convert",
    "stringify",
)
