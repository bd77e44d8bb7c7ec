"""
Optbind faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- BindingException / BindingWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

Exit status
- every fault carries a caller-assignable exit status (option 'status', default 1).
  fields declare their own status, and the binder forwards it when a fault
  concerns that field.

Integration
- the binder builds faults with title/code/hint context and calls trigger(fault, **runtime).
- in non-shell mode, exceptions are raised and warnings go through warnings.warn;
  in shell mode, both are rendered via rich on stderr.
"""
import copy
import inspect
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across optbind (stable identifiers).

    grouping (by high-level domain)
    - declaration (2110x)
      • DUPLICATE_OPTION, MISSING_CONSTRUCTOR
    - coercion (2111x/2112x)
      • UNSUPPORTED_TYPE, UNSUPPORTED_COLLECTION, PARSE_FAILURE, NUMERIC_PARSE_FAILURE,
        UNEXPECTED_POSITIONAL
    - validation (2113x)
      • REQUIRED_FIELD_MISSING
    - delegated errors (21141)
      • DELEGATED_ERROR
    - warnings (22xxx)
      • SHADOWED_OPTION, DANGLING_OPTION

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired (e.g., to shorter labels).
    """
    # --- declaration errors (211xx) ---
    DUPLICATE_OPTION            = 21101
    MISSING_CONSTRUCTOR         = 21102

    # --- coercion errors (211xx) ---
    UNSUPPORTED_TYPE            = 21111
    UNSUPPORTED_COLLECTION      = 21112
    PARSE_FAILURE               = 21121
    NUMERIC_PARSE_FAILURE       = 21122
    UNEXPECTED_POSITIONAL       = 21123

    # --- validation errors (211xx) ---
    REQUIRED_FIELD_MISSING      = 21131

    # --- delegated errors (211xx) ---
    DELEGATED_ERROR             = 21141

    # --- warnings (22xxx) ---
    SHADOWED_OPTION             = 22111
    DANGLING_OPTION             = 22112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    # Shared renderer for exceptions and warnings; palette keys are prefixed by kind.
    main = __import__("__main__")
    colorful = fault.options.get("colorful", True)
    fancy = fault.options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", fault.options.get("prog", "optbind")), styler("prog-name"))
    code = fault.options.get("code")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else code, styler("code")),
        " | ",
        text(fault.options.get("title", type(fault).__name__).title(), styler("title")),
        " ]"
    )
    message = text(fault.message, styler("message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(fault.options.get("hint"), styler("hint")))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")

    return Group(header, message, hint)


class BindingException(Exception):
    """
    base type for every fatal binding fault.

    options (all optional, stored read-only)
    - code, title, hint: rendering context (see FaultCode).
    - field: the FieldDescriptor the fault concerns.
    - value: the raw token that could not be bound.
    - status: process exit status the caller should use (default 1).
    - shell, fancy, colorful, prog: runtime flags consumed by __trigger__/__rich__.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def field(self):
        return self.options.get("field")

    @property
    def value(self):
        return self.options.get("value")

    @property
    def status(self):
        return self.options.get("status", 1)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title

            # body
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self)
        return self.status

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        return replica


class DuplicateOptionError(BindingException): ...
class MissingConstructorError(BindingException): ...
class UnsupportedTypeError(BindingException): ...
class UnsupportedCollectionError(UnsupportedTypeError): ...
class ParseError(BindingException): ...
class NumericParseError(ParseError): ...
class UnexpectedPositionalError(ParseError): ...
class RequiredFieldMissingError(BindingException): ...
class DelegatedError(BindingException): ...


class BindingWarning(Warning):
    """
    base type for non-fatal binding diagnostics.

    outside shell mode the warning goes through warnings.warn (so callers can
    filter or escalate it); in shell mode it is rendered on stderr.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedOptionWarning(BindingWarning): ...
class DanglingOptionWarning(BindingWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - outside shell mode, exceptions are raised; in shell mode they are rendered
      via the rich console and their exit status is returned.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return copy.replace(fault, **options).__trigger__()


__all__ = (
    "BindingException",
    "DuplicateOptionError",
    "MissingConstructorError",
    "UnsupportedTypeError",
    "UnsupportedCollectionError",
    "ParseError",
    "NumericParseError",
    "UnexpectedPositionalError",
    "RequiredFieldMissingError",
    "DelegatedError",
    "BindingWarning",
    "ShadowedOptionWarning",
    "DanglingOptionWarning",
    "FaultCode",
    "trigger",
)
