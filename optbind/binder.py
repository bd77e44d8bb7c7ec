"""
Binding entry points: bind(), validate() and invoke().

bind(cls, argv)
- describes cls, builds its OptionTable (duplicate keys fail here, before any
  token is parsed), instantiates cls() with no arguments, installs defaults,
  runs the scanner over argv and validates required fields.
- every fault aborts the call and propagates as a single BindingException;
  fields bound before the fault keep their values on the discarded instance.

validate(instance, table)
- skipped when a helper field (Named(helper=True) or a bool --help) is set.
- the first required field still holding None raises RequiredFieldMissingError;
  the labels of all missing fields travel with it under the 'missing' option.

invoke(cls, argv)
- the runner: binds, prints help when it was requested, otherwise calls the
  instance's __run__() hook, and maps the outcome to an exit status. faults are
  rendered through trigger() in shell mode. exiting the process is left to the caller:
      sys.exit(invoke(Config))

field access
- getter/setter default to getattr/setattr, so properties on the destination
  class act as accessors; any pair with the same call shape can be injected.
"""
import copy
import shlex
import sys
from collections.abc import Iterable

from .faults import *
from .fields import Named, Ordered, describe
from .scanner import Scanner
from .table import OptionTable
from .helptext import helpout
from .utils import *


def _tokens(argv, /):
    # Normalize argv like a command prompt: Unset → sys.argv[1:], str → shlex.split.
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("bind() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("bind() argument must be a string or an iterable of strings")


def _instantiate(cls, /):
    try:
        return cls()
    except TypeError as exception:
        raise MissingConstructorError(
            "cannot create %s without arguments: %s" % (cls.__name__, exception),
            title="missing default constructor",
            code=FaultCode.MISSING_CONSTRUCTOR,
            hint="give every constructor parameter of %s a default value" % cls.__name__,
            target=cls
        ) from exception


def _current(instance, descriptor, getter, /):
    try:
        return getter(instance, descriptor.name)
    except AttributeError:
        return Unset


def _install(instance, table, getter, setter, /):
    # Named booleans always start False; everything else keeps a constructor
    # value or falls back to the declared default.
    for descriptor in table.descriptors:
        if descriptor.boolean and not descriptor.ordered:
            setter(instance, descriptor.name, False)
            continue

        current = _current(instance, descriptor, getter)
        if current is Unset or isinstance(current, Named | Ordered):
            current = descriptor.default
        if descriptor.sequence and current is not None:
            # defaults may be class-level containers; never accumulate into them
            current = copy.deepcopy(current)
        setter(instance, descriptor.name, current)


def _helped(instance, table, getter, /):
    return any(_current(instance, descriptor, getter) is True for descriptor in table.helpers)


def validate(instance, table, /, *, getter=getattr):
    """
    Check required fields of a bound instance.

    Returns
    - True when help was requested (validation skipped), False otherwise.

    Raises
    - RequiredFieldMissingError naming the first missing field.
    """
    if _helped(instance, table, getter):
        return True

    missing = [descriptor for descriptor in table.required if coalesce(_current(instance, descriptor, getter)) is None]
    if missing:
        first = missing[0]
        raise RequiredFieldMissingError(
            "required option %s is missing" % table.label(first),
            title="missing required option",
            code=FaultCode.REQUIRED_FIELD_MISSING,
            hint="provide a value for %s" % ", ".join(table.label(descriptor) for descriptor in missing),
            field=first,
            missing=tuple(table.label(descriptor) for descriptor in missing),
            status=first.status
        )
    return False


def _bind(cls, tokens, converters, getter, setter, runtime, /):
    table = OptionTable(describe(cls), **runtime)
    instance = _instantiate(cls)
    _install(instance, table, getter, setter)
    Scanner(table, converters=converters, getter=getter, setter=setter, **runtime).scan(tokens, instance)
    validate(instance, table, getter=getter)
    return instance, table


def bind(cls, argv=Unset, /, *, converters=None, getter=getattr, setter=setattr):
    """
    Bind command-line tokens to a new instance of cls.

    Parameters
    - cls: destination class, instantiable without arguments.
    - argv: Unset (sys.argv[1:]), a shell-like string, or an iterable of strings.
    - converters: optional ConverterRegistry consulted before the built-in rules.
    - getter/setter: field access capability (getattr/setattr by default).

    Returns
    - the populated instance; the engine keeps no reference to it.

    Raises
    - BindingException subclasses (see faults); TypeError for a malformed argv.
    """
    if not isinstance(cls, type):
        raise TypeError("bind() first argument must be a class")
    instance, _ = _bind(cls, _tokens(argv), converters, getter, setter, {})
    return instance


def invoke(cls, argv=Unset, /, *, shell=True, fancy=False, colorful=True, converters=None, getter=getattr, setter=setattr):
    """
    Bind, then run: the exit/status surface of a destination class.

    Behavior
    - faults are surfaced with trigger(); in shell mode they are printed on
      stderr and their exit status is returned, otherwise they are raised.
    - help requested: the help text is printed and 0 is returned.
    - otherwise the instance's __run__() hook is called when present; its return
      value is the exit status (None → 0). exceptions escaping it, and return
      values int() rejects, become a DelegatedError with status 1.
    - no hook: 0.
    """
    if not isinstance(cls, type):
        raise TypeError("invoke() first argument must be a class")

    runtime = {
        "shell": bool(shell),
        "fancy": bool(fancy),
        "colorful": bool(colorful),
        "prog": getattr(cls, "__prog__", hyphenate(cls.__name__)),
    }

    try:
        instance, table = _bind(cls, _tokens(argv), converters, getter, setter, runtime)
    except BindingException as fault:
        return trigger(fault, **runtime)

    if _helped(instance, table, getter):
        helpout(cls, table=table, colorful=colorful)
        return 0

    if not callable(run := getattr(instance, "__run__", None)):
        return 0

    try:
        status = run()
        return 0 if status is None else int(status)
    except BindingException as fault:
        return trigger(fault, **runtime)
    except Exception as exception:
        fault = DelegatedError(
            "%s: %s" % (type(exception).__name__, exception),
            title="run failed",
            code=FaultCode.DELEGATED_ERROR,
            hint="see the error above; the arguments were bound successfully",
            status=1
        )
        fault.__cause__ = exception
        return trigger(fault, **runtime)


__all__ = (
    "bind",
    "validate",
    "invoke",
)
