"""
Collection accumulator for sequence-typed fields.

A sequence field receives one element per occurrence of its flag (or per
positional token once its slot is reached). Elements are coerced by the
binder first; this module only merges them into the field's current value.

Kinds
- list (also Sequence, MutableSequence, Collection, Iterable annotations)
- set (also Set, MutableSet annotations)
- deque (the queue kind)
- tuple (fixed growth array: a new tuple one element longer per occurrence)
- any other Collection class is an unsupported kind: it only works when the
  field already holds an instance exposing append() or add()
"""
import collections.abc
import typing
from collections import deque

from .faults import *
from .utils import *

_FACTORIES = {
    list: list,
    set: set,
    deque: deque,
    tuple: tuple,
}

_ALIASES = {
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
}


def sequence_kind(annotation, /):
    """
    Classify a declared type as a container kind, or None for scalars.

    Text and byte strings are scalars even though they are sequences.
    """
    origin = typing.get_origin(annotation) or annotation
    if not isinstance(origin, type) or issubclass(origin, str | bytes | bytearray):
        return None
    if origin in _FACTORIES:
        return origin
    if origin in _ALIASES:
        return _ALIASES[origin]
    if issubclass(origin, collections.abc.Collection):
        return origin
    return None


def sequence_element(annotation, /):
    """
    Element type declared by a parametrized container (list[int] → int), or Unset.
    """
    for argument in typing.get_args(annotation):
        if argument is not Ellipsis:
            return argument
    return Unset


def _unsupported(existing, kind, element, field, /):
    name = getattr(kind, "__name__", repr(kind))
    return UnsupportedCollectionError(
        "cannot accumulate into %s[%s] for %s" % (name, getattr(element, "__name__", element), field.label if field else "value"),
        title="unsupported collection",
        code=FaultCode.UNSUPPORTED_COLLECTION,
        hint="declare the field as list, set, deque or tuple, or give it a default instance with append() or add()",
        field=field,
        kind=kind,
        existing=existing,
        status=field.status if field is not None else 1
    )


def accumulate(existing, kind, element, value, /, *, field=None):
    """
    Merge one coerced element into a sequence field's current value.

    Behavior
    - existing is None: a new container of the declared kind is created.
    - tuples and frozensets grow by producing a new container.
    - other containers are appended to in place (append() or add()).

    Returns
    - the container to store back on the instance (the same object when
      appended in place).

    Raises
    - UnsupportedCollectionError when no container can be created or grown.
    """
    if existing is None:
        try:
            existing = _FACTORIES[kind]()
        except KeyError:
            raise _unsupported(existing, kind, element, field) from None

    match existing:
        case tuple():
            return existing + (value,)
        case frozenset():
            return existing | {value}

    if callable(append := getattr(existing, "append", None) or getattr(existing, "add", None)):
        append(value)
        return existing

    raise _unsupported(existing, kind, element, field)


__all__ = (
    "accumulate",
    "sequence_kind",
    "sequence_element",
)
