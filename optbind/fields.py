r"""
Optbind field specifications and descriptors.

Overview
- Specs (declaration surface, used as class attribute defaults)
  • Named: a field reached through a long flag (--name) and/or a short code (-n).
  • Ordered: a positional field bound by its declared order.
  • Ignore: excludes an attribute from binding altogether.
  Plain annotated attributes without a spec are named fields whose flag and
  code are synthesized from the attribute identifier.

- FieldDescriptor
  • The engine-facing record built once per destination class: identity,
    declared type, keys, container kind/element, converter, exit status.
  • Immutable: every attribute is a read-only property mirroring a private field.

- describe(cls)
  • Walks the class annotations (declaration order, bases first) and returns
    the tuple of FieldDescriptor eligible for binding.

Metadata (sanitized on construction)
- Shared (Named/Ordered)
  • required: bool.
  • descr: Unset | str (non-empty when provided).
  • element: Unset | type (element type for sequence fields, overrides the annotation).
  • converter: Unset | Converter-like (exposes read/write).
  • default: Any (installed on the instance before parsing).
  • status: int >= 0 (exit status carried by faults about this field).
- Named only
  • flag: Unset | str, hyphen-case name without leading dashes.
  • code: Unset | str, exactly one non-space character other than '-'.
  • category: str (display group, "" is the default group).
  • helper: bool (marks the help switch; validation is skipped when it is set).
- Ordered only
  • order: int >= 0.

Quick example:
    >>> from typing import Annotated
    >>> class Config:
    ...     verbose: bool = Named(code="v", descr="Chatty output")
    ...     name: str = Named("name", required=True)
    ...     tags: list[str] = Named(code="t")
    ...     source: str = Ordered(0)
    ...     target: Annotated[str, Ordered(1)]
    ...     cache: dict = Ignore()
    ...     threads: int = 4            # synthesized: --threads / -t (shadowed by tags)
"""
import inspect
import re
import types
import typing

from .accumulator import sequence_element, sequence_kind
from .converters import Converter
from .primitives import Char, FLOATS, NUMERICS
from .utils import *


class FieldType(type):
    """
    Metaclass giving specs and descriptors their introspection surface.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for messages.
    - Expose every name listed in __introspectable__ as a read-only property
      via mirror().
    - Provide stable __repr__/__rich_repr__ implementations.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": hyphenate(name),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by Named and Ordered.

    Raises
    - TypeError: when a value has the wrong type.
    - ValueError: when a string is empty after trimming or a number is negative.
    """
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = descr

    if (element := metadata["element"]) is not Unset and not callable(element):
        raise TypeError(f"{cls.__typename__} 'element' must be a type")

    if (converter := metadata["converter"]) is not Unset:
        try:
            metadata["converter"] = Converter.of(converter)
        except TypeError:
            raise TypeError(f"{cls.__typename__} 'converter' must expose callable 'read' and 'write' attributes") from None

    if not isinstance(status := metadata["status"], int) or isinstance(status, bool):
        raise TypeError(f"{cls.__typename__} 'status' must be an integer")
    elif status < 0:
        raise ValueError(f"{cls.__typename__} 'status' cannot be negative")


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate the keys and display metadata of a Named spec.

    Notes
    - Flag format regex: r"[^\W\d_](-?[^\W_]+)*" (hyphen-case, unicode letters allowed).
    - Codes are a single character; '-' and whitespace are rejected because
      they cannot be typed after a single dash.
    """
    if not isinstance(flag := metadata["flag"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'flag' must be a string")
    elif isinstance(flag, str) and not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", flag := flag.strip()):
        raise ValueError(f"{cls.__typename__} 'flag' must be a hyphen-case name without leading dashes")
    metadata["flag"] = flag

    if not isinstance(code := metadata["code"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'code' must be a string")
    elif isinstance(code, str) and (len(code) != 1 or code == "-" or code.isspace()):
        raise ValueError(f"{cls.__typename__} 'code' must be a single character other than '-'")

    if not isinstance(category := metadata["category"], str):
        raise TypeError(f"{cls.__typename__} 'category' must be a string")
    metadata["category"] = category.strip()


class Named(metaclass=FieldType):
    """
    Named field specification (reached through --flag and/or -c).

    When neither flag nor code is given, both are synthesized from the
    attribute identifier, exactly as for plain annotated attributes.
    """

    __introspectable__ = (
        "flag",
        "code",
        "required",
        "category",
        "descr",
        "element",
        "converter",
        "default",
        "status",
        "helper",
    )

    def __init__(
            self,
            flag=Unset,
            code=Unset,
            *,
            required=False,
            category="",
            descr=Unset,
            element=Unset,
            converter=Unset,
            default=None,
            status=1,
            helper=False
    ):
        metadata = {
            "flag": flag,
            "code": code,
            "required": bool(required),
            "category": category,
            "descr": descr,
            "element": element,
            "converter": converter,
            "default": default,
            "status": status,
            "helper": bool(helper),
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))


class Ordered(metaclass=FieldType):
    """
    Positional field specification; fields bind in ascending 'order'.
    """

    __introspectable__ = (
        "order",
        "required",
        "descr",
        "element",
        "converter",
        "default",
        "status",
    )

    def __init__(
            self,
            order,
            /,
            *,
            required=False,
            descr=Unset,
            element=Unset,
            converter=Unset,
            default=None,
            status=1
    ):
        if not isinstance(order, int) or isinstance(order, bool):
            raise TypeError(f"{type(self).__typename__} 'order' must be an integer")
        elif order < 0:
            raise ValueError(f"{type(self).__typename__} 'order' cannot be negative")

        metadata = {
            "order": order,
            "required": bool(required),
            "descr": descr,
            "element": element,
            "converter": converter,
            "default": default,
            "status": status,
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))


class Ignore(metaclass=FieldType):
    """
    Marker excluding an attribute from binding, help and validation.
    """


def _unwrap(annotation, /):
    # Optional[T] / T | None → T; other unions are left untouched.
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        arguments = [argument for argument in typing.get_args(annotation) if argument is not type(None)]
        if len(arguments) == 1:
            return arguments[0]
    return annotation


def _describe_type(annotation, kind, /):
    # Fallback help text for fields declared without 'descr'.
    if annotation is bool:
        return "Boolean flag which requires no argument"
    if kind is not None:
        return "Accepts a value, may be repeated"
    if annotation is str:
        return "Accepts a string value"
    if annotation in FLOATS:
        return "Accepts a floating point number"
    if annotation is Char:
        return "Accepts a single character"
    if annotation in NUMERICS:
        return "Accepts a number"
    return "Accepts a value"


class FieldDescriptor(metaclass=FieldType):
    """
    Engine-facing description of one bindable attribute.

    Built from (identifier, annotation, spec) where spec is a Named, an
    Ordered or Unset (plain attribute). A descriptor is either ordered or
    named, never both; named descriptors with neither flag nor code carry
    synthesized keys (synthesized=True) which the option table installs
    only when they are still free.
    """

    __introspectable__ = (
        "name",
        "type",
        "flag",
        "code",
        "required",
        "category",
        "descr",
        "ordered",
        "order",
        "kind",
        "element",
        "converter",
        "default",
        "status",
        "helper",
        "synthesized",
    )

    def __init__(self, name, annotation, spec=Unset, /):
        if not isinstance(name, str) or not name.isidentifier():
            raise TypeError(f"{type(self).__typename__} 'name' must be an identifier")
        if not isinstance(spec, Named | Ordered | Unset):
            raise TypeError(f"{type(self).__typename__} 'spec' must be a named or ordered spec")

        self._name = name
        self._type = annotation = _unwrap(annotation)
        self._kind = kind = sequence_kind(annotation)
        self._element = None
        if kind is not None:
            self._element = getattr(spec, "element", None) or coalesce(sequence_element(annotation), str)

        self._required = bool(getattr(spec, "required", False))
        self._converter = getattr(spec, "converter", None)
        self._default = getattr(spec, "default", None)
        self._status = getattr(spec, "status", 1)
        self._descr = getattr(spec, "descr", None) or _describe_type(annotation, kind)
        self._category = getattr(spec, "category", "")
        self._ordered = isinstance(spec, Ordered)
        self._order = spec.order if self._ordered else None

        self._flag = self._code = None
        self._synthesized = False
        if not self._ordered:
            flag, code = getattr(spec, "flag", None), getattr(spec, "code", None)
            if flag is None and code is None:
                flag, code = hyphenate(name), name.lstrip("_")[0].lower()
                self._synthesized = True
            self._flag, self._code = flag, code

        # A bool field flagged --help is the help switch even without helper=True.
        self._helper = bool(getattr(spec, "helper", False)) or (annotation is bool and self._flag == "help")
        if self._helper and annotation is not bool:
            raise TypeError(f"helper field {name!r} must be declared as bool")

    @property
    def label(self):
        """
        Display label used in faults: --flag, else -c, else the identifier.
        """
        if self._flag:
            return "--" + self._flag
        if self._code:
            return "-" + self._code
        return "<%s>" % self._name

    @property
    def boolean(self):
        return self._type is bool

    @property
    def sequence(self):
        return self._kind is not None


def _declarations(cls, /):
    # Yield (name, annotation, spec) in declaration order, bases first.
    hints = typing.get_type_hints(cls, include_extras=True)
    seen = set()

    for base in reversed(cls.__mro__):
        for name in list(inspect.get_annotations(base)) + list(vars(base)):
            if name in seen or name.startswith("_"):
                continue
            annotation = hints.get(name, Unset)
            attribute = inspect.getattr_static(cls, name, Unset)
            spec = attribute if isinstance(attribute, Named | Ordered | Ignore) else Unset

            if typing.get_origin(annotation) is typing.Annotated:
                annotation, *extras = typing.get_args(annotation)
                for extra in extras:
                    if isinstance(extra, Named | Ordered | Ignore):
                        spec = extra
                        break

            if annotation is Unset and spec is Unset:
                continue  # plain class attributes and methods are not fields
            if typing.get_origin(annotation) is typing.ClassVar:
                continue
            seen.add(name)
            yield name, coalesce(annotation, str), spec


def describe(cls, /):
    """
    Build the FieldDescriptor tuple for a destination class.

    Rules
    - annotated attributes and attributes holding a spec are fields;
      spec-only attributes without an annotation are typed as str.
    - names starting with an underscore, ClassVar annotations and Ignore
      specs are skipped.
    - specs may be given as the attribute value or inside typing.Annotated.
    """
    if not isinstance(cls, type):
        raise TypeError("describe() argument must be a class")

    descriptors = []
    for name, annotation, spec in _declarations(cls):
        if isinstance(spec, Ignore):
            continue
        descriptors.append(FieldDescriptor(name, annotation, spec))
    return tuple(descriptors)


__all__ = (
    # Specs (declaration surface)
    "Named",
    "Ordered",
    "Ignore",

    # Descriptors
    "FieldDescriptor",
    "describe",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del FieldType
