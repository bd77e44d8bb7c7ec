"""
Option metadata table: token name → field descriptor.

Construction
- named and ordered descriptors are partitioned.
- explicit flags and codes are registered first; a key claimed twice raises
  DuplicateOptionError before any token is parsed.
- synthesized keys (fields declared without flag and code) are registered
  afterwards and only when still free: first registered wins, a skipped key
  surfaces a ShadowedOptionWarning and is otherwise ignored.
- ordered descriptors are sorted ascending by their declared order (stable,
  so equal orders keep declaration order).

Lookup
- resolve(name, long=...) returns the descriptor or None; an unknown name is
  never an error at this level.

The table is read-only once built; the positional cursor lives in the scanner's ParseState.
"""
from types import MappingProxyType

from .faults import *


class OptionTable:
    """
    Flag/code indexes and the positional sequence of one destination class.

    Parameters
    - descriptors: iterable of FieldDescriptor (see fields.describe()).
    - **runtime: shell/fancy/colorful/prog flags forwarded to warnings.
    """

    def __init__(self, descriptors, /, **runtime):
        self._flags = {}
        self._codes = {}
        self._keys = {}
        named = []
        ordered = []

        for descriptor in descriptors:
            (ordered if descriptor.ordered else named).append(descriptor)

        for descriptor in named:
            if descriptor.synthesized:
                continue
            flag = self._claim(self._flags, descriptor.flag, descriptor, "--")
            code = self._claim(self._codes, descriptor.code, descriptor, "-")
            self._keys[descriptor.name] = (flag, code)

        for descriptor in named:
            if not descriptor.synthesized:
                continue
            flag = self._settle(self._flags, descriptor.flag, descriptor, "--", runtime)
            code = self._settle(self._codes, descriptor.code, descriptor, "-", runtime)
            self._keys[descriptor.name] = (flag, code)

        self._named = tuple(named)
        self._ordered = tuple(sorted(ordered, key=lambda descriptor: descriptor.order))

    @staticmethod
    def _claim(index, key, descriptor, prefix, /):
        if key is None:
            return None
        if key in index:
            raise DuplicateOptionError(
                "duplicate option name %r: field %r claims it but field %r already does" % (
                    prefix + key, descriptor.name, index[key].name
                ),
                title="duplicate option",
                code=FaultCode.DUPLICATE_OPTION,
                hint="give one of the fields a different %s" % ("flag" if prefix == "--" else "code"),
                field=descriptor,
                owner=index[key],
                key=key,
                status=descriptor.status
            )
        index[key] = descriptor
        return key

    @staticmethod
    def _settle(index, key, descriptor, prefix, runtime, /):
        if key not in index:
            index[key] = descriptor
            return key
        trigger(ShadowedOptionWarning(
            "option name %r for field %r is already taken by field %r and was skipped" % (
                prefix + key, descriptor.name, index[key].name
            ),
            title="shadowed option",
            code=FaultCode.SHADOWED_OPTION,
            hint="declare the field with Named(...) to choose its flag and code explicitly",
            field=descriptor,
            owner=index[key],
            key=key,
        ), **runtime)
        return None

    @property
    def flags(self):
        return MappingProxyType(self._flags)

    @property
    def codes(self):
        return MappingProxyType(self._codes)

    @property
    def named(self):
        return self._named

    @property
    def ordered(self):
        return self._ordered

    @property
    def descriptors(self):
        return self._named + self._ordered

    @property
    def required(self):
        return tuple(descriptor for descriptor in self.descriptors if descriptor.required)

    @property
    def helpers(self):
        return tuple(descriptor for descriptor in self._named if descriptor.helper)

    def keys(self, descriptor, /):
        """
        (flag, code) actually registered for a named descriptor; a skipped
        synthesized key is None.
        """
        return self._keys.get(descriptor.name, (None, None))

    def label(self, descriptor, /):
        """
        Display label for faults: the registered --flag, else -c, else <name>.
        """
        flag, code = self.keys(descriptor)
        if flag:
            return "--" + flag
        if code:
            return "-" + code
        return "<%s>" % descriptor.name

    def resolve(self, name, /, *, long=True):
        """
        Descriptor registered under name, or None.

        Tokens spelled with two dashes look up long flags first, single-dash
        tokens look up short codes first; both fall back to the other index.
        """
        first, second = (self._flags, self._codes) if long else (self._codes, self._flags)
        return first.get(name) or second.get(name)

    def __repr__(self):
        return "option-table(flags=%r, codes=%r, ordered=%r)" % (
            sorted(self._flags), sorted(self._codes), [descriptor.name for descriptor in self._ordered]
        )


__all__ = (
    "OptionTable",
)
