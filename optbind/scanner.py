"""
Tokenizer/binder state machine.

states
- NEUTRAL: initial and terminal state. classifies the token on top of the stack.
  • no tokens left → halt.
  • '--name' or '-x' → FLAG (token left on the stack).
  • '-xyz' → popped and pushed back as '-z', '-y', '-x' (so '-x' is on top) → FLAG.
  • anything else ('-' and '' included) → popped and bound to the next ordered field.
    a token with no ordered field left raises UnexpectedPositionalError.
- FLAG: pops the flag token and records the current flag name ('--name' → 'name',
  '-x' → 'x') → VALUE. a token without a leading dash is bound positionally instead.
- VALUE: a boolean field binds True without consuming anything. otherwise the next
  token is popped and bound; an empty stack halts (dangling flag, surfaced as a
  DanglingOptionWarning, never an error).

binding
- an unknown flag name binds nothing (its value token is still consumed).
- sequence fields coerce against their element type and go through accumulate().
- scalar fields coerce against their declared type.
- every coercion fault propagates immediately; fields bound before it keep their values.

the machine always terminates: every transition out of NEUTRAL either pops a
token or moves to FLAG, which pops one.
"""
from enum import Enum

from .accumulator import accumulate
from .converters import convert
from .faults import *


class State(Enum):
    NEUTRAL = "neutral"
    FLAG = "flag"
    VALUE = "value"


class ParseState:
    """
    Mutable state of one scan.

    - stack: remaining tokens, LIFO; the next token to consume is stack[-1].
    - instance: destination instance being populated.
    - current: current flag name, set by FLAG and consumed by VALUE.
    - long: whether the current flag was spelled with two dashes.
    - cursor: index of the next ordered field to fill.
    """

    def __init__(self, tokens, instance, ordered, /):
        self.stack = list(reversed(tokens))
        self.instance = instance
        self.current = None
        self.long = False
        self.cursor = 0
        self._ordered = ordered

    def peek(self):
        return self.stack[-1]

    def pop(self):
        return self.stack.pop()

    def push(self, token, /):
        self.stack.append(token)

    def next_ordered(self):
        """
        Next ordered field, consuming the positional cursor; None once exhausted.
        """
        if self.cursor >= len(self._ordered):
            return None
        descriptor = self._ordered[self.cursor]
        self.cursor += 1
        return descriptor


class Scanner:
    """
    Drives ParseState through the NEUTRAL/FLAG/VALUE transitions.

    Parameters
    - table: OptionTable of the destination class.
    - converters: optional ConverterRegistry (read-only while scanning).
    - getter/setter: the field access capability, getattr/setattr by default.
    - **runtime: shell/fancy/colorful/prog flags forwarded to warnings.
    """

    def __init__(self, table, /, *, converters=None, getter=getattr, setter=setattr, **runtime):
        self._table = table
        self._converters = converters
        self._getter = getter
        self._setter = setter
        self._runtime = runtime

    def scan(self, tokens, instance, /):
        state = ParseState(tokens, instance, self._table.ordered)
        current = State.NEUTRAL

        while current is not None:
            match current:
                case State.NEUTRAL:
                    current = self._neutral(state)
                case State.FLAG:
                    current = self._flag(state)
                case State.VALUE:
                    current = self._value(state)

        return instance

    def _neutral(self, state):
        if not state.stack:
            return None

        token = state.peek()

        if token.startswith("--"):
            return State.FLAG

        if token.startswith("-") and len(token) > 2:
            # combined short flags: the leftmost character must be processed first
            state.pop()
            for character in reversed(token[1:]):
                state.push("-" + character)
            return State.FLAG

        if token.startswith("-") and len(token) == 2:
            return State.FLAG

        self._bind_ordered(state, state.pop())
        return State.NEUTRAL

    def _flag(self, state):
        token = state.pop()

        if token.startswith("--"):
            state.current, state.long = token[2:], True
        elif token.startswith("-"):
            state.current, state.long = token[1:], False
        else:
            self._bind_ordered(state, token)
            return State.NEUTRAL

        return State.VALUE

    def _value(self, state):
        descriptor = self._table.resolve(state.current, long=state.long)

        if descriptor is not None and descriptor.boolean:
            self._setter(state.instance, descriptor.name, True)
            state.current = None
            return State.NEUTRAL

        if not state.stack:
            if descriptor is not None:
                trigger(DanglingOptionWarning(
                    "option %r expects a value but the arguments ended" % self._table.label(descriptor),
                    title="dangling option",
                    code=FaultCode.DANGLING_OPTION,
                    hint="provide a value after %s" % self._table.label(descriptor),
                    field=descriptor,
                ), **self._runtime)
            return None

        raw = state.pop()
        if descriptor is not None:
            self._bind(state, descriptor, raw)
        state.current = None
        return State.NEUTRAL

    def _bind_ordered(self, state, raw, /):
        if (descriptor := state.next_ordered()) is None:
            accepted = len(self._table.ordered)
            raise UnexpectedPositionalError(
                "unexpected positional argument %r at position %d, only %d accepted" % (raw, state.cursor + 1, accepted),
                title="unexpected positional argument",
                code=FaultCode.UNEXPECTED_POSITIONAL,
                hint="remove the extra argument, or prefix it with the option it belongs to",
                value=raw,
                position=state.cursor + 1
            )
        self._bind(state, descriptor, raw)

    def _bind(self, state, descriptor, raw, /):
        if descriptor.sequence:
            element = convert(
                raw,
                descriptor.element,
                converter=descriptor.converter,
                converters=self._converters,
                field=descriptor
            )
            existing = self._getter(state.instance, descriptor.name)
            value = accumulate(existing, descriptor.kind, descriptor.element, element, field=descriptor)
        else:
            value = convert(
                raw,
                descriptor.type,
                converter=descriptor.converter,
                converters=self._converters,
                field=descriptor
            )
        self._setter(state.instance, descriptor.name, value)


__all__ = (
    "State",
    "ParseState",
    "Scanner",
)
