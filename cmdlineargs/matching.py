"""
cmdlineargs matching engine: one pass over a token sequence.

Token grammar
    --name value      named parameter, value in the next token
    --name=value      named parameter, value after the first '='
    --name            flag (binds True)
    -s value          named parameter by short name
    -s                flag by short name
    token             positional (also '-' alone and the empty string)

Anything else starting with a single dash and longer than two characters
('-abc') is a structural BadArgumentError.

States
- scanning: classify the next token.
- awaiting a value for a parameter: the next token is that value, whatever it
  looks like ('-10', '--x' and '' included).

After the last token the engine checks completeness: an option still waiting
for its value raises DanglingOptionError, then every required named and
positional parameter must have been matched (MissingArgumentError).

Notes
- Every invocation first resets the matched state of every parameter.
- Scalars keep their last value; lists clear on their first touch within an
  invocation, not at invocation start, so an untouched list keeps the values
  of a previous invocation.
- Nothing is rolled back on failure: values converted before the failing token
  stay bound.
"""
from collections.abc import Iterable, MutableSequence

from .faults import (
    BadArgumentError,
    UnknownArgumentError,
    UnexpectedPositionalArgumentError,
    DanglingOptionError,
    BadValueError,
    MissingArgumentError,
    ConversionFailedError,
)
from .registry import Registry
from .utils import Unset

# Synthetic value fed to flags.
FLAG_VALUE = "true"


class Matcher:
    """
    Stateful scanner binding tokens to the parameters of a registry.

    A Matcher may be run any number of times; each run is an independent
    matching invocation over the same registry.
    """

    def __init__(self, registry, /):
        if not isinstance(registry, Registry):
            raise TypeError("matcher argument must be a registry")
        self._registry = registry
        self._pending = None
        self._opener = Unset
        self._cursor = 0
        self._position = 0

    @property
    def registry(self):
        return self._registry

    def _feed(self, parameter, token):
        try:
            parameter.feed(token)
        except ConversionFailedError as exception:
            raise BadValueError(
                token=token,
                parameter=parameter,
                choices=exception.choices or parameter.choices,
                position=self._position
            ) from exception

    def _await(self, parameter, token):
        if parameter.flag:
            self._feed(parameter, FLAG_VALUE)
        else:
            self._pending = parameter
            self._opener = token

    def _resolve_short(self, token):
        if (parameter := self._registry.lookup_short(token[1])) is None:
            raise UnknownArgumentError(token=token, position=self._position)
        self._await(parameter, token)

    def _resolve_long(self, token):
        name, equals, value = token[2:].partition("=")
        if (parameter := self._registry.lookup_long(name)) is None:
            raise UnknownArgumentError(token=token, name=name, position=self._position)
        if equals:
            self._feed(parameter, value)
        else:
            self._await(parameter, token)

    def _resolve_positional(self, token):
        positional = self._registry.positional
        if self._cursor >= len(positional):
            raise UnexpectedPositionalArgumentError(token=token, position=self._position)
        parameter = positional[self._cursor]
        self._feed(parameter, token)
        if not parameter.multiple:
            self._cursor += 1

    def _step(self, token):
        if self._pending is not None:
            parameter, self._pending, self._opener = self._pending, None, Unset
            self._feed(parameter, token)
        elif len(token) < 2 or not token.startswith("-"):
            self._resolve_positional(token)
        elif len(token) == 2:
            self._resolve_short(token)
        elif token[1] != "-":
            raise BadArgumentError(token=token, position=self._position)
        else:
            self._resolve_long(token)

    def _finalize(self):
        if self._pending is not None:
            raise DanglingOptionError(
                token=self._opener,
                parameter=self._pending,
                position=self._position
            )

        for parameter in self._registry.named:
            if parameter.required and not parameter.matched:
                raise MissingArgumentError(parameter=parameter, name=parameter.name)

        for parameter in self._registry.positional:
            if parameter.required and not parameter.matched:
                raise MissingArgumentError(parameter=parameter, name=parameter.name)

    def run(self, tokens, /):
        """
        Run one matching invocation and return a snapshot of bound values.

        Parameters
        - tokens: Iterable[str], already split (no shell quoting is applied and
          tokens are not trimmed).

        Returns
        - dict mapping every parameter's long name to its current bound value
          (lists are copied, so later invocations never rewrite it).

        Raises
        - TypeError: tokens is a plain string or holds non-string items.
        - ParseError subclasses for malformed or incomplete input.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("run() argument must be an iterable of strings")

        self._registry.reset()
        self._pending = None
        self._opener = Unset
        self._cursor = 0
        self._position = 0

        for self._position, token in enumerate(tokens, 1):
            if not isinstance(token, str):
                raise TypeError("run() argument must be an iterable of strings")
            self._step(token)

        self._finalize()
        return {parameter.name: _snapshot(parameter) for parameter in self._registry}


def _snapshot(parameter):
    # Lists are copied: the next invocation clears the bound list in place.
    value = parameter.value
    if parameter.multiple and isinstance(value, MutableSequence):
        return list(value)
    return value


def match(registry, tokens, /):
    """
    Convenience wrapper: one matching invocation of tokens against registry.
    """
    return Matcher(registry).run(tokens)


__all__ = (
    "Matcher",
    "match",
    "FLAG_VALUE",
)
