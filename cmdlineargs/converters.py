"""
cmdlineargs converters: turn one raw token into one typed value.

Strategies
- Converter: type-directed scalar conversion.
  • str    → the token verbatim (no splitting, whitespace preserved).
  • int    → optional sign and decimal digits; the whole token must be consumed.
  • float  → decimal or exponent literal; the whole token must be consumed.
  • bool   → "true"/"1" or "false"/"0" (flags are fed the synthetic "true").
  • other callables are used as-is; ValueError/TypeError/ArithmeticError raised
    by them become ConversionFailedError.
- EnumConverter: explicit mapping from literal token text to a target value.
  Unknown tokens fail and report the valid literal set, sorted.

List arity is not handled here: descriptors wrap a converter and decide where
each converted value lands (see arguments.Parameter.feed).
"""
import builtins
import enum
import re
from collections.abc import Mapping
from types import MappingProxyType

from .faults import ConversionFailedError

_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_BOOLEANS = {"true": True, "1": True, "false": False, "0": False}


def _to_str(token):
    return token


def _to_int(token):
    if not _INTEGER.fullmatch(token):
        raise ValueError(token)
    return int(token)


def _to_float(token):
    if not _FLOAT.fullmatch(token):
        raise ValueError(token)
    return float(token)


def _to_bool(token):
    try:
        return _BOOLEANS[token]
    except KeyError:
        raise ValueError(token) from None


_BUILTINS = {
    str: _to_str,
    int: _to_int,
    float: _to_float,
    bool: _to_bool,
}


class Converter:
    """
    Type-directed scalar converter.

    The built-in numeric and boolean rules require the full token to match;
    anything else (a trailing unit, inner spaces, an empty token) fails.
    """

    def __init__(self, type=str, /):
        if not callable(type):
            raise TypeError("converter 'type' must be callable")
        self._type = type
        self._convert = _BUILTINS.get(type, type)

    @property
    def type(self):
        return self._type

    @property
    def choices(self):
        """
        Valid literals for diagnostics; empty for open-ended converters.
        """
        return ()

    def __call__(self, token, /):
        if not isinstance(token, str):
            raise TypeError("converters accept string tokens only")
        try:
            return self._convert(token)
        except ConversionFailedError:
            raise
        except (ValueError, TypeError, ArithmeticError) as exception:
            raise ConversionFailedError(token=token, choices=self.choices) from exception

    def __rich_repr__(self):
        yield "type", getattr(self._type, "__name__", self._type)

    def __repr__(self):
        return "converter(type=%s)" % getattr(self._type, "__name__", repr(self._type))


class EnumConverter(Converter):
    """
    Converter validating tokens against an explicit literal → value table.

    >>> levels = EnumConverter({"low": 0, "high": 1})
    >>> levels("high")
    1
    >>> levels.choices
    ('high', 'low')
    """

    def __init__(self, values, /):
        if not isinstance(values, Mapping):
            raise TypeError("enum converter values must be a mapping")
        if not values:
            raise ValueError("enum converter values cannot be empty")
        for literal in values:
            if not isinstance(literal, str):
                raise TypeError("enum converter literals must be strings")
        super().__init__(str)
        self._values = MappingProxyType(dict(values))
        self._convert = self._lookup

    @property
    def values(self):
        return self._values

    @property
    def choices(self):
        return tuple(sorted(self._values))

    def _lookup(self, token):
        try:
            return self._values[token]
        except KeyError:
            raise ConversionFailedError(token=token, choices=self.choices) from None

    def __rich_repr__(self):
        yield "values", dict(self._values)

    def __repr__(self):
        return "enum-converter(values=%r)" % dict(self._values)


def converter(type=str, choices=None, /):
    """
    Pick the conversion strategy for a registration call.

    - choices given          → EnumConverter(choices)
    - an enum.Enum subclass  → EnumConverter over member names
    - a Converter instance   → used as-is
    - any other callable     → Converter(type)
    """
    if choices is not None:
        return EnumConverter(choices)
    if isinstance(type, Converter):
        return type
    if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        return EnumConverter({member.name: member for member in type})
    return Converter(type)


__all__ = (
    "Converter",
    "EnumConverter",
    "converter",
)
