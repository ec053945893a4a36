"""
cmdlineargs parameter registry.

The registry exclusively owns every registered Parameter and indexes them:
- by long name (named parameters only; positional names are reserved for
  uniqueness but are not resolvable through --name),
- by short name,
- in registration order, separately for named and positional parameters
  (registration order is positional order).

Invariants are enforced at registration time and violations raise a
RegistrationError subclass immediately:
- long names are unique across all parameters and at least 2 characters long;
- short names are unique, a single character with code in (32, 127];
- a flag is named and scalar;
- no two parameters bind the same attribute of the same target object;
- once a list or optional positional parameter is registered, no positional
  parameter may follow it.

Descriptors are never removed. The registry holds no derived state beyond its
indexes, so registering more parameters between matching invocations is legal.
"""
import itertools

from .arguments import Parameter, Kind
from .faults import (
    DuplicateLongNameError,
    DuplicateShortNameError,
    LongNameTooShortError,
    InvalidShortNameError,
    PositionalOrderViolationError,
    InvalidFlagError,
    SharedStorageError,
)


class Registry:
    """
    Owner and index of all parameters known to one parser.
    """

    def __init__(self):
        self._names = {}
        self._longs = {}
        self._shorts = {}
        self._named = []
        self._positional = []

    @property
    def named(self):
        return tuple(self._named)

    @property
    def positional(self):
        return tuple(self._positional)

    def __iter__(self):
        return itertools.chain(self._named, self._positional)

    def __len__(self):
        return len(self._named) + len(self._positional)

    def __contains__(self, name):
        return name in self._names

    def lookup_long(self, name, /):
        """
        Return the named parameter registered under name, or None.
        """
        return self._longs.get(name)

    def lookup_short(self, short, /):
        """
        Return the named parameter registered under the short name, or None.
        """
        return self._shorts.get(short)

    def _check_identity(self, parameter):
        if len(parameter.name) < 2:
            raise LongNameTooShortError(name=parameter.name, parameter=parameter)

        if (short := parameter.short) is not None:
            if len(short) != 1 or not 32 < ord(short) <= 127:
                raise InvalidShortNameError(short=short, name=parameter.name, parameter=parameter)
            if short in self._shorts:
                raise DuplicateShortNameError(
                    short=short,
                    parameter=parameter,
                    existing=self._shorts[short]
                )

        if parameter.name in self._names:
            raise DuplicateLongNameError(
                name=parameter.name,
                parameter=parameter,
                existing=self._names[parameter.name]
            )

    def _check_storage(self, parameter):
        binding = parameter.binding
        for existing in self._names.values():
            if existing.binding.target is binding.target and existing.binding.attribute == binding.attribute:
                raise SharedStorageError(
                    parameter=parameter,
                    attribute=binding.attribute,
                    existing=existing
                )

    def register_named(self, parameter, /):
        """
        Register a named parameter and seed its caller storage.

        Raises
        - TypeError: not a Parameter, or not a named one.
        - InvalidFlagError: a flag with list arity.
        - LongNameTooShortError, InvalidShortNameError,
          DuplicateLongNameError, DuplicateShortNameError.
        - SharedStorageError: another parameter is bound to the same attribute
          of the same target.
        """
        if not isinstance(parameter, Parameter):
            raise TypeError("register_named() argument must be a parameter")
        if parameter.kind is not Kind.NAMED:
            raise TypeError("register_named() argument must be a named parameter")
        if parameter.flag and parameter.multiple:
            raise InvalidFlagError(parameter=parameter, reason="a list")

        self._check_identity(parameter)
        self._check_storage(parameter)

        self._names[parameter.name] = parameter
        self._longs[parameter.name] = parameter
        if parameter.short is not None:
            self._shorts[parameter.short] = parameter
        self._named.append(parameter)
        parameter.seed()
        return parameter

    def register_positional(self, parameter, /):
        """
        Register the next positional parameter and seed its caller storage.

        Raises
        - TypeError: not a Parameter, or not a positional one.
        - InvalidFlagError: a positional flag.
        - InvalidShortNameError: positional parameters cannot have a short name.
        - PositionalOrderViolationError: the previous positional parameter is
          optional or a list.
        - LongNameTooShortError, DuplicateLongNameError, SharedStorageError.
        """
        if not isinstance(parameter, Parameter):
            raise TypeError("register_positional() argument must be a parameter")
        if parameter.kind is not Kind.POSITIONAL:
            raise TypeError("register_positional() argument must be a positional parameter")

        if parameter.flag:
            raise InvalidFlagError(parameter=parameter, reason="positional")
        if parameter.short is not None:
            raise InvalidShortNameError(short=parameter.short, name=parameter.name, parameter=parameter)

        self._check_identity(parameter)
        self._check_storage(parameter)

        if self._positional:
            previous = self._positional[-1]
            if previous.multiple:
                raise PositionalOrderViolationError(reason="list", previous=previous, parameter=parameter)
            if not previous.required:
                raise PositionalOrderViolationError(reason="optional", previous=previous, parameter=parameter)

        parameter._index = len(self._positional) + 1
        self._names[parameter.name] = parameter
        self._positional.append(parameter)
        parameter.seed()
        return parameter

    def reset(self):
        """
        Clear the per-invocation matched state of every parameter.
        """
        for parameter in self:
            parameter.reset()

    def __rich_repr__(self):
        yield "named", self.named
        yield "positional", self.positional

    def __repr__(self):
        return "registry(named=%r, positional=%r)" % (
            [parameter.name for parameter in self._named],
            [parameter.name for parameter in self._positional],
        )


__all__ = (
    "Registry",
)
