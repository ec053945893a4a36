r"""
cmdlineargs parameter descriptors.

Overview
- Parameter: the unit of registration. Identity (long name, optional short
  name), kind (named/positional), arity (scalar/list), requiredness, flag
  marker, positional index, converter, help text and the transient
  “matched in this invocation” state.
- Binding: a non-owning handle onto caller storage (an attribute of a caller
  supplied object). The caller keeps that object alive across every matching
  invocation; descriptors never own bound values.
- Kind / Arity: the closed tags a Parameter is discriminated by.

Introspection & representation
- ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields declared in __introspectable__ as read-only properties (mirror()).

Validation split
- Construction only checks the types of its own fields (TypeError).
- Naming and ordering invariants (lengths, printable short names, uniqueness,
  positional order, flag placement) belong to the Registry, because they are
  only meaningful relative to the other registered descriptors.
"""
import functools
import operator
import re
from collections.abc import Iterable, MutableSequence
from enum import Enum

from .converters import Converter
from .utils import *


class Kind(Enum):
    NAMED = "named"
    POSITIONAL = "positional"


class Arity(Enum):
    SCALAR = "scalar"
    LIST = "list"


class Binding:
    """
    Handle to one attribute of a caller-owned object.

    The binding references the target, it never copies it: list values are
    mutated in place so aliases held by the caller observe every update.
    """
    __slots__ = ("_target", "_attribute")

    def __init__(self, target, attribute, /):
        if not isinstance(attribute, str):
            raise TypeError("binding attribute must be a string")
        if not attribute:
            raise ValueError("binding attribute cannot be empty")
        self._target = target
        self._attribute = attribute

    @property
    def target(self):
        return self._target

    @property
    def attribute(self):
        return self._attribute

    def get(self, default=None, /):
        return getattr(self._target, self._attribute, default)

    def set(self, value, /):
        setattr(self._target, self._attribute, value)

    def seed(self, value, /):
        """
        Store value only when the target does not hold the attribute yet.
        """
        if not hasattr(self._target, self._attribute):
            self.set(value)

    def clear(self):
        values = self.get()
        if isinstance(values, MutableSequence):
            del values[:]
        else:
            self.set([])

    def append(self, value, /):
        values = self.get()
        if not isinstance(values, MutableSequence):
            self.set(values := [])
        values.append(value)

    def __repr__(self):
        return "binding(%s.%s)" % (type(self._target).__name__, self._attribute)


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable records.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printers.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens).
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - parameter(name='force', short='f', kind=<Kind.NAMED: 'named'>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        if "__repr__" not in namespace:
            self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        if "__rich_repr__" not in namespace:
            self.__rich_repr__ = __rich_repr__

        return self


class Parameter(metaclass=ArgumentType):
    """
    Registered definition of one command-line parameter.

    Fields (read-only properties)
    - name: long name; bound with --name for named parameters and shown as
      <name> for positional ones.
    - short: single-character short name (bound with -s) or None.
    - help: descriptive text shown by the help renderer.
    - kind: Kind.NAMED | Kind.POSITIONAL.
    - arity: Arity.SCALAR (last write wins) | Arity.LIST (ordered accumulation).
    - required: requiredness checked at the end of every matching invocation.
    - flag: consumes no value token and binds True; always optional.
    - index: 1-based order among positional parameters, 0 for named ones.
    - converter: callable turning one token into one value.
    - binding: handle onto caller storage.
    - default: value seeded into the binding at registration when the caller
      storage does not hold the attribute yet (Unset: type-driven default).

    State
    - matched: True once the parameter received a value in the current
      invocation; reset() clears it at the start of every invocation.
    """

    __introspectable__ = (
        "name",
        "short",
        "help",
        "kind",
        "arity",
        "required",
        "flag",
        "index",
        "converter",
        "binding",
        "default",
    )
    __displayable__ = (
        "name",
        "short",
        "kind",
        "arity",
        "required",
        "flag",
        "index",
    )

    def __init__(
            self,
            name,
            help="",
            /,
            *,
            kind=Kind.NAMED,
            arity=Arity.SCALAR,
            short=None,
            required=True,
            flag=False,
            converter=Unset,
            binding=Unset,
            default=Unset,
    ):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        if not isinstance(help, str):
            raise TypeError(f"{type(self).__typename__} 'help' must be a string")
        if not isinstance(kind, Kind):
            raise TypeError(f"{type(self).__typename__} 'kind' must be a Kind")
        if not isinstance(arity, Arity):
            raise TypeError(f"{type(self).__typename__} 'arity' must be an Arity")
        if short is not None and not isinstance(short, str):
            raise TypeError(f"{type(self).__typename__} 'short' must be a string")
        converter = coalesce(converter, Converter(bool if flag else str))
        if not callable(converter):
            raise TypeError(f"{type(self).__typename__} 'converter' must be callable")
        if binding is not Unset and not isinstance(binding, Binding):
            raise TypeError(f"{type(self).__typename__} 'binding' must be a Binding")

        self._name = name
        self._help = help
        self._kind = kind
        self._arity = arity
        self._short = short
        # Flags are always optional.
        self._required = bool(required) and not flag
        self._flag = bool(flag)
        self._index = 0
        self._converter = converter
        self._binding = coalesce(binding, Binding(_Storage(), "value"))
        self._default = default
        self._matched = False

    @property
    def matched(self):
        return self._matched

    @property
    def named(self):
        return self._kind is Kind.NAMED

    @property
    def positional(self):
        return self._kind is Kind.POSITIONAL

    @property
    def multiple(self):
        return self._arity is Arity.LIST

    @property
    def choices(self):
        """
        Sorted valid literals when the converter is enumerated, else ().
        """
        return tuple(getattr(self._converter, "choices", ()))

    @property
    def value(self):
        """
        Current value held by the caller storage.
        """
        return self._binding.get()

    def seed(self):
        """
        Put the initial value into caller storage unless it is already there.
        """
        if self._default is not Unset:
            default = self._default
            if self.multiple:
                # A lone value seeds a one-item list.
                if isinstance(default, str) or not isinstance(default, Iterable):
                    default = [default]
                else:
                    default = list(default)
        elif self.multiple:
            default = []
        else:
            default = False if self._flag else None
        self._binding.seed(default)

    def reset(self):
        self._matched = False

    def feed(self, token, /):
        """
        Convert one token and store the result.

        Scalars overwrite the bound value. Lists clear the bound values on their
        first touch in the current invocation, then append. Converter failures
        propagate (ConversionFailedError) and leave the binding untouched.
        """
        value = self._converter(token)
        if self._arity is Arity.LIST:
            if not self._matched:
                self._binding.clear()
            self._binding.append(value)
        else:
            self._binding.set(value)
        self._matched = True
        return value

    @property
    def label(self):
        """
        Identity used in diagnostics: '#1 <file>', '-n/--name' or '--name'.
        Positional parameters not registered yet have no index: '<file>'.
        """
        if self._kind is Kind.POSITIONAL:
            if not self._index:
                return "<%s>" % self._name
            return "#%d <%s>" % (self._index, self._name)
        if self._short is not None:
            return "-%s/--%s" % (self._short, self._name)
        return "--%s" % self._name

    def __str__(self):
        return self.label


class _Storage:
    """
    Private holder used when a Parameter is built without caller storage.
    """


__all__ = (
    "Kind",
    "Arity",
    "Binding",
    "Parameter",
)
