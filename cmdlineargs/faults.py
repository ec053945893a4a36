"""
cmdlineargs faults (registration and parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by domain so logs and searches stay predictable.
- Fault: base type carrying structured context (token, parameter, choices,
  position, ...). Messages are formatted lazily from that context, so the
  taxonomy is testable independently of the wording.
- RegistrationError: programmer/configuration errors raised synchronously by
  registration calls. They are also ValueErrors and are never retried.
- ParseError: end-user input errors raised by a matching invocation. Always
  recoverable by the caller (show, exit non-zero, or retry with new input).
- trigger(): boundary entry point that either raises a fault or renders it with
  rich and exits (shell mode).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parse errors name the ordinal position of the
  offending token (“at third position”) whenever one exists.
- Soft but technical language: short titles, one-sentence bodies, one hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, ordinal, program

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - parse errors (11xxx)
      • token shape: BAD_ARGUMENT, UNKNOWN_ARGUMENT
      • values: DANGLING_OPTION, BAD_VALUE, CONVERSION_FAILED
      • positionals: UNEXPECTED_POSITIONAL
      • completeness: MISSING_ARGUMENT
    - registration errors (21xxx)
      • identity: DUPLICATE_LONG_NAME, DUPLICATE_SHORT_NAME,
        LONG_NAME_TOO_SHORT, INVALID_SHORT_NAME
      • structure: POSITIONAL_ORDER_VIOLATION, INVALID_FLAG, SHARED_STORAGE

    spacing leaves room for future additions without reshuffling codes.
    """
    # --- token shape (111xx) ---
    BAD_ARGUMENT                = 11111
    UNKNOWN_ARGUMENT            = 11112

    # --- values (1112x) ---
    DANGLING_OPTION             = 11117
    BAD_VALUE                   = 11124
    CONVERSION_FAILED           = 11126

    # --- positionals (1113x) ---
    UNEXPECTED_POSITIONAL       = 11131

    # --- completeness (1114x) ---
    MISSING_ARGUMENT            = 11141

    # --- registration identity (211xx) ---
    DUPLICATE_LONG_NAME         = 21101
    DUPLICATE_SHORT_NAME        = 21102
    LONG_NAME_TOO_SHORT         = 21103
    INVALID_SHORT_NAME          = 21104

    # --- registration structure (212xx) ---
    POSITIONAL_ORDER_VIOLATION  = 21201
    INVALID_FLAG                = 21202
    SHARED_STORAGE              = 21203

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Fault(Exception):
    """
    base of every cmdlineargs error.

    subclasses declare
    - code: FaultCode
    - title: short, lowercase headline
    - template: %-style message over the context fields (see _fields)
    - hint: one actionable sentence

    context fields are passed as keywords and are readable as attributes
    (fault.token, fault.parameter, ...). a field declared in __fields__ but
    not given reads as None; any other name raises AttributeError.
    """
    code = Unset
    title = Unset
    template = Unset
    hint = Unset
    __fields__ = ("token", "parameter", "choices", "position", "name")

    def __init__(self, /, **context):
        super().__init__()
        self.context = MappingProxyType(context)

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)
        try:
            context = self.__dict__["context"]
        except KeyError:
            raise AttributeError(name) from None
        if name in context:
            return context[name]
        if name in type(self).__fields__:
            return None
        raise AttributeError("%r object has no attribute %r" % (type(self).__name__, name))

    def __reduce__(self):
        return _rebuild, (type(self), dict(self.context))

    def _fields(self):
        fields = defaultdict(str, self.context)
        position = self.context.get("position")
        fields["at"] = " at %s position" % ordinal(position) if position else ""
        choices = self.context.get("choices") or ()
        fields["choices"] = ", ".join(map(str, choices))
        fields["valid"] = ". valid values: %s" % fields["choices"] if choices else ""
        return fields

    @property
    def message(self):
        return self.template % self._fields()

    def __str__(self):
        return self.message

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % item for item in self.context.items()))

    def render(self, *, prog=Unset, colorful=True, fancy=False, width=Unset):
        """
        build a rich renderable for this fault.

        layout
        - header: [ prog - code | Title ]
        - body: the message, then an arrow and the hint.
        - fancy=True wraps everything in a Panel titled with the header.
        """
        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            text(program() if prog is Unset else prog, "prog-name"),
            " - ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.hint % self._fields(), "hint"))
        body = [message, hint]
        if docs := getdoc(self.code):
            body.append(text(docs, "error-message"))

        if fancy:
            return Panel(Group(*body), title=header, title_align="left", width=width or None)
        return Group(header, *body)

    def __rich__(self):
        return self.render()


def _rebuild(cls, context):
    return cls(**context)


class RegistrationError(Fault, ValueError):
    """
    a descriptor violates a naming or ordering invariant of its registry.
    """
    __fields__ = Fault.__fields__ + ("short", "existing", "reason", "previous", "attribute")


class DuplicateLongNameError(RegistrationError):
    code = FaultCode.DUPLICATE_LONG_NAME
    title = "duplicate long name"
    template = "repeated parameter long name %(name)r (already used by %(existing)s)"
    hint = "give every parameter a unique long name"


class DuplicateShortNameError(RegistrationError):
    code = FaultCode.DUPLICATE_SHORT_NAME
    title = "duplicate short name"
    template = "repeated parameter short name %(short)r for %(parameter)s (already used by %(existing)s)"
    hint = "give every parameter a unique short name or none at all"


class LongNameTooShortError(RegistrationError):
    code = FaultCode.LONG_NAME_TOO_SHORT
    title = "long name too short"
    template = "too short long name %(name)r (at least 2 characters are required)"
    hint = "use a short name for single characters and a longer long name"


class InvalidShortNameError(RegistrationError):
    code = FaultCode.INVALID_SHORT_NAME
    title = "invalid short name"
    template = "bad short name %(short)r for parameter --%(name)s"
    hint = "short names are single printable ascii characters other than space"


class PositionalOrderViolationError(RegistrationError):
    code = FaultCode.POSITIONAL_ORDER_VIOLATION
    title = "positional order violation"
    template = "%(reason)s positional parameter %(previous)s followed by another positional parameter %(parameter)s"
    hint = "only the last positional parameter may be optional or a list"


class InvalidFlagError(RegistrationError):
    code = FaultCode.INVALID_FLAG
    title = "invalid flag"
    template = "flag %(parameter)s cannot be %(reason)s"
    hint = "flags are named, single-valued and optional"


class SharedStorageError(RegistrationError):
    code = FaultCode.SHARED_STORAGE
    title = "shared storage"
    template = "parameter %(parameter)s binds attribute %(attribute)r already bound by %(existing)s"
    hint = "pass a distinct attribute (or target) to one of the parameters"


class ConversionFailedError(Fault, ValueError):
    """
    a converter rejected a raw token.

    raised by converters, re-raised by the matching engine as BadValueError.
    """
    code = FaultCode.CONVERSION_FAILED
    title = "conversion failed"
    template = "cannot convert %(token)r%(valid)s"
    hint = "check the value format"


class ParseError(Fault):
    """
    the token sequence does not satisfy the registry.
    """


class BadArgumentError(ParseError):
    code = FaultCode.BAD_ARGUMENT
    title = "bad argument"
    template = "bad argument %(token)r%(at)s"
    hint = "use '-x' for short names and '--name' or '--name=value' for long names"


class UnknownArgumentError(ParseError):
    code = FaultCode.UNKNOWN_ARGUMENT
    title = "unknown argument"
    template = "unknown argument %(token)r%(at)s"
    hint = "check the spelling against the options listed in the usage"


class UnexpectedPositionalArgumentError(ParseError):
    code = FaultCode.UNEXPECTED_POSITIONAL
    title = "unexpected positional argument"
    template = "unexpected positional argument %(token)r%(at)s"
    hint = "remove the extra value or pass it to an option"


class DanglingOptionError(ParseError):
    code = FaultCode.DANGLING_OPTION
    title = "missing option value"
    template = "option %(parameter)s%(at)s expects a value but the input ended"
    hint = "add a value after %(token)s (for example: %(token)s <value>)"


class BadValueError(ParseError):
    code = FaultCode.BAD_VALUE
    title = "bad value"
    template = "bad value %(token)r for %(parameter)s%(at)s%(valid)s"
    hint = "pass a value the parameter accepts"


class MissingArgumentError(ParseError):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"
    template = "missing argument %(parameter)s"
    hint = "required parameters must be given at least once"


def trigger(fault, /, *, shell=False, prog=Unset, colorful=True, fancy=False, usage=Unset):
    """
    surface a fault at the boundary that displays it.

    contract
    - outside shell mode the fault is raised unchanged.
    - in shell mode the fault (and the usage text, when given) is rendered on
      stderr through rich and the process exits with status 1.
    """
    if not isinstance(fault, Fault):
        raise TypeError("trigger() argument must be a fault")
    if not shell:
        raise fault
    console.print(fault.render(prog=prog, colorful=colorful, fancy=fancy))
    if usage:
        console.print(usage, soft_wrap=True, highlight=False)
    sys.exit(1)


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "Fault",
    "RegistrationError",
    "DuplicateLongNameError",
    "DuplicateShortNameError",
    "LongNameTooShortError",
    "InvalidShortNameError",
    "PositionalOrderViolationError",
    "InvalidFlagError",
    "SharedStorageError",
    "ConversionFailedError",
    "ParseError",
    "BadArgumentError",
    "UnknownArgumentError",
    "UnexpectedPositionalArgumentError",
    "DanglingOptionError",
    "BadValueError",
    "MissingArgumentError",
    "trigger",
    "getdoc",
)
