"""
cmdlineargs parser facade: register parameters, parse tokens, render help.

What this module provides
- Parser: owns one Registry and one Matcher, exposes registration calls in the
  shape of the classic overload set (named, flag, positional; plain or
  enumerated), the matching entry points and the help reports.
- invoke(parser, argv): convenience runner. In shell mode parse errors are
  rendered on stderr (with the usage line) and the process exits with 1.

Quick start
    from cmdlineargs import Parser, invoke

    parser = Parser("Copies a report somewhere safe", shell=True)
    parser.add_param("name", "Owner name", short="n")
    parser.add_flag("force", "Overwrite existing files", short="f")
    parser.add_positional("file", "Report to copy")

    if __name__ == "__main__":
        invoke(parser)
        print(parser.values.name, parser.values.force, parser.values.file)

Storage
- Values land on parser.values (a SimpleNamespace) unless a target object is
  given, per parser or per parameter. The parser references that object; the
  caller keeps it alive for as long as the parser is used.
- The attribute defaults to the long name with '-' replaced by '_'.
"""
import os.path
import sys
from collections.abc import Iterable
from types import SimpleNamespace

from rich.text import Text

from .arguments import Parameter, Binding, Kind, Arity
from .converters import converter
from .faults import ParseError, trigger
from .help import WIDTH, render_usage, render_options, render_help, emit
from .matching import Matcher
from .registry import Registry
from .utils import Unset, coalesce, program


class Parser:
    """
    Command-line parser over one registry of parameters.

    Options
    - description: paragraph printed before the usage line.
    - prog: program name for reports. Defaults to the base name recorded by
      parse_argv(), then __main__.__prog__, then sys.argv[0].
    - target: object receiving bound values (defaults to self.values).
    - shell: when True, invoke() renders parse errors and exits instead of
      raising.
    - colorful / fancy: rich styling switches for rendered faults and help.
    - width: usage wrap column.
    """

    def __init__(
            self,
            description=Unset,
            /,
            *,
            prog=Unset,
            target=Unset,
            shell=False,
            colorful=True,
            fancy=False,
            width=WIDTH,
    ):
        if not isinstance(description, str | Unset):
            raise TypeError("parser 'description' must be a string")
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        if not isinstance(width, int) or width < 1:
            raise TypeError("parser 'width' must be a positive integer")

        self._description = coalesce(description)
        self._prog = prog
        self._executable = Unset
        self._values = SimpleNamespace()
        self._target = coalesce(target, self._values)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._width = width
        self._registry = Registry()
        self._matcher = Matcher(self._registry)

    @property
    def description(self):
        return self._description

    @property
    def prog(self):
        if self._prog is not Unset:
            return self._prog
        if self._executable is not Unset:
            return self._executable
        return program()

    @property
    def values(self):
        return self._values

    @property
    def registry(self):
        return self._registry

    @property
    def shell(self):
        return self._shell

    @property
    def colorful(self):
        return self._colorful

    @property
    def fancy(self):
        return self._fancy

    def _binding(self, name, target, attribute):
        if not isinstance(name, str):
            raise TypeError("parameter name must be a string")
        return Binding(coalesce(target, self._target), coalesce(attribute, name.replace("-", "_")))

    def add_param(
            self,
            name,
            help="",
            /,
            *,
            short=None,
            type=str,
            choices=None,
            required=True,
            multiple=False,
            default=Unset,
            target=Unset,
            attribute=Unset,
    ):
        """
        Register a named parameter.

        Accepted forms (s is the short name)
        - --name value
        - --name=value
        - -s value

        Parameters
        - type: str | int | float | bool | an enum.Enum subclass | any callable
          converting one token.
        - choices: mapping from literal token text to value (enumerated).
        - multiple: list arity; every occurrence is appended in order.
        """
        return self._registry.register_named(Parameter(
            name,
            help,
            kind=Kind.NAMED,
            arity=Arity.LIST if multiple else Arity.SCALAR,
            short=short,
            required=required,
            converter=converter(type, choices),
            binding=self._binding(name, target, attribute),
            default=default,
        ))

    def add_flag(self, name, help="", /, *, short=None, target=Unset, attribute=Unset):
        """
        Register a named flag: --name or -s, binding True. Flags are optional
        and bound to False until given.
        """
        return self._registry.register_named(Parameter(
            name,
            help,
            kind=Kind.NAMED,
            short=short,
            required=False,
            flag=True,
            converter=converter(bool),
            binding=self._binding(name, target, attribute),
        ))

    def add_positional(
            self,
            name,
            help="",
            /,
            *,
            type=str,
            choices=None,
            required=True,
            multiple=False,
            default=Unset,
            target=Unset,
            attribute=Unset,
    ):
        """
        Register the next positional parameter.

        Only the last positional parameter may be optional or a list.
        """
        return self._registry.register_positional(Parameter(
            name,
            help,
            kind=Kind.POSITIONAL,
            arity=Arity.LIST if multiple else Arity.SCALAR,
            required=required,
            converter=converter(type, choices),
            binding=self._binding(name, target, attribute),
            default=default,
        ))

    def parse(self, tokens, /):
        """
        Match already-split tokens (without the executable path).

        Returns the snapshot of bound values keyed by long name; the values
        themselves are stored in the bound target.
        """
        return self._matcher.run(tokens)

    def parse_argv(self, argv=Unset, /):
        """
        Match a full argument vector: argv[0] is the executable path and only
        its base name is kept for the usage line.
        """
        argv = coalesce(argv, sys.argv)
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("parse_argv() argument must be an iterable of strings")
        argv = list(argv)
        if not argv:
            raise ValueError("parse_argv() argument must start with the executable path")
        if not isinstance(argv[0], str):
            raise TypeError("parse_argv() argument must be an iterable of strings")
        self._executable = os.path.basename(argv[0])
        return self.parse(argv[1:])

    def render_usage(self, *, colorful=False):
        return render_usage(self._registry, self.prog, width=self._width, colorful=colorful)

    def render_options(self, *, colorful=False):
        return render_options(self._registry, colorful=colorful)

    def render_help(self, *, colorful=False):
        return render_help(
            self._registry,
            self.prog,
            description=self._description,
            width=self._width,
            colorful=colorful
        )

    def format_usage(self):
        return self.render_usage().plain

    def format_options(self):
        return self.render_options().plain

    def format_help(self):
        return self.render_help().plain

    def print_description(self, file=Unset):
        if self._description:
            emit(Text(self._description + "\n\n"), file)

    def print_usage(self, file=Unset):
        emit(self.render_usage(colorful=self._colorful), file)

    def print_options(self, file=Unset):
        emit(self.render_options(colorful=self._colorful), file)

    def print_help(self, file=Unset):
        emit(self.render_help(colorful=self._colorful), file)

    def __invoke__(self, prompt=Unset):
        """
        Parse sys.argv (Unset) or a token iterable; in shell mode parse errors
        are rendered with the usage line and the process exits with status 1.
        """
        try:
            if prompt is Unset:
                return self.parse_argv()
            return self.parse(prompt)
        except ParseError as fault:
            if not self._shell:
                raise
            trigger(
                fault,
                shell=True,
                prog=self.prog,
                colorful=self._colorful,
                fancy=self._fancy,
                usage=self.render_usage(colorful=self._colorful)
            )

    def __rich_repr__(self):
        yield "prog", self.prog
        yield "description", self._description
        yield "named", self._registry.named
        yield "positional", self._registry.positional

    def __repr__(self):
        return "parser(prog=%r, description=%r, registry=%r)" % (self.prog, self._description, self._registry)


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for parsers.

    Parameters
    - object: an instance providing __invoke__(prompt).
    - prompt:
      • Unset: sys.argv (argv[0] is the executable path).
      • Iterable[str]: already-split tokens, without the executable path.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)
    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "Parser",
    "invoke",
)
