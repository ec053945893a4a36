import enum

from rich.pretty import pprint

from cmdlineargs import *


class Level(enum.Enum):
    LOW = 0
    HIGH = 1


parser = Parser("Sample program registering every kind of parameter", shell=True)

parser.add_flag("flag", "Flag", short="f")
parser.add_param("string", "String")
parser.add_param("integer", "Integer", type=int)
parser.add_param("enum", "Enumeration", choices={"value1": Level.LOW, "value2": Level.HIGH})
parser.add_param("opt-string", "Optional string", required=False)
parser.add_param("opt-integer", "Optional integer", type=int, required=False, default=0)
parser.add_param("opt-enum", "Optional enumeration", type=Level, required=False)
parser.add_param("strings", "Strings", short="s", multiple=True)
parser.add_param("integers", "Integers", short="i", type=int, multiple=True)
parser.add_param("opt-floats", "Optional floats", type=float, multiple=True, required=False)
parser.add_positional("positional-string", "Positional string")
parser.add_positional("positional-integer", "Positional integer", type=int)
parser.add_positional("positional-enums", "Positional enumerations", type=Level, multiple=True, required=False)


if __name__ == '__main__':
    if len(__import__("sys").argv) == 1:
        parser.print_help()
    else:
        invoke(parser)
        pprint(parser.values)
