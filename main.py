import enum
import logging

from rich.logging import RichHandler
from rich.pretty import pprint

from bindery import *

logging.basicConfig(
    level=logging.DEBUG,
    format="%(message)s",
    handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
)


class Color(enum.Enum):
    RED = 1
    GREEN = 2
    BLUE = 3


table = CommandTable("geo", ignorecase=True, shell=True, fancy=True)


@table.command
def move(x: int, y: int, label: str = "pt"):
    return "move %s to (%d, %d)" % (label, x, y)


@table.command(name="move")
def move_to(label: str):
    return "move to %s" % label


@table.command
def log(level: Int32, *messages: str):
    return "[%d] %s" % (level, " ".join(messages))


@table.command
def paint(color: Color, opacity: float = 1.0, *, outline: bool = False):
    return "paint %s at %.2f%s" % (color.name.lower(), opacity, " (outline)" if outline else "")


if __name__ == '__main__':
    converter_registry.freeze()
    pprint(table)
    pprint(table.overloads)
    pprint(invoke(table))
