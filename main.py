from rich.pretty import pprint

from argscheme import *

parser = ArgumentsParser(
    {
        "target": PositionalOption(0),
        "mode": NamedOption("--mode", "-m", required=True),
        "dist": NamedOption("--dist", "-d", default="./"),
        "timeout": NamedOption("--timeout", type=int, choices=(10, 20, 30)),
        "messages": NamedOption("--messages", multiple=True),
        "no_color": NamedOption("--no-color", flag=True, default=False),
    },
    shell=True,
    fancy=True,
    colorful=True,
)


if __name__ == '__main__':
    pprint(parser.parse())
