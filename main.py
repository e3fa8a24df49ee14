import argparse
import os.path
import sys

from rich.pretty import pprint

from subcmd import *


def _flags(name, args):
    parser = argparse.ArgumentParser(prog=name)
    parser.add_argument("-a", action="store_true", help="set option a")
    return parser.parse_args(args)


@command(descr="something about bar")
def bar(args):
    pprint(vars(_flags("foo bar", args)))


@command(descr="something about baz")
def baz(args):
    pprint(vars(_flags("foo baz", args)))


@command(descr="do some other thing")
def xyz(args):
    parser = argparse.ArgumentParser(prog="xyz")
    parser.add_argument("-n", type=int, default=10, help="number of blah")
    pprint(vars(parser.parse_args(args)))


@command(descr="same as foo, with a runner built by the handler")
def legacy(args):
    Runner(f"{os.path.basename(sys.argv[0])} legacy", [bar, baz]).run(args)


commands = [
    group("foo", "perform foo tasks", [bar, baz]),
    xyz,
    legacy,
]


if __name__ == '__main__':
    run(commands)
