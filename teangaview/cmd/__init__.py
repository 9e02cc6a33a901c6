"""
teanga-util subcommands
"""

# License: BSD3

import argparse
import sys

from teangaview.errors import TeangaFormatError
from teangaview.util import add_subcommand
from . import (count,
               dump,
               graph,
               text)

# argparse does not group subcommands into sections, so these only
# decide the order they are listed in
SUBCOMMAND_SECTIONS = [
    ('Querying', [
        text,
        count,
        graph,
    ]),
    ('Dump', [
        dump,
    ]),
]

SUBCOMMANDS = []
for descr, section in SUBCOMMAND_SECTIONS:
    SUBCOMMANDS.extend(section)


def mk_argparser():
    """
    Argument parser with one subparser per subcommand
    """
    arg_parser = argparse.ArgumentParser(description='Teanga corpus viewer')
    subparsers = arg_parser.add_subparsers(dest='subcommand',
                                           metavar='SUBCOMMAND')
    subparsers.required = True
    for module in SUBCOMMANDS:
        subparser = add_subcommand(subparsers, module)
        module.config_argparser(subparser)
    return arg_parser


def main(argv=None):
    "teanga-util main"
    args = mk_argparser().parse_args(argv)
    try:
        return args.func(args)
    except TeangaFormatError as err:
        print("ERROR: %s" % err, file=sys.stderr)
        return 1
