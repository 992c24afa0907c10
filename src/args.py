"""Argument parsing functionality for the bundle resolver CLI."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="bundle-resolver",
        description=(
            "Resolve bundle requirements against prioritized repositories"
        ),
        add_help=True,
    )

    parser.add_argument("-w", "--workspace",
                        dest="WORKSPACE",
                        help="YAML file describing repositories, libraries and the project",
                        action="store", type=str,
                        required=True)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="YAML config file (resolution section)",
                        action="store",
                        type=str)

    parser.add_argument("--optional",
                        dest="RESOLVE_OPTIONAL",
                        help="Also resolve optional requirements.",
                        action="store_true")
    parser.add_argument("--no-dependents",
                        dest="NO_DEPENDENTS",
                        help="Do not resolve the requirements of chosen providers.",
                        action="store_true")
    parser.add_argument("--ignore-errors",
                        dest="IGNORE_ERRORS",
                        help="Treat unsatisfied requirements as satisfied.",
                        action="store_true")
    parser.add_argument("--local-only",
                        dest="LOCAL_ONLY",
                        help="Only consider bundles that are already synchronized.",
                        action="store_true")
    parser.add_argument("--sync",
                        dest="SYNC",
                        help="Synchronize every chosen provider after resolution.",
                        action="store_true")

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or csv). If not specified, inferred from --output extension; defaults to json.",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_FORMATS)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
