"""Argument parsing functionality for depfetch."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depfetch",
        description="depfetch - normalized, cached npm package metadata lookups",
        add_help=True,
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("-p", "--package",
                            dest="SINGLE",
                            help="Name a single package.",
                            action="append", type=str)
    input_group.add_argument("-l", "--load_list",
                        dest="LIST_FROM_FILE",
                        help="Load list of package names from a file",
                        action="store", type=str)

    parser.add_argument("--npmrc",
                        dest="NPMRC",
                        help="Path to an .npmrc used to resolve registries and credentials",
                        action="store", type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML config file (default: ./depfetch.yml)",
                        action="store", type=str)
    parser.add_argument("--cache-dir",
                        dest="CACHE_DIR",
                        help="Directory for the persistent package cache",
                        action="store", type=str)
    parser.add_argument("--cache-minutes",
                        dest="CACHE_MINUTES",
                        help="Persistent cache lifetime in minutes",
                        action="store", type=int)
    parser.add_argument("--no-persistent-cache",
                        dest="NO_PERSISTENT_CACHE",
                        help="Keep lookups in memory only for this run.",
                        action="store_true")
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output JSON file",
                        action="store", type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
