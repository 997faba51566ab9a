#!/usr/bin/env python
"""
The main module provides the executable entrypoint for kubecommit
"""

# Standard
from typing import Dict, Tuple
import argparse

# First Party
import alog

# Local
from .cmd import CmdBase, UpdateStatusCmd
from .config import library_config
from .config.config import configure_logging
from .constants import NESTED_DICT_DELIM
from .log_format import KubeCommitJsonFormatter
from .utils import nested_set

## Constants ###################################################################

log = alog.use_channel("MAIN")

## Helpers #####################################################################


def add_library_config_args(parser, config_obj=None, prefix=""):
    """Add a --<dotted.key> override flag for every leaf of the library config

    Returns:
        setters:  Dict[str, str]
            Mapping from argparse dest names to dotted config keys
    """
    setters = {}
    for key, val in (config_obj or library_config).items():
        config_key = f"{prefix}{NESTED_DICT_DELIM}{key}" if prefix else key
        if isinstance(val, dict):
            setters.update(add_library_config_args(parser, val, prefix=config_key))
            continue

        flag = f"--{config_key}"
        if flag in parser._option_string_actions:  # pylint: disable=protected-access
            continue
        dest = config_key.replace(NESTED_DICT_DELIM, "_")
        kwargs = {"type": type(val)}
        if isinstance(val, bool):
            kwargs = {"action": argparse.BooleanOptionalAction}
        elif isinstance(val, list):
            kwargs = {"nargs": "*"}
        elif val is None:
            kwargs = {}
        parser.add_argument(
            flag,
            dest=dest,
            default=val,
            help=f"Library config override for {config_key} (see kubecommit.config)",
            **kwargs,
        )
        setters[dest] = config_key
    return setters


def update_library_config(args, setters):
    """Write the parsed override values back into the library config"""
    for dest, config_key in setters.items():
        nested_set(library_config, config_key, getattr(args, dest))


def add_command(
    subparsers: argparse._SubParsersAction,
    cmd: CmdBase,
) -> Tuple[argparse.ArgumentParser, Dict[str, str]]:
    """Add the subparser and set up the default fun call"""
    parser = cmd.add_subparser(subparsers)
    parser.set_defaults(func=cmd.cmd)
    library_args = parser.add_argument_group("Library Configuration")
    library_config_setters = add_library_config_args(library_args)
    return parser, library_config_setters


## Main ########################################################################


def main(argv=None):
    """The main module provides the executable entrypoint for kubecommit"""
    parser = argparse.ArgumentParser(description=__doc__)

    subparsers = parser.add_subparsers(help="Available commands", dest="command")
    subparsers.required = True
    _, library_config_setters = add_command(subparsers, UpdateStatusCmd())

    args = parser.parse_args(argv)

    # Provide overrides to the library configs
    update_library_config(args, library_config_setters)

    # Reconfigure logging with the overrides applied
    configure_logging(json_formatter=KubeCommitJsonFormatter())

    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    main()
