"""
Base class for kubecommit subcommands
"""

# Standard
from typing import Optional
import abc
import argparse

# Local
from ..managed_record import ManagedRecord


class CmdBase(abc.ABC):
    """A subcommand registered on the main parser under its command_name. The
    subcommand's help text is the class docstring.
    """

    command_name = None

    def add_subparser(
        self,
        subparsers: argparse._SubParsersAction,
    ) -> argparse.ArgumentParser:
        """Register this command and its arguments with the main parser"""
        assert self.command_name, f"{type(self).__name__} has no command_name"
        parser = subparsers.add_parser(
            self.command_name,
            help=self.__doc__,
            description=self.__doc__,
        )
        self.add_args(parser)
        return parser

    @abc.abstractmethod
    def add_args(self, parser: argparse.ArgumentParser):
        """Add the command's own arguments to its parser"""

    @abc.abstractmethod
    def cmd(self, args: argparse.Namespace) -> Optional[ManagedRecord]:
        """Run the command

        Args:
            args:  argparse.Namespace
                The parsed command line arguments

        Returns:
            record:  Optional[ManagedRecord]
                The record as persisted, for commands that commit one
        """
