"""
This module holds all of the command classes for kubecommit's main entrypoint
"""

# Local
from .base import CmdBase
from .update_status_cmd import UpdateStatusCmd
