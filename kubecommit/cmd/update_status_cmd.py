"""
Commit a new status to a record, retrying on conflicts
"""
# Standard
from typing import Tuple
import argparse
import sys

# Third Party
import yaml

# First Party
import alog

# Local
from ..cache import ReadThroughCache
from ..event_recorder import EventRecorderBase, FakeEventRecorder, KubeEventRecorder
from ..exceptions import assert_config
from ..managed_record import ManagedRecord
from ..store import DryRunStore, KubeStoreClient, StoreClientBase
from ..update_loop import UpdateLoop
from .base import CmdBase

log = alog.use_channel("CMD-UPD")


class UpdateStatusCmd(CmdBase):
    __doc__ = __doc__

    command_name = "update-status"

    ## Interface ##

    def add_args(self, parser: argparse.ArgumentParser):
        record_args = parser.add_argument_group("Record Selection")
        record_args.add_argument(
            "--kind",
            "-k",
            required=True,
            help="The kind of the record to update",
        )
        record_args.add_argument(
            "--api_version",
            "-a",
            required=True,
            help="The apiVersion of the record's kind",
        )
        record_args.add_argument(
            "--name",
            "-n",
            required=True,
            help="The name of the record to update",
        )
        record_args.add_argument(
            "--namespace",
            "-ns",
            default="default",
            help="The namespace of the record to update",
        )
        update_args = parser.add_argument_group("Update Configuration")
        update_args.add_argument(
            "--status",
            "-s",
            required=True,
            help="The status to commit as a yaml or json mapping",
        )
        update_args.add_argument(
            "--merge",
            action="store_true",
            default=False,
            help="Merge the given status keys into the current status instead of replacing it",
        )
        update_args.add_argument(
            "--dry_run",
            action="store_true",
            default=False,
            help="Update an in-memory copy of --manifest instead of the cluster",
        )
        update_args.add_argument(
            "--manifest",
            "-m",
            default=None,
            help="(dry run) Path to a yaml manifest of the record",
        )

    def cmd(self, args: argparse.Namespace):
        status = yaml.safe_load(args.status)
        assert_config(isinstance(status, dict), "--status must be a mapping")
        assert_config(
            not args.dry_run or args.manifest is not None,
            "--manifest is required with --dry_run",
        )

        store, recorder = self._setup_backends(args)
        cache = ReadThroughCache(store, kind=args.kind, api_version=args.api_version)
        record = store.get(
            args.namespace, args.name, kind=args.kind, api_version=args.api_version
        )
        if args.merge:
            status = {**record.status, **status}
        record.status = status

        loop = UpdateLoop(store=store, cache=cache, recorder=recorder)
        try:
            updated = loop.update(record)
        finally:
            if isinstance(recorder, FakeEventRecorder):
                for event in recorder.drain():
                    log.info("Event: %s", event)

        yaml.safe_dump(updated.definition, sys.stdout, default_flow_style=False)
        return updated

    ## Implementation ##

    @staticmethod
    def _setup_backends(
        args: argparse.Namespace,
    ) -> Tuple[StoreClientBase, EventRecorderBase]:
        if args.dry_run:
            with open(args.manifest, encoding="utf-8") as handle:
                manifest = yaml.safe_load(handle)
            log.debug("Running dry run against manifest %s", args.manifest)
            return DryRunStore([ManagedRecord(manifest)]), FakeEventRecorder()

        store = KubeStoreClient()
        return store, KubeEventRecorder(client=store.client)
