"""
Custom logging formats that carry the identifiers of the record being updated
"""

# First Party
from alog import AlogJsonFormatter


class KubeCommitJsonFormatter(AlogJsonFormatter):
    """Extends AlogJsonFormatter with the identifiers of the record a log line
    is about. The record is taken from the `resource` extra of the log call,
    falling back to the manifest given at construction.
    """

    _FIELDS_TO_PRINT = AlogJsonFormatter._FIELDS_TO_PRINT + [
        "process",
        "thread",
        "threadName",
        "kind",
        "apiVersion",
        "namespace",
        "resourceName",
        "resourceVersion",
    ]

    def __init__(self, manifest=None):
        super().__init__()
        self.manifest = manifest

    def format(self, record):
        if resource := getattr(record, "resource", self.manifest):
            record.kind = resource.get("kind")
            record.apiVersion = resource.get("apiVersion")

            metadata = resource.get("metadata", {})
            record.namespace = metadata.get("namespace")
            record.resourceName = metadata.get("name")
            record.resourceVersion = metadata.get("resourceVersion")

        return super().format(record)
