"""
Helper object to represent a versioned kubernetes record whose status is
committed by the update loop
"""
# Standard
from typing import Optional, Tuple
import copy

# Local
from .constants import DEFAULT_NAMESPACE


class ManagedRecord:
    """Thin wrapper around the dict definition of a kubernetes object. All
    accessors read through to the definition so that the record always
    reflects the latest mutation.
    """

    def __init__(self, definition: dict):
        self.definition = definition
        assert self.kind is not None, "No kind found"
        assert self.api_version is not None, "No apiVersion found"
        assert self.name is not None, "No name found"

    ## Identity ################################################################

    @property
    def metadata(self) -> dict:
        return self.definition.setdefault("metadata", {})

    @property
    def kind(self) -> Optional[str]:
        return self.definition.get("kind")

    @property
    def api_version(self) -> Optional[str]:
        return self.definition.get("apiVersion")

    @property
    def name(self) -> Optional[str]:
        return self.metadata.get("name")

    @property
    def namespace(self) -> str:
        return self.metadata.get("namespace") or DEFAULT_NAMESPACE

    @property
    def uid(self) -> Optional[str]:
        return self.metadata.get("uid")

    @property
    def key(self) -> Tuple[str, str]:
        """The (namespace, name) pair identifying this record"""
        return self.namespace, self.name

    ## Versioned content #######################################################

    @property
    def resource_version(self) -> Optional[str]:
        """The remote version token used by the store's conflict detection"""
        return self.metadata.get("resourceVersion")

    @resource_version.setter
    def resource_version(self, value: Optional[str]):
        self.metadata["resourceVersion"] = value

    @property
    def status(self) -> dict:
        return self.definition.get("status", {})

    @status.setter
    def status(self, value: dict):
        self.definition["status"] = value

    def deep_copy(self) -> "ManagedRecord":
        """Make a fully independent copy of this record"""
        return ManagedRecord(copy.deepcopy(self.definition))

    def get(self, *args, **kwargs):
        """Pass get calls to the record's definition"""
        return self.definition.get(*args, **kwargs)

    def to_dict(self) -> dict:
        return self.definition

    ## Python builtins #########################################################

    def __str__(self):
        return f"{self.api_version}/{self.kind}/{self.namespace}/{self.name}"

    def __repr__(self):
        return f"ManagedRecord({self}@{self.resource_version})"

    def __eq__(self, other):
        if not isinstance(other, ManagedRecord):
            return NotImplemented
        return self.definition == other.definition

    def __hash__(self):
        return hash((self.api_version, self.kind, self.namespace, self.name))
