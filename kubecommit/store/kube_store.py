"""
This store is responsible for delegating record writes to the openshift
library. It is the one that will be used when running against a live cluster.
"""
# Standard
from typing import Optional

# Third Party
from openshift.dynamic import DynamicClient
from openshift.dynamic.exceptions import ConflictError as KubeConflictError
from openshift.dynamic.exceptions import (
    DynamicApiError,
    NotFoundError,
    ResourceNotFoundError,
    ResourceNotUniqueError,
)
from openshift.dynamic.resource import Resource

# First Party
import alog

# Local
from .. import config
from ..exceptions import (
    ConflictError,
    RecordNotFoundError,
    StoreError,
    assert_config,
    assert_store,
)
from ..kube_client import setup_client
from ..managed_record import ManagedRecord
from .base import StoreClientBase

log = alog.use_channel("KUBST")


class KubeStoreClient(StoreClientBase):
    """This store uses the openshift DynamicClient to interact with the
    cluster
    """

    def __init__(
        self,
        client: Optional[DynamicClient] = None,
        use_status_subresource: Optional[bool] = None,
    ):
        """
        Args:
            client:  Optional[DynamicClient]
                The client to use. If None, one is set up lazily.
            use_status_subresource:  Optional[bool]
                If true, updates replace the status subresource rather than
                the whole object. Defaults to the library config.
        """
        self._client = client
        self.use_status_subresource = (
            config.use_status_subresource
            if use_status_subresource is None
            else use_status_subresource
        )

    @property
    def client(self) -> DynamicClient:
        """Lazy property access to the client"""
        if self._client is None:
            log.debug("Initializing openshift client")
            self._client = setup_client()
        return self._client

    ## Interface ###############################################################

    def get(self, namespace, name, kind=None, api_version=None):
        assert_config(
            kind is not None and api_version is not None,
            "kind and api_version are required for cluster lookups",
        )
        resource_handle = self._get_resource_handle(kind, api_version)
        try:
            content = resource_handle.get(name=name, namespace=namespace).to_dict()
        except NotFoundError as err:
            raise RecordNotFoundError(
                f"{kind} {namespace}/{name} not found in the cluster"
            ) from err
        except DynamicApiError as err:
            raise StoreError(
                f"Failed to fetch {kind} {namespace}/{name}: {err.reason}"
            ) from err
        log.debug3("Fetched [%s/%s] from the cluster", namespace, name)
        return ManagedRecord(content)

    def update(self, record: ManagedRecord) -> ManagedRecord:
        resource_handle = self._get_resource_handle(record.kind, record.api_version)
        target = resource_handle
        if self.use_status_subresource:
            target = resource_handle.status

        log.debug2(
            "Replacing [%s] at resourceVersion %s",
            record,
            record.resource_version,
            extra={"resource": record.definition},
        )
        try:
            result = target.replace(body=record.definition, namespace=record.namespace)
        except KubeConflictError as err:
            raise ConflictError(f"Conflict updating {record}: {err.reason}") from err
        except NotFoundError as err:
            raise RecordNotFoundError(f"{record} not found in the cluster") from err
        except DynamicApiError as err:
            raise StoreError(f"Failed to update {record}: {err.reason}") from err
        content = result.to_dict() if result is not None else None
        assert_store(
            isinstance(content, dict) and "metadata" in content,
            f"Update of {record} returned no object",
        )
        return ManagedRecord(content)

    ## Implementation Helpers ##################################################

    def _get_resource_handle(self, kind: str, api_version: str) -> Resource:
        """Get the openshift resource handle for a specified kind and api_version"""
        try:
            return self.client.resources.get(kind=kind, api_version=api_version)
        except (ResourceNotFoundError, ResourceNotUniqueError) as err:
            log.debug(
                "No objects of kind [%s] found or multiple objects matching request found",
                kind,
            )
            raise StoreError(f"Unable to resolve {api_version}/{kind}") from err
