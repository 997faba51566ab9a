"""
Shared setup for the openshift DynamicClient used by the kube-backed store and
event recorder
"""

# Third Party
from openshift.dynamic import DynamicClient
import kubernetes

# First Party
import alog

log = alog.use_channel("KCLNT")


def setup_client() -> DynamicClient:
    """Create a DynamicClient that will work based on where the process is
    running
    """
    # Try in-cluster config
    try:
        log.debug2("Running with in-cluster config")
        kube_config = kubernetes.client.Configuration()
        kubernetes.config.load_incluster_config(client_configuration=kube_config)
        return DynamicClient(kubernetes.client.ApiClient(kube_config))

    # Fall back to out-of-cluster config
    except kubernetes.config.ConfigException:
        log.debug2("Running with out-of-cluster config")
        return DynamicClient(kubernetes.config.new_client_from_config())
