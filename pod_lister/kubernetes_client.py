import os
import logging
from typing import Any, Dict, List, Optional

import urllib3
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from pod_lister.errors import ClusterTransportError, ConfigurationError, PodNotFoundError
from pod_lister.records import PodRecord, UnstructuredRecord
from pod_lister.resolver import GroupVersionResource, parse_api_version

logger = logging.getLogger(__name__)

COMMON_KUBECONFIG_PATHS = [
    os.path.expanduser("~/.kube/config"),
    "/etc/kubernetes/admin.conf",
    "/etc/rancher/k3s/k3s.yaml",
]

TRANSPORT_ERRORS = (ApiException, urllib3.exceptions.HTTPError)


def _load_kubeconfig_file(path: str) -> None:
    try:
        config.load_kube_config(config_file=path)
    except ConfigException as e:
        raise ConfigurationError(f"invalid kubeconfig {path}: {e}") from e


def load_cluster_config(kube_config_path: Optional[str] = None) -> None:
    """Load cluster credentials, trying the explicit path first"""
    if kube_config_path:
        if not os.path.exists(kube_config_path):
            raise ConfigurationError(f"kubeconfig not found: {kube_config_path}")
        logger.info(f"Loading kubeconfig from: {kube_config_path}")
        _load_kubeconfig_file(kube_config_path)
        return

    kubeconfig_env = os.getenv("KUBECONFIG")
    if kubeconfig_env and os.path.exists(kubeconfig_env):
        logger.info(f"Loading kubeconfig from KUBECONFIG environment: {kubeconfig_env}")
        _load_kubeconfig_file(kubeconfig_env)
        return

    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
        return
    except ConfigException:
        pass

    try:
        config.load_kube_config()
        logger.info("Loaded kubeconfig from default location")
        return
    except ConfigException:
        pass

    for kube_path in COMMON_KUBECONFIG_PATHS:
        if os.path.exists(kube_path):
            logger.info(f"Loading kubeconfig from: {kube_path}")
            _load_kubeconfig_file(kube_path)
            return

    raise ConfigurationError(
        "Could not load Kubernetes configuration. "
        "Please ensure you have:\n"
        "1. A running Kubernetes cluster\n"
        "2. kubectl configured properly\n"
        "3. Or set KUBECONFIG / KUBE_CONFIG_PATH"
    )


def _transport_error(e: Exception, action: str) -> ClusterTransportError:
    if isinstance(e, ApiException):
        return ClusterTransportError(f"{action}: {e.reason}", status=e.status)
    return ClusterTransportError(f"{action}: {e}")


class KubernetesClient:
    """Read-only access to the handful of API calls the poller needs"""

    def __init__(self, kube_config_path: Optional[str] = None, api_client=None):
        if api_client is None:
            load_cluster_config(kube_config_path)
            api_client = client.ApiClient()

        self.api_client = api_client
        self.v1 = client.CoreV1Api(api_client)
        logger.info("Kubernetes client initialized")

    def _get_raw(self, path: str) -> Dict[str, Any]:
        """GET an arbitrary API path and return the decoded JSON body"""
        return self.api_client.call_api(
            path,
            "GET",
            header_params={"Accept": "application/json"},
            response_type="object",
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
        )

    def discover_resource_names(self, api_version: str) -> Dict[str, str]:
        """Map each kind served under api_version to its plural resource name"""
        group, version = parse_api_version(api_version)
        path = f"/apis/{group}/{version}" if group else f"/api/{version}"
        try:
            body = self._get_raw(path)
        except TRANSPORT_ERRORS as e:
            raise _transport_error(e, f"discovering resources for {api_version}")

        names = {}
        for entry in (body or {}).get("resources", []):
            name = entry.get("name", "")
            kind = entry.get("kind")
            # Skip subresources such as deployments/scale
            if not kind or not name or "/" in name:
                continue
            names.setdefault(kind, name)
        return names

    def list_generic(self, resource: GroupVersionResource) -> List[UnstructuredRecord]:
        """List every object of a resource across all namespaces"""
        try:
            body = self._get_raw(resource.collection_path())
        except TRANSPORT_ERRORS as e:
            raise _transport_error(e, f"listing {resource.resource}.{resource.api_version}")
        return [UnstructuredRecord(item) for item in (body or {}).get("items", [])]

    def list_pods(self, namespace: Optional[str]) -> List[PodRecord]:
        """List pods in one namespace, or in all namespaces when namespace is None"""
        try:
            if namespace is None:
                pods = self.v1.list_pod_for_all_namespaces(watch=False)
            else:
                pods = self.v1.list_namespaced_pod(namespace, watch=False)
        except TRANSPORT_ERRORS as e:
            raise _transport_error(e, f"listing pods in {namespace or 'all namespaces'}")
        return [PodRecord(name=p.metadata.name, namespace=p.metadata.namespace) for p in pods.items]

    def get_pod(self, namespace: str, name: str) -> PodRecord:
        try:
            pod = self.v1.read_namespaced_pod(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                raise PodNotFoundError(namespace, name)
            raise _transport_error(e, f"getting pod {namespace}/{name}")
        except urllib3.exceptions.HTTPError as e:
            raise _transport_error(e, f"getting pod {namespace}/{name}")
        return PodRecord(name=pod.metadata.name, namespace=pod.metadata.namespace)
