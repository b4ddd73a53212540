"""
Shared fixtures: an in-memory cluster standing in for the API server
"""

from typing import Dict, List, Optional

import pytest
import structlog

from pod_lister.errors import ClusterTransportError, PodNotFoundError
from pod_lister.records import PodRecord, UnstructuredRecord

ENV_VARS = [
    "KUBE_CONFIG_PATH", "KUBECONFIG", "WORKLOAD_NAME", "WORKLOAD_KIND", "WORKLOAD_GV",
    "LIST_INTERVAL_SECONDS", "MAX_PODS_COUNT", "LIST_FAILURE_POLICY", "ALL_NAMESPACES",
    "RUN_ONCE", "LOG_LEVEL", "LOG_FORMAT", "PROMETHEUS_PUSHGATEWAY_URL",
    "PROMETHEUS_JOB_NAME", "METRICS_PORT",
]


class FakeClusterClient:
    def __init__(self, records: Optional[List[dict]] = None,
                 pods: Optional[List[PodRecord]] = None,
                 registered: Optional[Dict[str, Dict[str, str]]] = None):
        self.records = records or []
        self.pods = pods or []
        self.registered = registered or {}
        self.deleted = set()
        self.failing = {}
        self.list_error = None
        self.discovery_error = None
        self.listed_resources = []
        self.list_calls = []
        self.get_calls = []

    def discover_resource_names(self, api_version):
        if self.discovery_error:
            raise self.discovery_error
        return dict(self.registered.get(api_version, {}))

    def list_generic(self, resource):
        self.listed_resources.append(resource)
        return [UnstructuredRecord(obj) for obj in self.records]

    def list_pods(self, namespace):
        self.list_calls.append(namespace)
        if self.list_error:
            raise self.list_error
        return [p for p in self.pods if namespace is None or p.namespace == namespace]

    def get_pod(self, namespace, name):
        self.get_calls.append((namespace, name))
        if name in self.failing:
            raise ClusterTransportError(self.failing[name], status=500)
        if name in self.deleted:
            raise PodNotFoundError(namespace, name)
        for pod in self.pods:
            if pod.namespace == namespace and pod.name == name:
                return pod
        raise PodNotFoundError(namespace, name)


def workload(name, namespace, kind="Deployment", api_version="apps/v1"):
    metadata = {"name": name}
    if namespace is not None:
        metadata["namespace"] = namespace
    return {"apiVersion": api_version, "kind": kind, "metadata": metadata}


def pods_in(namespace, *names):
    return [PodRecord(name=n, namespace=namespace) for n in names]


@pytest.fixture
def cluster():
    return FakeClusterClient(
        records=[workload("web", "shop"), workload("api", "backend")],
        pods=pods_in("shop", "a", "b", "c") + pods_in("backend", "x"),
        registered={"apps/v1": {"Deployment": "deployments"}},
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
