"""
Error types for Pod Lister
"""

from typing import Optional


class PodListerError(Exception):
    """Base class for all Pod Lister errors"""


class ConfigurationError(PodListerError):
    """Fatal startup error: bad settings, malformed kind/apiVersion, no kubeconfig"""


class ResolutionFailure(ConfigurationError):
    """The configured workload could not be located in any namespace"""

    def __init__(self, kind: str, name: str, reason: str = "no matching object"):
        self.kind = kind
        self.name = name
        self.reason = reason
        super().__init__(f"Can not find workload {kind}/{name}: {reason}")


class ClusterTransportError(PodListerError):
    """Any failure talking to the API server other than a plain 404"""

    def __init__(self, detail: str, status: Optional[int] = None):
        self.detail = detail
        self.status = status
        super().__init__(detail if status is None else f"{detail} (status {status})")


class PodNotFoundError(PodListerError):
    """A pod disappeared between listing and the individual get"""

    def __init__(self, namespace: str, name: str):
        self.namespace = namespace
        self.name = name
        super().__init__(f"Pod {name} not found in namespace {namespace}")
