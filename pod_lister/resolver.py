"""
Map a workload's apiVersion and kind to a listable resource collection
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Tuple

from pod_lister.errors import ClusterTransportError, ConfigurationError
from pod_lister.logger import PodListerLogger

KIND_PATTERN = re.compile(r"^[A-Z][A-Za-z0-9]*$")
VERSION_PATTERN = re.compile(r"^[a-z0-9][a-z0-9.\-]*$")
GROUP_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9\-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9\-]*[a-z0-9])?)*$")

# Kinds whose lower-cased name is already plural
UNPLURALIZED_SUFFIXES = ("endpoints",)


@dataclass(frozen=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def collection_path(self) -> str:
        """Cluster-wide collection URL for this resource"""
        if self.group:
            return f"/apis/{self.group}/{self.version}/{self.resource}"
        return f"/api/{self.version}/{self.resource}"


class ResourceDiscovery(Protocol):
    def discover_resource_names(self, api_version: str) -> Dict[str, str]:
        ...


def parse_api_version(api_version: str) -> Tuple[str, str]:
    """Split "group/version" or a bare core "version" into (group, version)"""
    parts = (api_version or "").split("/")
    if len(parts) == 1:
        group, version = "", parts[0]
    elif len(parts) == 2:
        group, version = parts
        if not GROUP_PATTERN.match(group):
            raise ConfigurationError(f"invalid group in apiVersion {api_version!r}")
    else:
        raise ConfigurationError(f"unexpected apiVersion {api_version!r}")

    if not VERSION_PATTERN.match(version):
        raise ConfigurationError(f"invalid version in apiVersion {api_version!r}")
    return group, version


def guess_kind_to_resource(kind: str) -> str:
    """
    Best-effort plural for a kind, e.g. Deployment -> deployments,
    Ingress -> ingresses, NetworkPolicy -> networkpolicies.

    This is a naming convention, not an authoritative mapping.
    """
    if not kind or not KIND_PATTERN.match(kind):
        raise ConfigurationError(f"malformed kind {kind!r}, expected a capitalized type name")

    singular = kind.lower()
    for suffix in UNPLURALIZED_SUFFIXES:
        if singular.endswith(suffix):
            return singular
    if singular.endswith("s"):
        return singular + "es"
    if singular.endswith("y"):
        return singular[:-1] + "ies"
    return singular + "s"


class ResourceKindResolver:
    """Resolves a kind to its resource name with one discovery lookup per call"""

    def __init__(self, discovery: ResourceDiscovery, logger: Optional[PodListerLogger] = None):
        self.discovery = discovery
        self.log = logger or PodListerLogger(component="resolver")

    def resolve(self, api_version: str, kind: str) -> GroupVersionResource:
        group, version = parse_api_version(api_version)
        guessed = guess_kind_to_resource(kind)

        resource, source = guessed, "guess"
        try:
            registered = self.discovery.discover_resource_names(api_version)
        except ClusterTransportError as e:
            # Fall back to the heuristic alone; a wrong guess surfaces on the list call
            self.log.log_warning(
                "Resource discovery failed, using guessed resource name",
                api_version=api_version,
                kind=kind,
                resource=guessed,
                error=str(e)
            )
        else:
            if kind in registered:
                resource, source = registered[kind], "discovery"

        self.log.log_resource_resolved(api_version, kind, resource, source)
        return GroupVersionResource(group=group, version=version, resource=resource)
