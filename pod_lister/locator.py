"""
Find the namespace that owns a workload of an arbitrary kind
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from pod_lister.config import WorkloadRef
from pod_lister.errors import ResolutionFailure
from pod_lister.logger import PodListerLogger
from pod_lister.records import GenericRecord
from pod_lister.resolver import GroupVersionResource, ResourceKindResolver


@dataclass(frozen=True)
class ResolvedWorkload:
    ref: WorkloadRef
    namespace: str


class GenericLister(Protocol):
    def list_generic(self, resource: GroupVersionResource) -> Sequence[GenericRecord]:
        ...


class WorkloadLocator:
    """
    One-shot lookup run at startup.

    Lists every object of the workload's kind cluster-wide and takes the
    first one whose name matches. Names may repeat across namespaces, in
    which case list order decides. The result is not refreshed later, so a
    workload moved to another namespace while polling is not followed.
    """

    def __init__(self, client: GenericLister, resolver: ResourceKindResolver,
                 logger: Optional[PodListerLogger] = None):
        self.client = client
        self.resolver = resolver
        self.log = logger or PodListerLogger(component="locator")

    def resolve(self, ref: WorkloadRef) -> ResolvedWorkload:
        resource = self.resolver.resolve(ref.api_version, ref.kind)
        records = self.client.list_generic(resource)

        for record in records:
            if record.metadata_name() != ref.name:
                continue
            namespace = record.metadata_namespace()
            if not namespace:
                failure = ResolutionFailure(ref.kind, ref.name, "matching object is not namespaced")
                self.log.log_resolution_failed(ref.kind, ref.name, failure.reason)
                raise failure
            self.log.log_workload_resolved(ref.kind, ref.name, namespace)
            return ResolvedWorkload(ref=ref, namespace=namespace)

        failure = ResolutionFailure(ref.kind, ref.name, f"no {resource.resource} named {ref.name}")
        self.log.log_resolution_failed(ref.kind, ref.name, failure.reason)
        raise failure
