"""
Pod existence polling: list pods, then re-check each one individually
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from pod_lister.config import PollConfig, WorkloadRef
from pod_lister.errors import ClusterTransportError, PodNotFoundError
from pod_lister.logger import PodListerLogger
from pod_lister.metrics import PollMetrics
from pod_lister.records import PodRecord


class PollOutcome(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSPORT_ERROR = "transport_error"


class PollerState(Enum):
    IDLE = "idle"
    LISTING = "listing"
    CHECKING = "checking"
    SLEEPING = "sleeping"
    HALTED = "halted"


@dataclass(frozen=True)
class CheckResult:
    pod: PodRecord
    outcome: PollOutcome
    detail: Optional[str] = None


class PodClient(Protocol):
    def list_pods(self, namespace: Optional[str]) -> List[PodRecord]:
        ...

    def get_pod(self, namespace: str, name: str) -> PodRecord:
        ...


class PodExistencePoller:
    """
    Runs one polling cycle at a time; scheduling is left to the caller.

    Nothing is carried from one cycle to the next apart from the cycle
    counter, so a restarted poller behaves exactly like a running one.
    """

    def __init__(self, client: PodClient, namespace: Optional[str], poll_config: PollConfig,
                 workload: Optional[WorkloadRef] = None, list_failure_policy: str = "halt",
                 metrics: Optional[PollMetrics] = None, logger: Optional[PodListerLogger] = None):
        self.client = client
        self.namespace = namespace
        self.poll_config = poll_config
        self.list_failure_policy = list_failure_policy
        self.metrics = metrics
        self.state = PollerState.IDLE
        self.cycle_count = 0

        if logger is None:
            context = {"kind": workload.kind, "workload": workload.name} if workload else {}
            logger = PodListerLogger(**context)
        self.log = logger

    def run_cycle(self) -> List[CheckResult]:
        self.cycle_count += 1
        cycle_id = f"{self.cycle_count}-{uuid.uuid4().hex[:8]}"

        self.state = PollerState.LISTING
        self.log.log_cycle_start(cycle_id, self.namespace)
        try:
            pods = self.client.list_pods(self.namespace)
        except ClusterTransportError as e:
            if self.metrics:
                self.metrics.record_list_failure(self.namespace)
            if self.list_failure_policy == "halt":
                self.log.log_error(e, context="listing pods")
                self.state = PollerState.HALTED
                raise
            self.log.log_error(e, context="listing pods, skipping cycle")
            self.state = PollerState.SLEEPING
            return []
        self.log.log_pods_listed(cycle_id, self.namespace, len(pods))

        self.state = PollerState.CHECKING
        bound = self.poll_config.max_checks_per_cycle
        to_check = pods[:bound] if bound > 0 else pods
        results = [self.check_pod(pod) for pod in to_check]

        self.log.log_cycle_end(
            cycle_id,
            checked=len(results),
            found=sum(1 for r in results if r.outcome is PollOutcome.FOUND),
            not_found=sum(1 for r in results if r.outcome is PollOutcome.NOT_FOUND),
            errors=sum(1 for r in results if r.outcome is PollOutcome.TRANSPORT_ERROR),
        )
        if self.metrics:
            self.metrics.record_cycle(self.namespace, len(pods), [r.outcome.value for r in results])

        self.state = PollerState.SLEEPING
        return results

    def check_pod(self, pod: PodRecord) -> CheckResult:
        """Get a listed pod by name and classify the result; never raises for one pod"""
        try:
            self.client.get_pod(pod.namespace, pod.name)
        except PodNotFoundError:
            self.log.log_pod_not_found(pod.namespace, pod.name)
            return CheckResult(pod, PollOutcome.NOT_FOUND)
        except ClusterTransportError as e:
            self.log.log_pod_error(pod.namespace, pod.name, str(e))
            return CheckResult(pod, PollOutcome.TRANSPORT_ERROR, detail=str(e))

        self.log.log_pod_found(pod.namespace, pod.name)
        return CheckResult(pod, PollOutcome.FOUND)
