"""
Prometheus metrics for polling cycles
"""

import logging
from typing import Iterable, Optional

import requests
from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest, start_http_server

logger = logging.getLogger(__name__)


class PollMetrics:
    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.cycles = Counter(
            'pod_lister_cycles_total',
            'Total number of completed polling cycles',
            registry=self.registry
        )
        self.pod_checks = Counter(
            'pod_lister_pod_checks_total',
            'Individual pod existence checks by outcome',
            ['namespace', 'outcome'],
            registry=self.registry
        )
        self.pods_listed = Gauge(
            'pod_lister_pods_listed',
            'Pods returned by the most recent list call',
            ['namespace'],
            registry=self.registry
        )
        self.list_failures = Counter(
            'pod_lister_list_failures_total',
            'Pod list calls that failed',
            ['namespace'],
            registry=self.registry
        )

    def record_cycle(self, namespace: Optional[str], listed: int, outcomes: Iterable[str]) -> None:
        label = namespace or "*"
        self.cycles.inc()
        self.pods_listed.labels(namespace=label).set(listed)
        for outcome in outcomes:
            self.pod_checks.labels(namespace=label, outcome=outcome).inc()

    def record_list_failure(self, namespace: Optional[str]) -> None:
        self.list_failures.labels(namespace=namespace or "*").inc()

    def serve(self, port: int) -> None:
        """Expose the registry on /metrics"""
        start_http_server(port, registry=self.registry)
        logger.info(f"Serving metrics on port {port}")

    def push(self, pushgateway_url: str, job_name: str) -> bool:
        """Push the current registry to a Pushgateway; failures are logged, not raised"""
        url = f"{pushgateway_url.rstrip('/')}/metrics/job/{job_name}"
        try:
            response = requests.put(url, data=generate_latest(self.registry), timeout=10)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to push to Pushgateway: {e}")
            return False

        logger.debug(f"Successfully pushed metrics to Pushgateway at {url}")
        return True
