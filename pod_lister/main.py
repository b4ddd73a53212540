#!/usr/bin/env python3
"""
Pod Lister - Main Application
"""

import signal
import sys
from typing import List, Optional

from pod_lister.config import Config, load_config
from pod_lister.errors import ClusterTransportError, ConfigurationError
from pod_lister.kubernetes_client import KubernetesClient
from pod_lister.locator import WorkloadLocator
from pod_lister.logger import PodListerLogger, setup_logging
from pod_lister.metrics import PollMetrics
from pod_lister.poller import PodExistencePoller
from pod_lister.resolver import ResourceKindResolver
from pod_lister.scheduler import PeriodicScheduler

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_TRANSPORT_ERROR = 2


def build_poller(cfg: Config, client, metrics: Optional[PollMetrics] = None,
                 log: Optional[PodListerLogger] = None) -> PodExistencePoller:
    """Locate the workload (unless polling everything) and wire up the poller"""
    log = log or PodListerLogger()

    if cfg.all_namespaces:
        log.log_warning("Polling pods in all namespaces, workload lookup skipped")
        return PodExistencePoller(
            client,
            None,
            cfg.poll_config(),
            list_failure_policy=cfg.list_failure_policy,
            metrics=metrics,
        )

    ref = cfg.workload_ref()
    locator = WorkloadLocator(client, ResourceKindResolver(client))
    resolved = locator.resolve(ref)
    return PodExistencePoller(
        client,
        resolved.namespace,
        cfg.poll_config(),
        workload=ref,
        list_failure_policy=cfg.list_failure_policy,
        metrics=metrics,
    )


def build_scheduler(cfg: Config, poller: PodExistencePoller,
                    metrics: Optional[PollMetrics] = None) -> PeriodicScheduler:
    def poll_task():
        results = poller.run_cycle()
        if metrics and cfg.pushgateway_url:
            metrics.push(cfg.pushgateway_url, cfg.prometheus_job_name)
        return results

    return PeriodicScheduler(poll_task, cfg.list_interval_seconds)


def run(argv: Optional[List[str]] = None, client=None) -> int:
    """Application entry point; returns the process exit code"""
    try:
        cfg = load_config(sys.argv[1:] if argv is None else argv)
    except ConfigurationError as e:
        setup_logging()
        PodListerLogger().log_error(e, context="loading configuration")
        return EXIT_CONFIG_ERROR

    setup_logging(cfg.log_level, cfg.log_format)
    log = PodListerLogger()
    log.log_startup(cfg.as_log_dict())

    metrics = PollMetrics()
    try:
        if client is None:
            client = KubernetesClient(cfg.kube_config_path)
        poller = build_poller(cfg, client, metrics=metrics, log=log)
    except ConfigurationError as e:
        log.log_error(e, context="startup")
        return EXIT_CONFIG_ERROR
    except ClusterTransportError as e:
        log.log_error(e, context="locating workload")
        return EXIT_TRANSPORT_ERROR

    if cfg.metrics_port:
        try:
            metrics.serve(cfg.metrics_port)
        except OSError as e:
            log.log_error(e, context=f"serving metrics on port {cfg.metrics_port}")
            return EXIT_CONFIG_ERROR

    scheduler = build_scheduler(cfg, poller, metrics)

    def _handle_signal(signum, _frame):
        log.log_warning("Received signal, stopping after current cycle", signal=signal.Signals(signum).name)
        scheduler.stop()

    previous_handlers = {
        signum: signal.signal(signum, _handle_signal)
        for signum in (signal.SIGTERM, signal.SIGINT)
    }

    try:
        if cfg.run_once:
            scheduler.run_once()
        else:
            scheduler.run_forever()
    except ClusterTransportError as e:
        log.log_error(e, context="polling")
        return EXIT_TRANSPORT_ERROR
    finally:
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    return EXIT_OK


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
