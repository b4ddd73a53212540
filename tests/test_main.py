import signal
from unittest.mock import patch

from pod_lister.config import Config
from pod_lister.errors import ClusterTransportError
from pod_lister.main import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_TRANSPORT_ERROR,
    build_poller,
    build_scheduler,
    run,
)
from pod_lister.metrics import PollMetrics
from pod_lister.poller import PollOutcome


def test_single_cycle_for_located_workload(cluster):
    code = run(["--workload-name", "web", "--once"], client=cluster)

    assert code == EXIT_OK
    assert cluster.list_calls == ["shop"]
    assert cluster.get_calls == [("shop", "a"), ("shop", "b"), ("shop", "c")]


def test_missing_workload_never_polls(cluster):
    code = run(["--workload-name", "missing-app", "--once"], client=cluster)

    assert code == EXIT_CONFIG_ERROR
    assert cluster.list_calls == []


def test_malformed_kind_is_config_error(cluster):
    code = run(["--workload-name", "web", "--workload-kind", "deployment", "--once"], client=cluster)

    assert code == EXIT_CONFIG_ERROR
    assert cluster.listed_resources == []


def test_invalid_flags_are_config_error(cluster):
    assert run(["--list-interval", "0", "--workload-name", "web"], client=cluster) == EXIT_CONFIG_ERROR


def test_pod_list_failure_halts(cluster):
    cluster.list_error = ClusterTransportError("listing pods in shop: Service Unavailable", status=503)

    code = run(["--workload-name", "web", "--once"], client=cluster)

    assert code == EXIT_TRANSPORT_ERROR


def test_pod_list_failure_skipped_when_configured(cluster):
    cluster.list_error = ClusterTransportError("listing pods in shop: Service Unavailable", status=503)

    code = run(["--workload-name", "web", "--once", "--list-failure-policy", "skip"], client=cluster)

    assert code == EXIT_OK


def test_all_namespaces_skips_lookup(cluster):
    poller = build_poller(Config(all_namespaces=True), cluster)

    results = poller.run_cycle()

    assert cluster.listed_resources == []
    assert len(results) == 4


def test_bounded_loop_cycles(cluster):
    cfg = Config(workload_name="web", max_pods_count=1, list_interval_seconds=1)
    poller = build_poller(cfg, cluster)
    scheduler = build_scheduler(cfg, poller)
    scheduler.interval_seconds = 0.01

    scheduler.run_forever(max_cycles=2)

    assert cluster.get_calls == [("shop", "a"), ("shop", "a")]


def test_scheduler_pushes_metrics_when_configured(cluster):
    cfg = Config(workload_name="web", pushgateway_url="http://gateway:9091")
    metrics = PollMetrics()
    poller = build_poller(cfg, cluster, metrics=metrics)

    with patch.object(metrics, "push") as push:
        results = build_scheduler(cfg, poller, metrics).run_once()

    push.assert_called_once_with("http://gateway:9091", "pod_lister")
    assert {r.outcome for r in results} == {PollOutcome.FOUND}


def test_invalid_kubeconfig_exits_with_config_error(tmp_path):
    kubeconfig = tmp_path / "config"
    kubeconfig.write_text("apiVersion: v1\nkind: Config\nclusters: []\ncontexts: []\nusers: []\n")

    code = run(["--workload-name", "web", "--once", "--kube-config", str(kubeconfig)])

    assert code == EXIT_CONFIG_ERROR


def test_sigterm_stops_loop_gracefully(cluster):
    list_pods = cluster.list_pods

    def list_then_terminate(namespace):
        pods = list_pods(namespace)
        handler = signal.getsignal(signal.SIGTERM)
        handler(signal.SIGTERM, None)
        return pods

    cluster.list_pods = list_then_terminate
    original_handler = signal.getsignal(signal.SIGTERM)

    code = run(["--workload-name", "web", "--list-interval", "60"], client=cluster)

    assert code == EXIT_OK
    assert cluster.list_calls == ["shop"]
    assert signal.getsignal(signal.SIGTERM) is original_handler


def test_metrics_port_in_use_is_config_error(cluster):
    with patch.object(PollMetrics, "serve", side_effect=OSError("Address already in use")):
        code = run(["--workload-name", "web", "--once", "--metrics-port", "9100"], client=cluster)

    assert code == EXIT_CONFIG_ERROR
    assert cluster.list_calls == []
