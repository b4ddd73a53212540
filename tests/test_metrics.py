from unittest.mock import Mock, patch

import requests

from pod_lister.metrics import PollMetrics


def test_push_sends_exposition_text():
    metrics = PollMetrics()
    metrics.record_cycle("shop", 3, ["found", "found", "not_found"])

    with patch("pod_lister.metrics.requests.put") as put:
        put.return_value = Mock(raise_for_status=Mock())
        assert metrics.push("http://gateway:9091/", "pod_lister") is True

    url = put.call_args[0][0]
    assert url == "http://gateway:9091/metrics/job/pod_lister"
    assert b"pod_lister_pod_checks_total" in put.call_args[1]["data"]


def test_push_failure_is_not_raised():
    metrics = PollMetrics()

    with patch("pod_lister.metrics.requests.put", side_effect=requests.ConnectionError("refused")):
        assert metrics.push("http://gateway:9091", "pod_lister") is False


def test_all_namespaces_label():
    metrics = PollMetrics()
    metrics.record_cycle(None, 1, ["transport_error"])

    assert metrics.registry.get_sample_value(
        "pod_lister_pod_checks_total", {"namespace": "*", "outcome": "transport_error"}) == 1.0
