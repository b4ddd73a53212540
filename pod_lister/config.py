"""
Configuration management for Pod Lister
"""

import argparse
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from pod_lister.errors import ConfigurationError

LIST_FAILURE_POLICIES = ("halt", "skip")
LOG_FORMATS = ("json", "console")


@dataclass(frozen=True)
class WorkloadRef:
    """Identifies the workload whose namespace is polled"""

    kind: str
    api_version: str
    name: str


@dataclass(frozen=True)
class PollConfig:
    """Cadence and per-cycle bound for the pod existence checks"""

    interval_seconds: int = 5
    max_checks_per_cycle: int = 0  # 0 means check every listed pod

    def __post_init__(self):
        if self.interval_seconds <= 0:
            raise ConfigurationError(
                f"list interval must be positive, got {self.interval_seconds}"
            )
        if self.max_checks_per_cycle < 0:
            raise ConfigurationError(
                f"max pods count must not be negative, got {self.max_checks_per_cycle}"
            )


@dataclass(frozen=True)
class Config:
    """Configuration class for Pod Lister"""

    # Kubernetes configuration
    kube_config_path: Optional[str] = None

    # Workload to locate
    workload_name: str = ""
    workload_kind: str = "Deployment"
    workload_gv: str = "apps/v1"

    # Polling configuration
    list_interval_seconds: int = 5
    max_pods_count: int = 0
    list_failure_policy: str = "halt"
    all_namespaces: bool = False
    run_once: bool = False

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"

    # Metrics configuration
    pushgateway_url: Optional[str] = None
    prometheus_job_name: str = "pod_lister"
    metrics_port: int = 0

    def __post_init__(self):
        if self.list_failure_policy not in LIST_FAILURE_POLICIES:
            raise ConfigurationError(
                f"list failure policy must be one of {', '.join(LIST_FAILURE_POLICIES)}, "
                f"got {self.list_failure_policy!r}"
            )
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(
                f"log format must be one of {', '.join(LOG_FORMATS)}, got {self.log_format!r}"
            )
        if not self.all_namespaces and not self.workload_name:
            raise ConfigurationError("workload name is required unless polling all namespaces")
        if self.metrics_port < 0:
            raise ConfigurationError(f"metrics port must not be negative, got {self.metrics_port}")
        # Builds and validates the poll settings as a side check
        self.poll_config()

    def workload_ref(self) -> WorkloadRef:
        return WorkloadRef(
            kind=self.workload_kind,
            api_version=self.workload_gv,
            name=self.workload_name,
        )

    def poll_config(self) -> PollConfig:
        return PollConfig(
            interval_seconds=self.list_interval_seconds,
            max_checks_per_cycle=self.max_pods_count,
        )

    def as_log_dict(self) -> Dict[str, Any]:
        """Settings safe to print in the startup log line"""
        return asdict(self)


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pod-lister",
        description="Locate a workload and periodically re-check the pods in its namespace.",
    )
    parser.add_argument("--kube-config", dest="kube_config_path", help="path to kube config")
    parser.add_argument("--workload-name", dest="workload_name", help="the workload name")
    parser.add_argument("--workload-kind", dest="workload_kind", help="the workload kind")
    parser.add_argument("--workload-gv", dest="workload_gv", help="the workload group version")
    parser.add_argument(
        "--list-interval",
        dest="list_interval_seconds",
        type=int,
        help="interval for list pods action by seconds",
    )
    parser.add_argument(
        "--max-pods-count",
        dest="max_pods_count",
        type=int,
        help="max pods checked per cycle, 0 checks all",
    )
    parser.add_argument(
        "--list-failure-policy",
        dest="list_failure_policy",
        choices=LIST_FAILURE_POLICIES,
        help="halt the process or skip the cycle when listing pods fails",
    )
    parser.add_argument(
        "--all-namespaces",
        dest="all_namespaces",
        action="store_true",
        default=None,
        help="poll pods in every namespace instead of locating a workload",
    )
    parser.add_argument(
        "--once",
        dest="run_once",
        action="store_true",
        default=None,
        help="run a single cycle and exit",
    )
    parser.add_argument("--log-level", dest="log_level")
    parser.add_argument("--log-format", dest="log_format", choices=LOG_FORMATS)
    parser.add_argument("--metrics-port", dest="metrics_port", type=int)
    return parser


def load_config(argv: Optional[List[str]] = None, env_file: Optional[str] = None) -> Config:
    """Build the process configuration: defaults, then .env and environment, then flags"""
    load_dotenv(env_file)

    settings: Dict[str, Any] = {
        "kube_config_path": os.getenv("KUBE_CONFIG_PATH") or None,
        "workload_name": os.getenv("WORKLOAD_NAME", ""),
        "workload_kind": os.getenv("WORKLOAD_KIND", "Deployment"),
        "workload_gv": os.getenv("WORKLOAD_GV", "apps/v1"),
        "list_interval_seconds": _env_int("LIST_INTERVAL_SECONDS", 5),
        "max_pods_count": _env_int("MAX_PODS_COUNT", 0),
        "list_failure_policy": os.getenv("LIST_FAILURE_POLICY", "halt").lower(),
        "all_namespaces": _env_bool("ALL_NAMESPACES", False),
        "run_once": _env_bool("RUN_ONCE", False),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_format": os.getenv("LOG_FORMAT", "json").lower(),
        "pushgateway_url": os.getenv("PROMETHEUS_PUSHGATEWAY_URL") or None,
        "prometheus_job_name": os.getenv("PROMETHEUS_JOB_NAME", "pod_lister"),
        "metrics_port": _env_int("METRICS_PORT", 0),
    }

    if argv is not None:
        args = build_parser().parse_args(argv)
        for key, value in vars(args).items():
            if value is not None:
                settings[key] = value

    return Config(**settings)
