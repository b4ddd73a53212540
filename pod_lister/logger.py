"""
Logging configuration for Pod Lister
"""

import logging
import sys
from typing import Any, Dict, Optional

import structlog
from colorama import init as colorama_init

# Initialize colorama for cross-platform colored output
colorama_init()


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Setup structured logging for the application"""

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if log_format == "json"
            else structlog.dev.ConsoleRenderer(colors=True)
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Suppress verbose kubernetes client logs
    logging.getLogger("kubernetes").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


class PodListerLogger:
    """Specialized logger for Pod Lister operations"""

    def __init__(self, **context: Any):
        self.context = context

    @property
    def logger(self) -> structlog.BoundLogger:
        return get_logger("pod-lister").bind(**self.context)

    def log_startup(self, config_dict: Dict[str, Any]) -> None:
        """Log application startup"""
        self.logger.info(
            "Pod Lister starting up",
            version="1.0.0",
            config=config_dict
        )

    def log_resource_resolved(self, api_version: str, kind: str,
                              resource: str, source: str) -> None:
        """Log which resource collection a kind maps to and how it was found"""
        self.logger.info(
            "Resolved resource for kind",
            api_version=api_version,
            kind=kind,
            resource=resource,
            source=source
        )

    def log_workload_resolved(self, kind: str, name: str, namespace: str) -> None:
        self.logger.info(
            "Workload located",
            kind=kind,
            workload=name,
            namespace=namespace
        )

    def log_resolution_failed(self, kind: str, name: str, reason: str) -> None:
        self.logger.error(
            "Can not find workload",
            kind=kind,
            workload=name,
            reason=reason
        )

    def log_cycle_start(self, cycle_id: str, namespace: Optional[str]) -> None:
        """Log the start of a polling cycle"""
        self.logger.info(
            "Listing pods",
            cycle_id=cycle_id,
            namespace=namespace or "*"
        )

    def log_pods_listed(self, cycle_id: str, namespace: Optional[str], count: int) -> None:
        self.logger.info(
            "Pods listed",
            cycle_id=cycle_id,
            namespace=namespace or "*",
            pod_count=count
        )

    def log_pod_found(self, namespace: str, pod_name: str) -> None:
        self.logger.info(
            "Found pod",
            namespace=namespace,
            pod_name=pod_name,
            outcome="found"
        )

    def log_pod_not_found(self, namespace: str, pod_name: str) -> None:
        """A pod deleted between list and get is expected, not an error"""
        self.logger.info(
            "Pod not found",
            namespace=namespace,
            pod_name=pod_name,
            outcome="not_found"
        )

    def log_pod_error(self, namespace: str, pod_name: str, detail: str) -> None:
        self.logger.error(
            "Error getting pod",
            namespace=namespace,
            pod_name=pod_name,
            outcome="transport_error",
            detail=detail
        )

    def log_cycle_end(self, cycle_id: str, checked: int, found: int,
                      not_found: int, errors: int) -> None:
        """Log the end of a polling cycle"""
        self.logger.info(
            "Polling cycle completed",
            cycle_id=cycle_id,
            pods_checked=checked,
            found=found,
            not_found=not_found,
            errors=errors
        )

    def log_error(self, error: Exception, context: str = None) -> None:
        """Log errors with context"""
        self.logger.error(
            "Error occurred",
            error=str(error),
            error_type=type(error).__name__,
            context=context,
            exc_info=True
        )

    def log_warning(self, message: str, **kwargs) -> None:
        """Log warnings"""
        self.logger.warning(message, **kwargs)
