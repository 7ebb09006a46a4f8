"""Main entry point for the Cluster Status Operator."""

from __future__ import annotations

import os
from typing import Any

import kopf

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    structured_logging.setup_structured_logging()

    settings.posting.level = 0
    settings.networking.request_timeout = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
    settings.execution.max_workers = int(os.getenv("MAX_WORKERS", "4"))

    # Metrics and health check endpoints
    health.start_metrics_server(int(os.getenv("METRICS_PORT", "8080")))


def watch_namespaces() -> list[str]:
    """Namespaces to watch from WATCH_NAMESPACES (comma separated), empty for cluster-wide."""
    raw = os.getenv("WATCH_NAMESPACES", "")
    return [ns.strip() for ns in raw.split(",") if ns.strip()]


def run() -> None:
    """Run the operator until interrupted."""
    namespaces = watch_namespaces()
    if namespaces:
        kopf.run(namespaces=namespaces)
    else:
        kopf.run(clusterwide=True)
