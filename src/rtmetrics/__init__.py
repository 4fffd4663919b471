"""rtmetrics - scheduler runtime metrics for Prometheus."""

__version__ = "0.1.0"

from rtmetrics.collector.prometheus_collector import (  # noqa: E402
    RuntimeCollector,
    SourceExhaustedError,
    register,
)

__all__ = ["RuntimeCollector", "SourceExhaustedError", "register", "__version__"]
