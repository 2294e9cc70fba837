"""Observability: in-memory counters for audit writes."""

from auditkit.observability.metrics import MetricsCollector, metrics

__all__ = ["MetricsCollector", "metrics"]
