"""Prometheus exposition of the metric registry using prometheus_client."""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional
from prometheus_client import (
    CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, Histogram, generate_latest,
)
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector
import logging

from ow_exporter.registry import MetricRegistry
from ow_exporter.series import CATALOG, Observation, SeriesSpec

logger = logging.getLogger(__name__)


class RegistryCollector(Collector):
    """Custom collector that renders a fresh registry snapshot on every scrape."""

    def __init__(self, registry: MetricRegistry, prefix: str = "ow_",
                 catalog: Optional[Dict[str, SeriesSpec]] = None):
        self.registry = registry
        self.prefix = prefix
        self.catalog = CATALOG if catalog is None else catalog

    def collect(self) -> Iterable[GaugeMetricFamily]:
        by_series: Dict[str, List[Observation]] = defaultdict(list)
        for obs in self.registry.snapshot():
            by_series[obs.series].append(obs)

        for series_name, observations in by_series.items():
            spec = self.catalog.get(series_name)
            if spec is not None:
                help_text = spec.help
                label_names = list(spec.label_names)
            else:
                help_text = series_name
                label_names = [k for k, _ in observations[0].labels]

            family = GaugeMetricFamily(
                f"{self.prefix}{series_name}", help_text, labels=label_names
            )
            for obs in observations:
                labels = obs.label_dict()
                family.add_metric([labels.get(name, "") for name in label_names], obs.value)
            yield family

    def describe(self):
        # Empty description: families are only known at scrape time.
        return []


class SelfMetrics:
    """Self-monitoring metrics for the refresh loop."""

    def __init__(self, registry=None, prefix=""):
        if registry is None:
            registry = CollectorRegistry()

        self.refreshes_total = Counter(
            f"{prefix}exporter_refreshes_total",
            "Total number of completed refresh cycles",
            registry=registry
        )

        self.skipped_refreshes_total = Counter(
            f"{prefix}exporter_skipped_refreshes_total",
            "Refresh triggers skipped because a cycle was still running",
            registry=registry
        )

        self.fetch_errors_total = Counter(
            f"{prefix}exporter_fetch_errors_total",
            "Total number of upstream fetch errors",
            ["source", "kind"],
            registry=registry
        )

        self.refresh_duration_seconds = Histogram(
            f"{prefix}exporter_refresh_duration_seconds",
            "Duration of each refresh cycle in seconds",
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=registry
        )

        self.last_success_timestamp = Gauge(
            f"{prefix}exporter_last_success_timestamp_seconds",
            "Unix time of the last successful fetch per source",
            ["source"],
            registry=registry
        )

    def record_refresh(self, duration: float):
        self.refreshes_total.inc()
        self.refresh_duration_seconds.observe(duration)

    def record_skipped(self):
        self.skipped_refreshes_total.inc()

    def record_fetch_error(self, source: str, kind: str):
        self.fetch_errors_total.labels(source=source, kind=kind).inc()

    def record_success(self, source: str, timestamp: float):
        self.last_success_timestamp.labels(source=source).set(timestamp)


class PrometheusExporter:
    """Owns the exposition registry and renders the scrape body."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: MetricRegistry, prefix: str = "ow_"):
        self.registry = registry
        self.prefix = prefix
        # Use a custom registry to avoid exporting default Python/process metrics
        self.collector_registry = CollectorRegistry()
        self.collector_registry.register(RegistryCollector(registry, prefix=prefix))
        self.self_metrics = SelfMetrics(registry=self.collector_registry, prefix=prefix)
        logger.info(f"Prometheus exposition ready with prefix '{prefix}'")

    def render(self) -> bytes:
        """Render the current snapshot in the text exposition format."""
        return generate_latest(self.collector_registry)
