from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

from .networks import LABELS, NetworkId, network_label

NAMESPACE = "telemetry_service"

# From in-memory failures (a few ms) up to slow store round-trips.
LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

CONTENT_TYPE = CONTENT_TYPE_LATEST


class Metrics:
    """
    Request metrics labelled by network.

    The network label only ever takes the values in LABELS, whatever chain
    id a client sends. Each instance owns its registry so tests can build
    isolated ones.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.total_requests = Counter(
            "total_requests", "Number of total requests", ["network"],
            namespace=NAMESPACE, registry=self.registry,
        )
        self.successful_requests = Counter(
            "successful_requests", "Number of successful requests", ["network"],
            namespace=NAMESPACE, registry=self.registry,
        )
        self.failed_requests = Counter(
            "failed_requests", "Number of failed requests", ["network"],
            namespace=NAMESPACE, registry=self.registry,
        )
        self.request_latency = Histogram(
            "request_latency", "Request latency", ["network"],
            namespace=NAMESPACE, unit="seconds", buckets=LATENCY_BUCKETS,
            registry=self.registry,
        )
        for label in LABELS:
            self.total_requests.labels(network=label)
            self.successful_requests.labels(network=label)
            self.failed_requests.labels(network=label)
            self.request_latency.labels(network=label)

    def request_received(self, network: NetworkId) -> None:
        self.total_requests.labels(network=network_label(network)).inc()

    def request_succeeded(self, network: NetworkId, elapsed: float) -> None:
        label = network_label(network)
        self.request_latency.labels(network=label).observe(elapsed)
        self.successful_requests.labels(network=label).inc()

    def request_failed(self, network: NetworkId, elapsed: float) -> None:
        label = network_label(network)
        self.request_latency.labels(network=label).observe(elapsed)
        self.failed_requests.labels(network=label).inc()

    def render(self) -> bytes:
        """Encode all metrics in the Prometheus text exposition format."""
        return generate_latest(self.registry)
