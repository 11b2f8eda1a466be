from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
)

from meshprobe.discovery.models import Agent
from meshprobe.tester.models import (
    DNSTestResult,
    TCPTestResult,
    UDPTestResult,
)


PEER_LABELS = [
    "source",
    "source_zone",
    "destination",
    "destination_zone",
]

LATENCY_BUCKETS = (
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    25.0,
    50.0,
    100.0,
    250.0,
    500.0,
    1000.0,
    2500.0,
)


class PrometheusMetrics:
    """
    Prometheus sink for probe results.

    Per-peer gauges hold the outcome of the latest cycle only and are
    cleared when a cycle resets them, so peers that left the mesh stop
    being exported. Counters and histograms accumulate.
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        namespace: str = "meshprobe",
    ):
        if registry is None:
            registry = CollectorRegistry()

        self.registry = registry
        self.namespace = namespace

        self._udp_result = Gauge(
            "udp_test_result",
            "Outcome of the latest UDP test (1 pass, 0 fail)",
            PEER_LABELS,
            namespace=namespace,
            registry=registry,
        )
        self._udp_loss = Gauge(
            "udp_packet_loss",
            "Packets lost in the latest UDP test",
            PEER_LABELS,
            namespace=namespace,
            registry=registry,
        )
        self._udp_average = Gauge(
            "udp_rtt_average_milliseconds",
            "Average UDP round trip of the latest test",
            PEER_LABELS,
            namespace=namespace,
            registry=registry,
        )
        self._udp_variance = Gauge(
            "udp_rtt_variance_milliseconds",
            "UDP round trip variance of the latest test",
            PEER_LABELS,
            namespace=namespace,
            registry=registry,
        )
        self._udp_tests = Counter(
            "udp_tests",
            "UDP tests run",
            PEER_LABELS + ["result"],
            namespace=namespace,
            registry=registry,
        )

        self._tcp_result = Gauge(
            "tcp_test_result",
            "Outcome of the latest TCP test (1 pass, 0 fail)",
            PEER_LABELS,
            namespace=namespace,
            registry=registry,
        )
        self._tcp_connect = Histogram(
            "tcp_connect_milliseconds",
            "TCP connection setup time",
            PEER_LABELS,
            namespace=namespace,
            registry=registry,
            buckets=LATENCY_BUCKETS,
        )
        self._tcp_total = Histogram(
            "tcp_total_milliseconds",
            "Total readiness request time",
            PEER_LABELS,
            namespace=namespace,
            registry=registry,
            buckets=LATENCY_BUCKETS,
        )
        self._tcp_tests = Counter(
            "tcp_tests",
            "TCP tests run",
            PEER_LABELS + ["result"],
            namespace=namespace,
            registry=registry,
        )

        self._dns_duration = Histogram(
            "dns_duration_milliseconds",
            "DNS resolution time",
            ["source", "host"],
            namespace=namespace,
            registry=registry,
            buckets=LATENCY_BUCKETS,
        )
        self._dns_tests = Counter(
            "dns_tests",
            "DNS tests run",
            ["source", "host", "result"],
            namespace=namespace,
            registry=registry,
        )

    def _peer_labels(self, source: Agent, destination: Agent):
        return {
            "source": source.ip,
            "source_zone": source.zone or "",
            "destination": destination.ip,
            "destination_zone": destination.zone or "",
        }

    def reset_udp_test_results(self) -> None:
        for gauge in (
            self._udp_result,
            self._udp_loss,
            self._udp_average,
            self._udp_variance,
        ):
            gauge.clear()

    def reset_tcp_test_results(self) -> None:
        self._tcp_result.clear()

    def handle_udp_test_result(self, result: UDPTestResult) -> None:
        labels = self._peer_labels(result.source, result.destination)

        self._udp_result.labels(**labels).set(1 if result.result == "pass" else 0)
        self._udp_tests.labels(result=result.result, **labels).inc()

        if result.timings is not None:
            self._udp_loss.labels(**labels).set(result.timings.loss)
            self._udp_average.labels(**labels).set(result.timings.average)
            self._udp_variance.labels(**labels).set(result.timings.variance)

    def handle_tcp_test_result(self, result: TCPTestResult) -> None:
        labels = self._peer_labels(result.source, result.destination)

        self._tcp_result.labels(**labels).set(1 if result.result == "pass" else 0)
        self._tcp_tests.labels(result=result.result, **labels).inc()

        if result.timings is not None:
            self._tcp_connect.labels(**labels).observe(result.timings.connect)
            self._tcp_total.labels(**labels).observe(result.timings.total)

    def handle_dns_test_result(self, result: DNSTestResult) -> None:
        self._dns_tests.labels(
            source=result.source.ip,
            host=result.host,
            result=result.result,
        ).inc()

        self._dns_duration.labels(
            source=result.source.ip,
            host=result.host,
        ).observe(result.duration)
