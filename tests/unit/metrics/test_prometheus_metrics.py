import pytest
from prometheus_client import CollectorRegistry

from meshprobe.discovery.models import Agent
from meshprobe.http.models import TCPTimings
from meshprobe.metrics import PrometheusMetrics
from meshprobe.tester.models import DNSTestResult, TCPTestResult, UDPTestResult
from meshprobe.udp.models import UDPPingResult


SOURCE = Agent(ip="10.0.0.100", zone="zone-a")
DESTINATION = Agent(ip="10.0.0.1", zone="zone-b")

PEER = {
    "source": "10.0.0.100",
    "source_zone": "zone-a",
    "destination": "10.0.0.1",
    "destination_zone": "zone-b",
}


@pytest.fixture
def metrics() -> PrometheusMetrics:
    return PrometheusMetrics(registry=CollectorRegistry())


def udp_result(loss: int) -> UDPTestResult:
    return UDPTestResult(
        source=SOURCE,
        destination=DESTINATION,
        result="fail" if loss else "pass",
        timings=UDPPingResult(
            packets=10,
            success=10 - loss,
            loss=loss,
            min=0.2,
            max=1.0,
            average=0.5,
            variance=0.04,
        ),
    )


class TestUDPMetrics:

    def test_records_latest_outcome(self, metrics) -> None:
        metrics.handle_udp_test_result(udp_result(loss=2))

        sample = metrics.registry.get_sample_value

        assert sample("meshprobe_udp_test_result", PEER) == 0
        assert sample("meshprobe_udp_packet_loss", PEER) == 2
        assert sample("meshprobe_udp_rtt_average_milliseconds", PEER) == 0.5
        assert sample(
            "meshprobe_udp_tests_total",
            {**PEER, "result": "fail"},
        ) == 1

    def test_failure_without_timings(self, metrics) -> None:
        metrics.handle_udp_test_result(
            UDPTestResult(source=SOURCE, destination=DESTINATION, result="fail")
        )

        sample = metrics.registry.get_sample_value

        assert sample("meshprobe_udp_test_result", PEER) == 0
        assert sample("meshprobe_udp_packet_loss", PEER) is None

    def test_reset_clears_gauges_keeps_counters(self, metrics) -> None:
        metrics.handle_udp_test_result(udp_result(loss=0))
        metrics.reset_udp_test_results()

        sample = metrics.registry.get_sample_value

        assert sample("meshprobe_udp_test_result", PEER) is None
        assert sample("meshprobe_udp_rtt_average_milliseconds", PEER) is None
        assert sample(
            "meshprobe_udp_tests_total",
            {**PEER, "result": "pass"},
        ) == 1


class TestTCPMetrics:

    def test_records_timings(self, metrics) -> None:
        metrics.handle_tcp_test_result(
            TCPTestResult(
                source=SOURCE,
                destination=DESTINATION,
                result="pass",
                timings=TCPTimings(
                    dns=0.0,
                    connect=0.4,
                    first_byte=1.1,
                    download=0.1,
                    total=1.6,
                ),
            )
        )

        sample = metrics.registry.get_sample_value

        assert sample("meshprobe_tcp_test_result", PEER) == 1
        assert sample("meshprobe_tcp_total_milliseconds_count", PEER) == 1
        assert sample("meshprobe_tcp_total_milliseconds_sum", PEER) == pytest.approx(1.6)

        metrics.reset_tcp_test_results()

        assert sample("meshprobe_tcp_test_result", PEER) is None
        assert sample("meshprobe_tcp_total_milliseconds_count", PEER) == 1


class TestDNSMetrics:

    def test_records_duration(self, metrics) -> None:
        metrics.handle_dns_test_result(
            DNSTestResult(
                source=SOURCE,
                host="ok.internal",
                result="pass",
                duration=2.25,
            )
        )

        labels = {"source": "10.0.0.100", "host": "ok.internal"}
        sample = metrics.registry.get_sample_value

        assert sample("meshprobe_dns_duration_milliseconds_sum", labels) == 2.25
        assert sample(
            "meshprobe_dns_tests_total",
            {**labels, "result": "pass"},
        ) == 1
