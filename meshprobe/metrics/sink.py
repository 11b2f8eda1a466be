from typing import Protocol

from meshprobe.tester.models import (
    DNSTestResult,
    TCPTestResult,
    UDPTestResult,
)


class MetricsSink(Protocol):
    """Receives probe results. Calls are fire-and-forget."""

    def reset_udp_test_results(self) -> None: ...

    def reset_tcp_test_results(self) -> None: ...

    def handle_udp_test_result(self, result: UDPTestResult) -> None: ...

    def handle_tcp_test_result(self, result: TCPTestResult) -> None: ...

    def handle_dns_test_result(self, result: DNSTestResult) -> None: ...
