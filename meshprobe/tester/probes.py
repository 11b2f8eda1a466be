"""
Protocol Probes - UDP echo, TCP readiness and DNS resolution probes.

Every probe reports its result to the metrics sink before returning and
converts transport failures into a failed result without timings. The
only error allowed past a probe is a missing pool client, which means
the UDP cycle ran out of order.
"""

import time
from typing import Callable, Protocol, TypeVar

from meshprobe.discovery.models import Agent
from meshprobe.env import TesterConfig
from meshprobe.errors import ClientPoolInconsistencyError
from meshprobe.http.models import HTTPResponse
from meshprobe.logging import Logger
from meshprobe.metrics.sink import MetricsSink

from .client_pool import ClientPool
from .logging_models import (
    TesterDebug,
    TesterError,
    TesterWarning,
)
from .models import (
    DNSTestResult,
    TCPTestResult,
    UDPTestResult,
)


R = TypeVar("R")


class HTTPTransport(Protocol):
    async def request(self, url: str, timeout: int) -> HTTPResponse: ...


class Resolver(Protocol):
    async def resolve4(self, hostname: str) -> list[str]: ...


class ProtocolProbes:
    def __init__(
        self,
        config: TesterConfig,
        me: Agent,
        pool: ClientPool,
        http_client: HTTPTransport,
        resolver: Resolver,
        metrics: MetricsSink,
        logger: Logger,
    ):
        self._config = config
        self._me = me
        self._pool = pool
        self._http_client = http_client
        self._resolver = resolver
        self._metrics = metrics
        self._logger = logger

    async def probe_udp(self, peer: Agent) -> UDPTestResult:
        client = self._pool.get(peer.ip)
        if client is None:
            raise ClientPoolInconsistencyError(peer.ip)

        try:
            timings = await client.ping(
                self._config.udp.timeout,
                self._config.udp.packets,
            )

        except Exception as err:
            await self._warn(f"udp test failed - {err}", peer.ip)
            return await self.fail_udp(peer)

        if timings.loss > 0:
            await self._warn(
                f"packet loss detected - {timings.loss} of {timings.packets} packets lost",
                peer.ip,
            )

        result = UDPTestResult(
            source=self._me,
            destination=peer,
            timings=timings,
            result="fail" if timings.loss > 0 else "pass",
        )

        await self._report(self._metrics.handle_udp_test_result, result, peer.ip)
        return result

    async def probe_tcp(self, peer: Agent) -> TCPTestResult:
        url = f"http://{peer.ip}:{self._config.port}/readiness"

        try:
            response = await self._http_client.request(
                url,
                timeout=self._config.tcp.timeout,
            )

        except Exception as err:
            await self._warn(f"tcp test failed - {err}", peer.ip)
            return await self.fail_tcp(peer)

        result = TCPTestResult(
            source=self._me,
            destination=peer,
            timings=response.timings,
            result="pass",
        )

        await self._report(self._metrics.handle_tcp_test_result, result, peer.ip)
        return result

    async def probe_dns(self, host: str) -> DNSTestResult:
        start = time.perf_counter()

        try:
            addresses = await self._resolver.resolve4(host)
            outcome = "pass" if addresses else "fail"

        except Exception as err:
            await self._warn(f"dns test failed - {err}", host)
            outcome = "fail"

        result = DNSTestResult(
            source=self._me,
            host=host,
            duration=(time.perf_counter() - start) * 1000,
            result=outcome,
        )

        await self._report(self._metrics.handle_dns_test_result, result, host)
        return result

    async def fail_udp(self, peer: Agent, error: Exception | None = None) -> UDPTestResult:
        if error is not None:
            await self._error(f"udp test aborted - {error}", peer.ip)

        result = UDPTestResult(
            source=self._me,
            destination=peer,
            result="fail",
        )

        await self._report(self._metrics.handle_udp_test_result, result, peer.ip)
        return result

    async def fail_tcp(self, peer: Agent, error: Exception | None = None) -> TCPTestResult:
        if error is not None:
            await self._error(f"tcp test aborted - {error}", peer.ip)

        result = TCPTestResult(
            source=self._me,
            destination=peer,
            result="fail",
        )

        await self._report(self._metrics.handle_tcp_test_result, result, peer.ip)
        return result

    async def fail_dns(self, host: str, error: Exception | None = None) -> DNSTestResult:
        if error is not None:
            await self._error(f"dns test aborted - {error}", host)

        result = DNSTestResult(
            source=self._me,
            host=host,
            duration=0.0,
            result="fail",
        )

        await self._report(self._metrics.handle_dns_test_result, result, host)
        return result

    async def _report(
        self,
        handler: Callable[[R], None],
        result: R,
        destination: str,
    ):
        try:
            handler(result)

        except Exception as err:
            await self._error(f"metrics sink rejected result - {err}", destination)

        else:
            await self._logger.log(
                TesterDebug(
                    message=f"test {result.result}",
                    source=self._me.ip,
                    destination=destination,
                ),
                name="tester",
            )

    async def _warn(self, message: str, destination: str):
        await self._logger.log(
            TesterWarning(
                message=message,
                source=self._me.ip,
                destination=destination,
            ),
            name="tester",
        )

    async def _error(self, message: str, destination: str):
        await self._logger.log(
            TesterError(
                message=message,
                source=self._me.ip,
                destination=destination,
            ),
            name="tester",
        )
