import asyncio
import random
from typing import Awaitable, Callable, Iterable

from meshprobe.discovery.discovery import Discovery
from meshprobe.discovery.dns.resolver import AsyncDNSResolver
from meshprobe.discovery.models import Agent
from meshprobe.env import TesterConfig
from meshprobe.http.client import HTTPClient
from meshprobe.logging import Logger
from meshprobe.metrics.sink import MetricsSink
from meshprobe.udp.client import UDPClient

from .client_pool import ClientFactory, ClientPool
from .fanout import run_all
from .logging_models import PoolInfo
from .models import (
    DNSTestResult,
    TCPTestResult,
    UDPTestResult,
)
from .probes import HTTPTransport, ProtocolProbes, Resolver
from .scheduler import CycleScheduler


class Tester:
    """
    Probes every known peer over UDP, TCP and DNS until stopped.

    Example usage:
        tester = Tester(
            config,
            discovery=StaticDiscovery(["10.0.0.2", "10.0.0.3"]),
            metrics=PrometheusMetrics(),
            me=Agent(ip="10.0.0.1"),
        )

        await tester.start()
        ...
        await tester.stop()
        await tester.close()

    The run_*_tests methods run a single cycle and can be called directly.
    """

    def __init__(
        self,
        config: TesterConfig,
        discovery: Discovery,
        metrics: MetricsSink,
        me: Agent,
        *,
        http_client: HTTPTransport | None = None,
        resolver: Resolver | None = None,
        client_factory: ClientFactory | None = None,
        logger: Logger | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
    ):
        self._config = config
        self._discovery = discovery
        self._metrics = metrics
        self._me = me
        self._logger = logger or Logger()

        self._owns_http_client = http_client is None
        self._owns_resolver = resolver is None
        self._http_client = http_client or HTTPClient()
        self._resolver = resolver or AsyncDNSResolver()

        self.pool = ClientPool(
            config.port,
            client_factory or UDPClient,
        )

        self.probes = ProtocolProbes(
            config,
            me,
            self.pool,
            self._http_client,
            self._resolver,
            metrics,
            self._logger,
        )

        self.scheduler = CycleScheduler(
            config,
            discovery,
            metrics,
            run_udp=self.run_udp_tests,
            run_tcp=self.run_tcp_tests,
            run_dns=self.run_dns_tests,
            logger=self._logger,
            sleep=sleep,
            rng=rng,
        )

    @property
    def me(self) -> Agent:
        return self._me

    @property
    def agents(self) -> tuple[Agent, ...]:
        return self.scheduler.agents

    @property
    def running(self) -> bool:
        return self.scheduler.running

    async def start(self):
        await self.scheduler.start()

    async def stop(self):
        self.scheduler.stop()

    async def join(self):
        await self.scheduler.join()

    async def close(self):
        """Stop the loops and release every client, socket and session."""
        await self.scheduler.cancel()

        for address in await self.pool.close():
            await self._log_pool(f"udp client removed for {address}", address)

        if self._owns_http_client:
            await self._http_client.close()

        if self._owns_resolver:
            self._resolver.close()

    async def run_udp_tests(self, agents: Iterable[Agent]) -> list[UDPTestResult]:
        agents = list(agents)

        created, destroyed = await self.pool.reconcile(agents)

        for address in created:
            await self._log_pool(f"new udp client created for {address}", address)

        for address in destroyed:
            await self._log_pool(f"udp client removed for {address}", address)

        return await run_all(
            agents,
            self.probes.probe_udp,
            self.probes.fail_udp,
        )

    async def run_tcp_tests(self, agents: Iterable[Agent]) -> list[TCPTestResult]:
        return await run_all(
            agents,
            self.probes.probe_tcp,
            self.probes.fail_tcp,
        )

    async def run_dns_tests(self) -> list[DNSTestResult]:
        return await run_all(
            self._config.dns.hosts,
            self.probes.probe_dns,
            self.probes.fail_dns,
        )

    async def _log_pool(self, message: str, address: str):
        await self._logger.log(
            PoolInfo(
                message=message,
                address=address,
                port=self.pool.port,
            ),
            name="tester",
        )
