"""
Tests for agent wiring and a loopback mesh of one peer.
"""

import asyncio
import socket

import pytest

from meshprobe.agent import create_discovery, run_agent
from meshprobe.discovery import Agent, DNSDiscovery, StaticDiscovery
from meshprobe.env import Env, TCPTestConfig, TesterConfig, UDPTestConfig
from meshprobe.http import ReadinessServer
from meshprobe.metrics import PrometheusMetrics
from meshprobe.tester import Tester
from meshprobe.udp import UDPEchoServer

from tests.unit.tester.mocks import MockResolver


class TestCreateDiscovery:

    @pytest.mark.asyncio
    async def test_static_peers_exclude_own_address(self) -> None:
        env = Env(
            MESHPROBE_NODE_IP="10.0.0.1",
            MESHPROBE_STATIC_PEERS="10.0.0.1,10.0.0.2",
        )

        discovery = create_discovery(env)

        assert isinstance(discovery, StaticDiscovery)
        assert await discovery.agents() == [Agent(ip="10.0.0.2")]

    def test_hostname_selects_dns_discovery(self) -> None:
        env = Env(MESHPROBE_DISCOVERY_HOSTNAME="meshprobe.default.svc")

        discovery = create_discovery(env)

        assert isinstance(discovery, DNSDiscovery)
        assert discovery.hostname == "meshprobe.default.svc"


class TestLoopbackMesh:

    @pytest.mark.asyncio
    async def test_probes_real_servers(self) -> None:
        metrics = PrometheusMetrics()

        readiness_server = ReadinessServer(metrics.registry)
        await readiness_server.start("127.0.0.1", 0)
        port = readiness_server.addresses[0][1]

        udp_server = UDPEchoServer()
        await udp_server.start("127.0.0.1", port)

        peer = Agent(ip="127.0.0.1")
        tester = Tester(
            TesterConfig(
                port=port,
                udp=UDPTestConfig(timeout=500, packets=3),
                tcp=TCPTestConfig(timeout=1000),
            ),
            discovery=StaticDiscovery([peer.ip]),
            metrics=metrics,
            me=Agent(ip="127.0.0.2"),
            resolver=MockResolver(),
        )

        try:
            udp_results = await tester.run_udp_tests([peer])
            tcp_results = await tester.run_tcp_tests([peer])

        finally:
            await tester.close()
            await readiness_server.close()
            udp_server.close()

        assert [result.result for result in udp_results] == ["pass"]
        assert udp_results[0].timings.success == 3
        assert [result.result for result in tcp_results] == ["pass"]
        assert tcp_results[0].timings.total > 0.0

        labels = {
            "source": "127.0.0.2",
            "source_zone": "",
            "destination": "127.0.0.1",
            "destination_zone": "",
        }
        assert metrics.registry.get_sample_value("meshprobe_udp_test_result", labels) == 1
        assert metrics.registry.get_sample_value("meshprobe_tcp_test_result", labels) == 1


class TestRunAgent:

    @pytest.mark.asyncio
    async def test_failed_start_releases_sockets(self) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen()
            port = blocker.getsockname()[1]

            env = Env(
                MESHPROBE_HOST="127.0.0.1",
                MESHPROBE_PORT=port,
                MESHPROBE_NODE_IP="127.0.0.1",
                MESHPROBE_LOG_LEVEL="critical",
            )

            with pytest.raises(OSError):
                await run_agent(env)

        await asyncio.sleep(0)

        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as udp_socket:
            udp_socket.bind(("127.0.0.1", port))
