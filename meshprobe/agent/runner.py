import asyncio
import signal

from meshprobe.discovery import (
    AsyncDNSResolver,
    DNSDiscovery,
    Discovery,
    StaticDiscovery,
)
from meshprobe.env import Env, load_env
from meshprobe.http import HTTPClient, ReadinessServer
from meshprobe.logging import Logger, LoggingConfig
from meshprobe.metrics import PrometheusMetrics
from meshprobe.tester import Tester
from meshprobe.udp import UDPEchoServer

from .logging_models import AgentInfo


LOGGER_NAMES = ("agent", "tester", "scheduler")


def create_discovery(env: Env) -> Discovery:
    if env.MESHPROBE_DISCOVERY_HOSTNAME:
        return DNSDiscovery(
            env.MESHPROBE_DISCOVERY_HOSTNAME,
            resolver=AsyncDNSResolver(),
            exclude=[env.MESHPROBE_NODE_IP],
        )

    return StaticDiscovery(
        env.static_peers,
        exclude=[env.MESHPROBE_NODE_IP],
    )


def configure_logging(env: Env) -> Logger:
    LoggingConfig().update(
        log_level=env.MESHPROBE_LOG_LEVEL,
        log_output=env.MESHPROBE_LOG_OUTPUT,
    )

    logger = Logger()
    if env.MESHPROBE_LOG_PATH:
        for name in LOGGER_NAMES:
            logger.configure(
                name=name,
                path=env.MESHPROBE_LOG_PATH,
            )

    return logger


class MeshProbeAgent:
    """Echo server, readiness server and tester for one node."""

    def __init__(self, env: Env, logger: Logger | None = None):
        self.env = env
        self._logger = logger or configure_logging(env)

        self.metrics = PrometheusMetrics()
        self.udp_server = UDPEchoServer()
        self.readiness_server = ReadinessServer(self.metrics.registry)
        self.http_client = HTTPClient()
        self.discovery = create_discovery(env)

        self.tester = Tester(
            env.to_tester_config(),
            discovery=self.discovery,
            metrics=self.metrics,
            me=env.get_local_agent(),
            http_client=self.http_client,
            logger=self._logger,
        )

        self._shutdown = asyncio.Event()

    async def start(self):
        host = self.env.MESHPROBE_HOST
        port = self.env.MESHPROBE_PORT

        await self.udp_server.start(host, port)
        await self.readiness_server.start(host, port)
        await self.tester.start()

        await self._logger.log(
            AgentInfo(
                message=f"agent listening on {host}:{port}",
                node_ip=self.env.MESHPROBE_NODE_IP,
                port=port,
            ),
            name="agent",
        )

    def shutdown(self):
        self._shutdown.set()

    async def wait(self):
        await self._shutdown.wait()

    async def close(self):
        self.readiness_server.set_ready(False)

        await self.tester.stop()
        await self.tester.close()
        await self.http_client.close()
        await self.readiness_server.close()
        self.udp_server.close()
        self.discovery.close()

        await self._logger.log(
            AgentInfo(
                message="agent stopped",
                node_ip=self.env.MESHPROBE_NODE_IP,
                port=self.env.MESHPROBE_PORT,
            ),
            name="agent",
        )

        await self._logger.close()


async def run_agent(env: Env | None = None):
    if env is None:
        env = load_env(Env)

    agent = MeshProbeAgent(env)
    loop = asyncio.get_running_loop()

    signals = (signal.SIGINT, signal.SIGTERM)
    for signum in signals:
        loop.add_signal_handler(signum, agent.shutdown)

    try:
        await agent.start()
        await agent.wait()

    finally:
        for signum in signals:
            loop.remove_signal_handler(signum)

        await agent.close()


def main():
    asyncio.run(run_agent())
