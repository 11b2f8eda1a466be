from __future__ import annotations
from pydantic import BaseModel, StrictStr, StrictInt
from typing import Callable, Dict, Literal, Union

from meshprobe.discovery.models import Agent

from .tester_config import (
    DNSTestConfig,
    TCPTestConfig,
    TesterConfig,
    UDPTestConfig,
)

PrimaryType = Union[str, int, float, bytes, bool]


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Env(BaseModel):
    MESHPROBE_HOST: StrictStr = "0.0.0.0"
    MESHPROBE_PORT: StrictInt = 8080
    MESHPROBE_NODE_IP: StrictStr = "127.0.0.1"
    MESHPROBE_NODE_NAME: StrictStr | None = None
    MESHPROBE_NODE_ZONE: StrictStr | None = None

    # Probe settings, milliseconds
    MESHPROBE_UDP_INTERVAL: StrictInt = 5000
    MESHPROBE_UDP_TIMEOUT: StrictInt = 250
    MESHPROBE_UDP_PACKETS: StrictInt = 10
    MESHPROBE_TCP_INTERVAL: StrictInt = 5000
    MESHPROBE_TCP_TIMEOUT: StrictInt = 1000
    MESHPROBE_DNS_INTERVAL: StrictInt = 5000
    MESHPROBE_DNS_HOSTS: StrictStr = ""

    # Discovery
    MESHPROBE_DISCOVERY_HOSTNAME: StrictStr | None = None
    MESHPROBE_STATIC_PEERS: StrictStr = ""

    MESHPROBE_LOG_LEVEL: Literal[
        "trace", "debug", "info", "warn", "error", "critical", "fatal"
    ] = "info"
    MESHPROBE_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    MESHPROBE_LOG_PATH: StrictStr | None = None

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "MESHPROBE_HOST": str,
            "MESHPROBE_PORT": int,
            "MESHPROBE_NODE_IP": str,
            "MESHPROBE_NODE_NAME": str,
            "MESHPROBE_NODE_ZONE": str,
            "MESHPROBE_UDP_INTERVAL": int,
            "MESHPROBE_UDP_TIMEOUT": int,
            "MESHPROBE_UDP_PACKETS": int,
            "MESHPROBE_TCP_INTERVAL": int,
            "MESHPROBE_TCP_TIMEOUT": int,
            "MESHPROBE_DNS_INTERVAL": int,
            "MESHPROBE_DNS_HOSTS": str,
            "MESHPROBE_DISCOVERY_HOSTNAME": str,
            "MESHPROBE_STATIC_PEERS": str,
            "MESHPROBE_LOG_LEVEL": str,
            "MESHPROBE_LOG_OUTPUT": str,
            "MESHPROBE_LOG_PATH": str,
        }

    @property
    def dns_hosts(self) -> list[str]:
        return _split_list(self.MESHPROBE_DNS_HOSTS)

    @property
    def static_peers(self) -> list[str]:
        return _split_list(self.MESHPROBE_STATIC_PEERS)

    def get_local_agent(self) -> Agent:
        return Agent(
            ip=self.MESHPROBE_NODE_IP,
            name=self.MESHPROBE_NODE_NAME,
            zone=self.MESHPROBE_NODE_ZONE,
        )

    def to_tester_config(self) -> TesterConfig:
        return TesterConfig(
            port=self.MESHPROBE_PORT,
            udp=UDPTestConfig(
                interval=self.MESHPROBE_UDP_INTERVAL,
                timeout=self.MESHPROBE_UDP_TIMEOUT,
                packets=self.MESHPROBE_UDP_PACKETS,
            ),
            tcp=TCPTestConfig(
                interval=self.MESHPROBE_TCP_INTERVAL,
                timeout=self.MESHPROBE_TCP_TIMEOUT,
            ),
            dns=DNSTestConfig(
                interval=self.MESHPROBE_DNS_INTERVAL,
                hosts=self.dns_hosts,
            ),
        )
