"""
Mesh membership discovery.

Usage:
    from meshprobe.discovery import DNSDiscovery, StaticDiscovery

    discovery = DNSDiscovery("meshprobe.monitoring.svc.cluster.local")
    agents = await discovery.agents()
"""

from meshprobe.discovery.models import Agent as Agent
from meshprobe.discovery.discovery import Discovery as Discovery
from meshprobe.discovery.static_discovery import (
    StaticDiscovery as StaticDiscovery,
)
from meshprobe.discovery.dns_discovery import DNSDiscovery as DNSDiscovery
from meshprobe.discovery.dns import (
    AsyncDNSResolver as AsyncDNSResolver,
    DNSError as DNSError,
)
