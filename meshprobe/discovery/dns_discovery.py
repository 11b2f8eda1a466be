"""
DNS-based membership discovery.

Resolves a name whose A records list every mesh participant (for example
a headless service) and treats each address as one peer.
"""

from typing import Iterable

from meshprobe.discovery.dns.resolver import AsyncDNSResolver
from meshprobe.discovery.models import Agent


class DNSDiscovery:
    def __init__(
        self,
        hostname: str,
        resolver: AsyncDNSResolver | None = None,
        exclude: Iterable[str] | None = None,
    ):
        """
        Args:
            hostname: Name resolving to every mesh participant.
            resolver: Resolver to use, a fresh AsyncDNSResolver by default.
            exclude: Addresses never reported as peers (usually our own).
        """
        self._hostname = hostname
        self._resolver = resolver or AsyncDNSResolver()
        self._exclude = set(exclude or [])

    @property
    def hostname(self) -> str:
        return self._hostname

    async def agents(self) -> list[Agent]:
        """
        Resolve the membership name.

        Raises:
            DNSError: If the name cannot be resolved.
        """
        addresses = await self._resolver.resolve4(self._hostname)

        return [
            Agent(ip=address)
            for address in addresses
            if address not in self._exclude
        ]

    def close(self):
        self._resolver.close()
