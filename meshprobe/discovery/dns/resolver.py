"""
Async IPv4 resolver backed by aiodns.

Used both by the DNS probe (measuring resolution of configured hosts) and
by DNS-based membership discovery. Results are never cached: every call
issues a fresh query, since the probe measures resolution itself.
"""

import asyncio
from dataclasses import dataclass, field

import aiodns

from meshprobe.errors import DNSError


@dataclass
class AsyncDNSResolver:
    """
    Resolve A records with aiodns.

    Usage:
        resolver = AsyncDNSResolver()
        addresses = await resolver.resolve4("kubernetes.default.svc")
    """

    resolution_timeout_seconds: float = 5.0
    """Timeout for an individual resolution."""

    nameservers: list[str] | None = None
    """Explicit nameservers, the system configuration is used when unset."""

    _aiodns_resolver: aiodns.DNSResolver | None = field(default=None, repr=False)

    def _get_resolver(self) -> aiodns.DNSResolver:
        # aiodns binds to the running loop, so it is created lazily from
        # inside a coroutine rather than in __post_init__.
        if self._aiodns_resolver is None:
            self._aiodns_resolver = aiodns.DNSResolver(
                nameservers=self.nameservers,
                timeout=self.resolution_timeout_seconds,
            )

        return self._aiodns_resolver

    async def resolve4(self, hostname: str) -> list[str]:
        """
        Resolve the IPv4 addresses of a hostname.

        Args:
            hostname: The hostname to resolve

        Returns:
            Unique addresses in the order the resolver returned them,
            possibly empty.

        Raises:
            DNSError: If the query fails or times out
        """
        resolver = self._get_resolver()

        try:
            records = await asyncio.wait_for(
                resolver.query(hostname, "A"),
                timeout=self.resolution_timeout_seconds,
            )

        except asyncio.TimeoutError:
            raise DNSError(
                hostname, f"Resolution timeout ({self.resolution_timeout_seconds}s)"
            )

        except aiodns.error.DNSError as exc:
            raise DNSError(hostname, f"A query failed: {exc}") from exc

        addresses: list[str] = []
        seen: set[str] = set()

        for record in records or []:
            if record.host not in seen:
                seen.add(record.host)
                addresses.append(record.host)

        return addresses

    def close(self) -> None:
        if self._aiodns_resolver is not None:
            self._aiodns_resolver.cancel()
            self._aiodns_resolver = None
