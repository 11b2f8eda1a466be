"""
Client Pool - per-peer UDP test client lifecycle.

Keeps exactly one UDP test client per peer address, in step with the
latest membership snapshot. Clients hold live sockets, so they are
destroyed explicitly when their peer leaves rather than left to the
garbage collector.
"""

import asyncio
from typing import Callable, Dict, Iterable, Protocol

from meshprobe.discovery.models import Agent
from meshprobe.udp.models import UDPPingResult


class TestClient(Protocol):
    async def ping(self, timeout: int, packets: int) -> UDPPingResult: ...

    def destroy(self) -> None: ...


ClientFactory = Callable[[str, int], TestClient]


class ClientPool:
    def __init__(
        self,
        port: int,
        client_factory: ClientFactory,
    ):
        """
        Args:
            port: Peer port every client is bound to.
            client_factory: Builds a client from (address, port).
        """
        self._port = port
        self._client_factory = client_factory
        self._clients: Dict[str, TestClient] = {}
        self._lock = asyncio.Lock()

    @property
    def port(self) -> int:
        return self._port

    def __contains__(self, address: str) -> bool:
        return address in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def addresses(self) -> list[str]:
        return list(self._clients)

    def get(self, address: str) -> TestClient | None:
        return self._clients.get(address)

    async def reconcile(
        self,
        current_peers: Iterable[Agent],
    ) -> tuple[list[str], list[str]]:
        """
        Bring the pool in line with a membership snapshot.

        Creates a client for every peer not yet registered and destroys the
        client of every registered address missing from `current_peers`.
        Calling it again with the same peers is a no-op.

        Returns:
            (created addresses, destroyed addresses)
        """
        current_addresses = {peer.ip for peer in current_peers}

        async with self._lock:
            created: list[str] = []
            destroyed: list[str] = []

            for address in current_addresses:
                if address not in self._clients:
                    self._clients[address] = self._client_factory(address, self._port)
                    created.append(address)

            for address in list(self._clients):
                if address not in current_addresses:
                    client = self._clients.pop(address)
                    client.destroy()
                    destroyed.append(address)

            return created, destroyed

    async def close(self) -> list[str]:
        """Destroy every client. Returns the addresses that were released."""
        async with self._lock:
            destroyed = list(self._clients)

            for client in self._clients.values():
                client.destroy()

            self._clients.clear()

            return destroyed
