import asyncio

from .protocol import EchoProtocol


class UDPEchoServer:
    """Echoes every datagram back to its sender."""

    def __init__(self):
        self._transport: asyncio.DatagramTransport | None = None
        self._protocol: EchoProtocol | None = None

    @property
    def address(self) -> tuple[str, int] | None:
        if self._transport is None:
            return None

        return self._transport.get_extra_info("sockname")[:2]

    async def start(self, host: str, port: int):
        loop = asyncio.get_running_loop()
        self._transport, self._protocol = await loop.create_datagram_endpoint(
            lambda: EchoProtocol(mode='server'),
            local_addr=(host, port),
        )

    def close(self):
        if self._transport is not None:
            self._transport.close()
            self._transport = None
            self._protocol = None
