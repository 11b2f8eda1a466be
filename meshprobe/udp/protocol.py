import asyncio
from typing import Callable, Literal, Tuple


class EchoProtocol(asyncio.DatagramProtocol):
    def __init__(
        self,
        on_datagram: Callable[[bytes, Tuple[str, int]], None] | None = None,
        mode: Literal['client', 'server'] = 'client',
    ):
        super().__init__()
        self.transport: asyncio.DatagramTransport | None = None
        self.mode: Literal['client', 'server'] = mode
        self._on_datagram = on_datagram
        self.loop = asyncio.get_running_loop()
        self.on_con_lost = self.loop.create_future()

    def connection_made(self, transport: asyncio.DatagramTransport):
        self.transport = transport

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        if not data:
            return

        if self.mode == 'server':
            self.transport.sendto(data, addr)

        elif self._on_datagram is not None:
            self._on_datagram(data, addr)

    def error_received(self, exc: Exception) -> None:
        # ICMP errors (port unreachable and friends) surface here for
        # connected sockets. The affected packets simply never get an echo.
        pass

    def connection_lost(self, exc: Exception | None) -> None:
        if not self.on_con_lost.done():
            self.on_con_lost.set_result(True)
