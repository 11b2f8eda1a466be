import asyncio
import secrets
import statistics
import time
from typing import Dict, Tuple

import msgspec

from meshprobe.errors import UDPClientDestroyedError

from .models import EchoPacket, UDPPingResult
from .protocol import EchoProtocol


class UDPClient:
    """
    Stateful UDP echo client bound to exactly one peer.

    Holds a connected datagram socket for its whole lifetime. Owners must
    call destroy() once the peer goes away; the socket is not released
    otherwise.
    """

    def __init__(self, address: str, port: int):
        self.address = address
        self.port = port
        self.client_id = secrets.randbits(63)

        self._transport: asyncio.DatagramTransport | None = None
        self._protocol: EchoProtocol | None = None
        self._pending: Dict[int, asyncio.Future[float]] = {}
        self._sequence = 0
        self._ping_lock = asyncio.Lock()
        self._connect_lock = asyncio.Lock()
        self._encoder = msgspec.msgpack.Encoder()
        self._decoder = msgspec.msgpack.Decoder(EchoPacket)
        self._destroyed = False

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    async def _connect(self):
        async with self._connect_lock:
            if self._transport is not None:
                return

            loop = asyncio.get_running_loop()
            transport, protocol = await loop.create_datagram_endpoint(
                lambda: EchoProtocol(on_datagram=self._receive),
                remote_addr=(self.address, self.port),
            )

            if self._destroyed:
                transport.close()
                raise UDPClientDestroyedError(self.address, self.port)

            self._transport = transport
            self._protocol = protocol

    async def ping(self, timeout: int, packets: int) -> UDPPingResult:
        """
        Send `packets` echo requests one after another.

        Args:
            timeout: Milliseconds to wait for each echo.
            packets: Number of echo requests to send.

        Raises:
            UDPClientDestroyedError: If the client was destroyed.
        """
        if self._destroyed:
            raise UDPClientDestroyedError(self.address, self.port)

        await self._connect()

        async with self._ping_lock:
            round_trips: list[float] = []

            for _ in range(packets):
                if self._destroyed:
                    raise UDPClientDestroyedError(self.address, self.port)

                round_trip = await self._send_one(timeout / 1000)
                if round_trip is not None:
                    round_trips.append(round_trip)

        return self._to_result(packets, round_trips)

    async def _send_one(self, timeout_seconds: float) -> float | None:
        loop = asyncio.get_running_loop()

        self._sequence += 1
        sequence = self._sequence

        waiter: asyncio.Future[float] = loop.create_future()
        self._pending[sequence] = waiter

        sent_at = time.perf_counter()

        try:
            self._transport.sendto(
                self._encoder.encode(
                    EchoPacket(
                        client_id=self.client_id,
                        sequence=sequence,
                        sent_at=sent_at,
                    )
                )
            )

            received_at = await asyncio.wait_for(waiter, timeout=timeout_seconds)
            return (received_at - sent_at) * 1000

        except (asyncio.TimeoutError, OSError):
            return None

        finally:
            self._pending.pop(sequence, None)

    def _receive(self, data: bytes, addr: Tuple[str, int]):
        received_at = time.perf_counter()

        try:
            packet = self._decoder.decode(data)

        except msgspec.DecodeError:
            return

        if packet.client_id != self.client_id:
            return

        waiter = self._pending.get(packet.sequence)
        if waiter is not None and not waiter.done():
            waiter.set_result(received_at)

    def _to_result(self, packets: int, round_trips: list[float]) -> UDPPingResult:
        if len(round_trips) == 0:
            return UDPPingResult(
                packets=packets,
                success=0,
                loss=packets,
            )

        return UDPPingResult(
            packets=packets,
            success=len(round_trips),
            loss=packets - len(round_trips),
            min=min(round_trips),
            max=max(round_trips),
            average=statistics.fmean(round_trips),
            variance=statistics.pvariance(round_trips),
        )

    def destroy(self):
        if self._destroyed:
            return

        self._destroyed = True

        for waiter in self._pending.values():
            if not waiter.done():
                waiter.set_exception(
                    UDPClientDestroyedError(self.address, self.port)
                )

        self._pending.clear()

        if self._transport is not None:
            self._transport.close()
            self._transport = None
            self._protocol = None
