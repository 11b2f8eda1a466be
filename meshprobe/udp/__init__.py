from .client import UDPClient as UDPClient
from .server import UDPEchoServer as UDPEchoServer
from .models import (
    EchoPacket as EchoPacket,
    UDPPingResult as UDPPingResult,
)
