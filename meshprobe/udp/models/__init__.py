from .echo_packet import EchoPacket as EchoPacket
from .ping_result import UDPPingResult as UDPPingResult
