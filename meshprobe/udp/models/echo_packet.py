import msgspec


class EchoPacket(msgspec.Struct, array_like=True):
    client_id: int
    sequence: int
    sent_at: float
