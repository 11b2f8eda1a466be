import msgspec


class UDPPingResult(msgspec.Struct, kw_only=True):
    """Outcome of one UDP echo ping run. Round trip values are milliseconds."""

    packets: int
    success: int
    loss: int
    min: float = 0.0
    max: float = 0.0
    average: float = 0.0
    variance: float = 0.0
