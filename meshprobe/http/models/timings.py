import msgspec


class TCPTimings(msgspec.Struct, kw_only=True):
    """Per-phase timing of one readiness request, in milliseconds."""

    dns: float = 0.0
    connect: float = 0.0
    first_byte: float = 0.0
    download: float = 0.0
    total: float = 0.0
