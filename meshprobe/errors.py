class MeshProbeError(Exception):
    """Base class for errors raised by meshprobe."""


class ClientPoolInconsistencyError(MeshProbeError):
    """Raised when a UDP probe runs for a peer the pool has no client for.

    Reconciliation always runs before the UDP fan-out of the same cycle, so
    reaching this means the cycle was scheduled out of order.
    """

    def __init__(self, address: str):
        self.address = address
        super().__init__(
            f"No UDP test client registered for peer {address} - reconcile must run before probing"
        )


class UDPClientDestroyedError(MeshProbeError):
    def __init__(self, address: str, port: int):
        self.address = address
        self.port = port
        super().__init__(f"UDP test client for {address}:{port} has been destroyed")


class HTTPTransportError(MeshProbeError):
    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Request to '{url}' failed: {message}")


class DNSError(MeshProbeError):
    """Raised when DNS resolution fails."""

    def __init__(self, hostname: str, message: str):
        self.hostname = hostname
        super().__init__(f"DNS resolution failed for '{hostname}': {message}")
