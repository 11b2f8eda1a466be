import time
from dataclasses import dataclass

from .timings import TCPTimings


@dataclass(slots=True)
class RequestTimer:
    """Collects perf_counter marks from aiohttp trace callbacks."""

    request_start: float | None = None
    dns_start: float | None = None
    dns_end: float | None = None
    connect_start: float | None = None
    connect_end: float | None = None
    response_start: float | None = None
    response_end: float | None = None

    def mark(self, phase: str):
        setattr(self, phase, time.perf_counter())

    def to_timings(self) -> TCPTimings:
        if self.response_end is None:
            self.mark("response_end")

        request_start = self.request_start or self.response_end
        response_start = self.response_start or self.response_end

        dns = 0.0
        if self.dns_start is not None and self.dns_end is not None:
            dns = self.dns_end - self.dns_start

        connect = 0.0
        request_sent = request_start
        if self.connect_start is not None and self.connect_end is not None:
            connect = max(self.connect_end - self.connect_start - dns, 0.0)
            request_sent = self.connect_end

        return TCPTimings(
            dns=dns * 1000,
            connect=connect * 1000,
            first_byte=max(response_start - request_sent, 0.0) * 1000,
            download=max(self.response_end - response_start, 0.0) * 1000,
            total=(self.response_end - request_start) * 1000,
        )
