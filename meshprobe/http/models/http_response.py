import msgspec

from .timings import TCPTimings


class HTTPResponse(msgspec.Struct, kw_only=True):
    url: str
    status: int
    timings: TCPTimings
