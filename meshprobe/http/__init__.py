from .client import HTTPClient as HTTPClient
from .server import ReadinessServer as ReadinessServer
from .models import (
    HTTPResponse as HTTPResponse,
    TCPTimings as TCPTimings,
)
