from .http_response import HTTPResponse as HTTPResponse
from .request_timer import RequestTimer as RequestTimer
from .timings import TCPTimings as TCPTimings
