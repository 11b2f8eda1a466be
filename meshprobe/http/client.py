import asyncio

import aiohttp

from meshprobe.errors import HTTPTransportError

from .models import HTTPResponse, RequestTimer


def _mark(phase: str):
    async def on_event(
        session: aiohttp.ClientSession,
        trace_config_ctx,
        params,
    ):
        timer: RequestTimer | None = trace_config_ctx.trace_request_ctx
        if timer is not None:
            timer.mark(phase)

    return on_event


def create_trace_config() -> aiohttp.TraceConfig:
    trace_config = aiohttp.TraceConfig()
    trace_config.on_request_start.append(_mark("request_start"))
    trace_config.on_dns_resolvehost_start.append(_mark("dns_start"))
    trace_config.on_dns_resolvehost_end.append(_mark("dns_end"))
    trace_config.on_connection_create_start.append(_mark("connect_start"))
    trace_config.on_connection_create_end.append(_mark("connect_end"))
    trace_config.on_request_end.append(_mark("response_start"))

    return trace_config


class HTTPClient:
    """
    aiohttp transport for readiness requests.

    Connections are never reused, so every request measures a full
    connection setup.
    """

    def __init__(self):
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(
                    force_close=True,
                    use_dns_cache=False,
                ),
                trace_configs=[create_trace_config()],
            )

        return self._session

    async def request(self, url: str, timeout: int) -> HTTPResponse:
        """
        GET a url and read its body.

        Args:
            url: Absolute url to request.
            timeout: Total request budget in milliseconds.

        Raises:
            HTTPTransportError: On any transport failure or timeout.
        """
        session = await self._get_session()
        timer = RequestTimer()

        try:
            async with session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=timeout / 1000),
                trace_request_ctx=timer,
            ) as response:
                await response.read()
                timer.mark("response_end")

                return HTTPResponse(
                    url=url,
                    status=response.status,
                    timings=timer.to_timings(),
                )

        except asyncio.TimeoutError as err:
            raise HTTPTransportError(url, f"timed out after {timeout}ms") from err

        except (aiohttp.ClientError, OSError) as err:
            raise HTTPTransportError(url, str(err) or type(err).__name__) from err

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()

        self._session = None
