from aiohttp import web
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    generate_latest,
)


class ReadinessServer:
    """Serves /readiness for peers' TCP probes and /metrics for scraping."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self._registry = registry
        self._runner: web.AppRunner | None = None
        self._ready = True

        self.app = web.Application()
        self.app.router.add_get("/readiness", self._readiness)
        self.app.router.add_get("/metrics", self._metrics)

    @property
    def addresses(self) -> list:
        if self._runner is None:
            return []

        return self._runner.addresses

    def set_ready(self, ready: bool):
        self._ready = ready

    async def _readiness(self, request: web.Request) -> web.Response:
        if self._ready:
            return web.Response(text="ok")

        return web.Response(status=503, text="not ready")

    async def _metrics(self, request: web.Request) -> web.Response:
        if self._registry is None:
            return web.Response(status=404)

        return web.Response(
            body=generate_latest(self._registry),
            headers={"Content-Type": CONTENT_TYPE_LATEST},
        )

    async def start(self, host: str, port: int):
        self._runner = web.AppRunner(self.app, access_log=None)
        await self._runner.setup()

        site = web.TCPSite(self._runner, host, port)
        await site.start()

    async def close(self):
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
