"""
Cycle Scheduler - four independent probe loops.

Runs the membership refresh loop alongside the UDP, TCP and DNS probe
loops. Probe loops sleep their configured interval plus a random jitter
between cycles so identically configured nodes do not probe in lockstep.
The loops share nothing but the latest membership snapshot, an immutable
tuple that the membership loop swaps out whole.
"""

import asyncio
import random
from typing import Awaitable, Callable, Dict

from meshprobe.discovery.discovery import Discovery
from meshprobe.discovery.models import Agent
from meshprobe.env import TesterConfig
from meshprobe.logging import Logger
from meshprobe.metrics.sink import MetricsSink

from .logging_models import SchedulerDebug, SchedulerError
from .models import LoopStatus


MEMBERSHIP_INTERVAL_MS = 5000
JITTER_MIN_MS = 100
JITTER_MAX_MS = 550

LOOP_NAMES = ("membership", "udp", "tcp", "dns")

Cycle = Callable[[tuple[Agent, ...]], Awaitable[object]]


class CycleScheduler:
    def __init__(
        self,
        config: TesterConfig,
        discovery: Discovery,
        metrics: MetricsSink,
        run_udp: Cycle,
        run_tcp: Cycle,
        run_dns: Callable[[], Awaitable[object]],
        logger: Logger,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
    ):
        self._config = config
        self._discovery = discovery
        self._metrics = metrics
        self._run_udp = run_udp
        self._run_tcp = run_tcp
        self._run_dns = run_dns
        self._logger = logger
        self._sleep = sleep
        self._rng = rng or random.Random()

        self._agents: tuple[Agent, ...] = ()
        self._running = False
        self._status: Dict[str, LoopStatus] = {
            name: LoopStatus.STOPPED for name in LOOP_NAMES
        }
        self._tasks: Dict[str, asyncio.Task] = {}
        self._start_lock = asyncio.Lock()

    @property
    def agents(self) -> tuple[Agent, ...]:
        return self._agents

    @property
    def running(self) -> bool:
        return self._running

    @property
    def tasks(self) -> Dict[str, asyncio.Task]:
        return dict(self._tasks)

    def status(self, loop: str) -> LoopStatus:
        return self._status[loop]

    def jitter(self) -> int:
        """Milliseconds of random delay, uniform over [100, 550)."""
        return self._rng.randrange(JITTER_MIN_MS, JITTER_MAX_MS)

    async def refresh_agents(self) -> tuple[Agent, ...]:
        try:
            agents = await self._discovery.agents()

        except Exception as err:
            await self._log_error("membership", f"membership refresh failed - {err}")
            return self._agents

        self._agents = tuple(agents)
        return self._agents

    async def start(self):
        """
        Fetch the first snapshot and launch every loop without awaiting them.

        Loops left over from a previous run are awaited first. They exit at
        the top of their next iteration, so at most one loop per name is
        ever alive.
        """
        async with self._start_lock:
            if self._running:
                return

            await self.join()

            self._running = True
            await self.refresh_agents()

            loops = {
                "membership": self._membership_loop,
                "udp": self._udp_loop,
                "tcp": self._tcp_loop,
                "dns": self._dns_loop,
            }

            for name, loop in loops.items():
                self._status[name] = LoopStatus.RUNNING
                self._tasks[name] = asyncio.create_task(
                    self._run_loop(name, loop),
                    name=f"meshprobe-{name}-loop",
                )

    def stop(self):
        """
        Ask every loop to exit at the top of its next iteration.

        In-flight cycles are never interrupted.
        """
        self._running = False

    async def join(self):
        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)

        self._tasks.clear()

    async def cancel(self):
        self._running = False

        for task in self._tasks.values():
            if not task.done():
                task.cancel()

        await self.join()

    async def _run_loop(self, name: str, loop: Callable[[], Awaitable[None]]):
        try:
            await loop()

        finally:
            self._status[name] = LoopStatus.STOPPED
            await self._logger.log(
                SchedulerDebug(
                    message="loop stopped",
                    loop=name,
                ),
                name="scheduler",
            )

    async def _membership_loop(self):
        while self._running:
            await self.refresh_agents()
            await self._sleep(MEMBERSHIP_INTERVAL_MS / 1000)

    async def _udp_loop(self):
        while self._running:
            await self._reset("udp", self._metrics.reset_udp_test_results)
            await self._cycle("udp", lambda: self._run_udp(self._agents))
            await self._sleep(
                (self._config.udp.interval + self.jitter()) / 1000
            )

    async def _tcp_loop(self):
        while self._running:
            await self._reset("tcp", self._metrics.reset_tcp_test_results)
            await self._cycle("tcp", lambda: self._run_tcp(self._agents))
            await self._sleep(
                (self._config.tcp.interval + self.jitter()) / 1000
            )

    async def _dns_loop(self):
        while self._running:
            await self._cycle("dns", self._run_dns)
            await self._sleep(
                (self._config.dns.interval + self.jitter()) / 1000
            )

    async def _reset(self, name: str, reset: Callable[[], None]):
        try:
            reset()

        except Exception as err:
            await self._log_error(name, f"{name} metrics reset failed - {err}")

    async def _cycle(self, name: str, run: Callable[[], Awaitable[object]]):
        try:
            await run()

        except Exception as err:
            await self._log_error(name, f"{name} cycle failed - {err}")

    async def _log_error(self, name: str, message: str):
        await self._logger.log(
            SchedulerError(
                message=message,
                loop=name,
            ),
            name="scheduler",
        )
