from typing import Iterable

from meshprobe.discovery.models import Agent


class StaticDiscovery:
    """Membership from a fixed address list."""

    def __init__(
        self,
        addresses: Iterable[str],
        exclude: Iterable[str] | None = None,
    ):
        excluded = set(exclude or [])
        self._agents: list[Agent] = []

        seen: set[str] = set()
        for address in addresses:
            if address in excluded or address in seen:
                continue

            seen.add(address)
            self._agents.append(Agent(ip=address))

    async def agents(self) -> list[Agent]:
        return list(self._agents)

    def close(self) -> None:
        pass
