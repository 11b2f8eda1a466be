from typing import Protocol

from meshprobe.discovery.models import Agent


class Discovery(Protocol):
    """Supplies the current mesh membership."""

    async def agents(self) -> list[Agent]: ...

    def close(self) -> None: ...
