import msgspec


class Agent(msgspec.Struct, frozen=True, kw_only=True):
    """A mesh participant, identified by its address."""

    ip: str
    name: str | None = None
    zone: str | None = None
