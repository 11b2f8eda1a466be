from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
)


class UDPTestConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    interval: StrictInt = Field(default=5000, gt=0)
    timeout: StrictInt = Field(default=250, gt=0)
    packets: StrictInt = Field(default=10, gt=0)


class TCPTestConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    interval: StrictInt = Field(default=5000, gt=0)
    timeout: StrictInt = Field(default=1000, gt=0)


class DNSTestConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    interval: StrictInt = Field(default=5000, gt=0)
    hosts: list[StrictStr] = []


class TesterConfig(BaseModel):
    """Read-only probe settings. Intervals and timeouts are milliseconds."""

    model_config = ConfigDict(frozen=True)

    port: StrictInt = Field(default=8080, gt=0, lt=65536)
    udp: UDPTestConfig = UDPTestConfig()
    tcp: TCPTestConfig = TCPTestConfig()
    dns: DNSTestConfig = DNSTestConfig()
