from meshprobe.logging.models import Entry, LogLevel


class AgentInfo(Entry, kw_only=True):
    node_ip: str
    port: int
    level: LogLevel = LogLevel.INFO


class AgentError(Entry, kw_only=True):
    node_ip: str
    port: int
    level: LogLevel = LogLevel.ERROR
