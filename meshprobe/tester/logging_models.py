"""
Logging models for the tester.

Probe entries carry the source and destination of the probe (destination
is a peer address or a DNS host), pool entries carry the peer address,
scheduler entries carry the loop name.
"""

from meshprobe.logging.models import Entry, LogLevel


class TesterDebug(Entry, kw_only=True):
    source: str
    destination: str
    level: LogLevel = LogLevel.DEBUG


class TesterInfo(Entry, kw_only=True):
    source: str
    destination: str
    level: LogLevel = LogLevel.INFO


class TesterWarning(Entry, kw_only=True):
    source: str
    destination: str
    level: LogLevel = LogLevel.WARN


class TesterError(Entry, kw_only=True):
    source: str
    destination: str
    level: LogLevel = LogLevel.ERROR


class PoolInfo(Entry, kw_only=True):
    address: str
    port: int
    level: LogLevel = LogLevel.INFO


class SchedulerDebug(Entry, kw_only=True):
    loop: str
    level: LogLevel = LogLevel.DEBUG


class SchedulerError(Entry, kw_only=True):
    loop: str
    level: LogLevel = LogLevel.ERROR
