"""DNS resolution components."""

from meshprobe.discovery.dns.resolver import (
    AsyncDNSResolver as AsyncDNSResolver,
)
from meshprobe.errors import DNSError as DNSError
