"""
Mesh prober core.

Components, leaf first:
- ClientPool: one UDP test client per peer, reconciled against membership
- ProtocolProbes: UDP echo, TCP readiness and DNS resolution probes
- run_all: concurrent fan-out with per-target failure isolation
- CycleScheduler: membership, UDP, TCP and DNS loops with jitter
- Tester: composes the above

Usage:
    from meshprobe.tester import Tester
"""

from .client_pool import ClientPool as ClientPool
from .fanout import run_all as run_all
from .models import (
    DNSTestResult as DNSTestResult,
    LoopStatus as LoopStatus,
    TCPTestResult as TCPTestResult,
    TestOutcome as TestOutcome,
    UDPTestResult as UDPTestResult,
)
from .probes import ProtocolProbes as ProtocolProbes
from .scheduler import CycleScheduler as CycleScheduler
from .tester import Tester as Tester
