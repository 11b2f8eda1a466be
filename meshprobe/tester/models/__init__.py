from .loop_status import LoopStatus as LoopStatus
from .test_result import (
    DNSTestResult as DNSTestResult,
    TCPTestResult as TCPTestResult,
    TestOutcome as TestOutcome,
    UDPTestResult as UDPTestResult,
)
