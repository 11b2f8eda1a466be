from .env import Env as Env
from .load_env import load_env as load_env
from .tester_config import (
    DNSTestConfig as DNSTestConfig,
    TCPTestConfig as TCPTestConfig,
    TesterConfig as TesterConfig,
    UDPTestConfig as UDPTestConfig,
)
