from enum import Enum


class LoopStatus(Enum):
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"
