from __future__ import annotations

from enum import Enum

from servicewire import Implementors, collects
from wired_app.capabilities import LoggerIface
from wired_app.deep.nested.leaves.clock import Clock


class Mode(Enum):
    DEV = "dev"
    PROD = "prod"


class App:
    def __init__(self, loggers: Implementors[LoggerIface], clock: Clock, name: str = "app") -> None:
        self.loggers = loggers
        self.clock = clock
        self.name = name


class AttributedApp:
    @collects("loggers", LoggerIface)
    def __init__(self, loggers: dict[str, LoggerIface]) -> None:
        self.loggers = loggers
