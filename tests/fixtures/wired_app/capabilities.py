from abc import ABC, abstractmethod
from typing import Protocol


class LoggerIface(ABC):
    @abstractmethod
    def log(self, message: str) -> str: ...


class Formatter(Protocol):
    def format(self, message: str) -> str: ...
