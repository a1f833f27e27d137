"""Errors: what fails and how it is reported.

All errors derive from ``ServiceWireError``. Cycles are detected before any
constructor on the cycle runs.
"""

from __future__ import annotations

from servicewire import (
    Container,
    CycleError,
    ServiceNotFoundError,
    ServiceWireError,
    UnresolvableParameterError,
)


class Primary:
    def __init__(self, replica: Replica) -> None:
        self.replica = replica


class Replica:
    def __init__(self, primary: Primary) -> None:
        self.primary = primary


class Server:
    def __init__(self, port: int) -> None:
        self.port = port


def main() -> None:
    container = Container(types=[Primary, Replica, Server])

    try:
        container.get(Primary)
    except CycleError as error:
        print(f"cycle={error}")  # => cycle=Circular dependency detected: __main__.Primary -> __main__.Replica -> __main__.Primary

    try:
        container.get(Server)
    except UnresolvableParameterError as error:
        print(f"parameter={error.parameter}")  # => parameter=port

    try:
        container.get("__main__.Missing")
    except ServiceNotFoundError as error:
        print(f"missing={error.service}")  # => missing=__main__.Missing
        print(f"base={isinstance(error, ServiceWireError)}")  # => base=True


if __name__ == "__main__":
    main()
