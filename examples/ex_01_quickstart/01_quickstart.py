"""Quickstart: wire a service graph from constructor type hints.

Register plain classes, ask for the top-level service, and servicewire builds
every dependency it declares. Each request builds a fresh graph.
"""

from __future__ import annotations

from servicewire import Container


class Database:
    def __init__(self) -> None:
        self.host = "localhost"


class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


class UserService:
    def __init__(self, repository: UserRepository, page_size: int = 20) -> None:
        self.repository = repository
        self.page_size = page_size


def main() -> None:
    container = Container(types=[Database, UserRepository, UserService])
    service = container.get(UserService)

    print(f"db_host={service.repository.database.host}")  # => db_host=localhost
    print(f"page_size={service.page_size}")  # => page_size=20

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database

    again = container.get("__main__.UserService")
    print(f"fresh={again is not service}")  # => fresh=True


if __name__ == "__main__":
    main()
