"""Collections: inject every implementor of a capability.

``Implementors[Capability]`` asks for all registered concrete types that
derive from ``Capability``. Several implementors arrive as a mapping keyed by
identifier; a single implementor is injected on its own. ``@collects`` declares
the same request on the constructor instead of the annotation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from servicewire import Container, Implementors, collects


class Notifier(ABC):
    @abstractmethod
    def send(self, message: str) -> str: ...


class EmailNotifier(Notifier):
    def send(self, message: str) -> str:
        return f"email:{message}"


class SmsNotifier(Notifier):
    def send(self, message: str) -> str:
        return f"sms:{message}"


class Alerts:
    def __init__(self, notifiers: Implementors[Notifier]) -> None:
        self.notifiers = notifiers


class Broadcast:
    @collects("channels", Notifier)
    def __init__(self, channels: dict[str, Notifier]) -> None:
        self.channels = channels


def main() -> None:
    container = Container(types=[EmailNotifier, SmsNotifier, Alerts, Broadcast])

    alerts = container.get(Alerts)
    names = [identifier.rsplit(".", 1)[-1] for identifier in alerts.notifiers]
    print(f"notifiers={names}")  # => notifiers=['EmailNotifier', 'SmsNotifier']

    sent = [notifier.send("up") for notifier in alerts.notifiers.values()]
    print(f"sent={sent}")  # => sent=['email:up', 'sms:up']

    broadcast = container.get(Broadcast)
    print(f"same_keys={list(broadcast.channels) == list(alerts.notifiers)}")  # => same_keys=True

    single = Container(types=[EmailNotifier, Alerts]).get(Alerts)
    print(f"single={type(single.notifiers).__name__}")  # => single=EmailNotifier

    empty = Container(types=[Alerts]).get(Alerts)
    print(f"empty={empty.notifiers}")  # => empty={}


if __name__ == "__main__":
    main()
