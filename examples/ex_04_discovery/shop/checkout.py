from servicewire import Implementors

from shop.payments.base import PaymentMethod


class Checkout:
    def __init__(self, methods: Implementors[PaymentMethod]) -> None:
        self.methods = methods

    def pay(self, amount: int) -> list[str]:
        return [method.charge(amount) for method in self.methods.values()]
