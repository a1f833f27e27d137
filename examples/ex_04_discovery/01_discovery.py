"""Discovery: register every concrete class found under a package.

The ``shop`` package next to this file is walked recursively. Abstract
classes are skipped, concrete ones are registered in path order.
"""

from __future__ import annotations

from servicewire import Container


def main() -> None:
    container = Container("shop")

    print(f"services={len(container.service_names())}")  # => services=3

    checkout = container.get("shop.checkout.Checkout")
    print(f"methods={list(checkout.methods)}")  # => methods=['shop.payments.card.CardPayment', 'shop.payments.wallet.WalletPayment']
    print(f"paid={checkout.pay(10)}")  # => paid=['card:10', 'wallet:10']


if __name__ == "__main__":
    main()
