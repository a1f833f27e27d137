from shop.payments.base import PaymentMethod


class WalletPayment(PaymentMethod):
    def charge(self, amount: int) -> str:
        return f"wallet:{amount}"
