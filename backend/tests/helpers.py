from decimal import Decimal

from django.contrib.auth import get_user_model

from wallets.models import Wallet

User = get_user_model()


class FixedRng:
    """Stands in for random.Random; every draw returns the given value."""

    def __init__(self, value):
        self.value = value

    def randint(self, a, b):
        return self.value

    def randrange(self, stop):
        return self.value


def make_user(username, balance="100.00", tokens=0):
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="pass12345",
    )
    Wallet.objects.filter(user=user).update(
        balance=Decimal(balance),
        opening_balance=Decimal(balance),
        token_balance=tokens,
        opening_tokens=tokens,
    )
    return user


def wallet_of(user):
    return Wallet.objects.get(user=user)
