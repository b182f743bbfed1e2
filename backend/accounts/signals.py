# accounts/signals.py
import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from wallets.models import Wallet

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_wallet(sender, instance, created, **kwargs):
    """
    Every user gets exactly one wallet, funded with the configured opening
    balances. The opening amounts are kept for ledger reconciliation.
    """
    if not created:
        return

    wallet, made = Wallet.objects.get_or_create(
        user=instance,
        defaults={
            "balance": settings.STARTING_BALANCE,
            "opening_balance": settings.STARTING_BALANCE,
            "token_balance": settings.STARTING_TOKENS,
            "opening_tokens": settings.STARTING_TOKENS,
        },
    )
    if made:
        logger.info(f"Opened wallet for user {instance.pk} with {wallet.balance} cash / {wallet.token_balance} tokens")
