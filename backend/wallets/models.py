from django.conf import settings
from django.db import models


class Wallet(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="wallet",
    )
    # Cash used for roulette and lootbox purchases
    balance = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    # Tokens used for the daily draw; locked_tokens are escrowed in open draws
    token_balance = models.PositiveIntegerField(default=0)
    locked_tokens = models.PositiveIntegerField(default=0)

    opening_balance = models.DecimalField(max_digits=18, decimal_places=2, default=0)
    opening_tokens = models.PositiveIntegerField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(balance__gte=0),
                name="wallet_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"Wallet({self.user_id})"


class GameHistory(models.Model):
    """
    Append-only ledger. One row per settled wager; never updated or deleted.

    balance == opening_balance + sum(profit) over CASH rows, and
    token_balance + locked_tokens == opening_tokens + sum(profit) over TOKEN rows.
    """

    ROULETTE = "ROULETTE"
    DAILY_DRAW = "DAILY_DRAW"
    LOOTBOX_PURCHASE = "LOOTBOX_PURCHASE"
    LOOTBOX_OPEN = "LOOTBOX_OPEN"
    GAME_CHOICES = [
        (ROULETTE, "Roulette"),
        (DAILY_DRAW, "Daily draw"),
        (LOOTBOX_PURCHASE, "Lootbox purchase"),
        (LOOTBOX_OPEN, "Lootbox open"),
    ]

    WIN = "WIN"
    LOSE = "LOSE"
    OUTCOME_CHOICES = [
        (WIN, "Win"),
        (LOSE, "Lose"),
    ]

    CASH = "CASH"
    TOKEN = "TOKEN"
    CURRENCY_CHOICES = [
        (CASH, "Cash"),
        (TOKEN, "Token"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="game_history"
    )
    game_type = models.CharField(max_length=32, choices=GAME_CHOICES)
    currency = models.CharField(max_length=8, choices=CURRENCY_CHOICES, default=CASH)
    outcome = models.CharField(max_length=4, choices=OUTCOME_CHOICES)
    multiplier = models.DecimalField(max_digits=18, decimal_places=8)
    profit = models.DecimalField(max_digits=18, decimal_places=2)
    bet_amount = models.DecimalField(max_digits=18, decimal_places=2)
    reference = models.CharField(max_length=96, unique=True)
    meta = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="wallets_gam_user_id_6b1f3e_idx"),
            models.Index(fields=["user", "currency"], name="wallets_gam_user_id_a94c52_idx"),
        ]

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise ValueError("GameHistory rows are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("GameHistory rows are immutable")

    def __str__(self):
        return f"{self.game_type} {self.outcome} {self.profit} for {self.user_id}"
