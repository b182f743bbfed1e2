# lootboxes/models.py
import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from portfolio.models import Stock


class LootBox(models.Model):
    name = models.CharField(max_length=64, unique=True)
    price = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class LootBoxItem(models.Model):
    lootbox = models.ForeignKey(LootBox, on_delete=models.CASCADE, related_name="items")
    stock = models.ForeignKey(Stock, on_delete=models.PROTECT, related_name="lootbox_items")
    weight = models.PositiveIntegerField(default=1)

    class Meta:
        unique_together = [("lootbox", "stock")]

    def __str__(self):
        return f"{self.lootbox_id}:{self.stock_id} w={self.weight}"


class UserLootBox(models.Model):
    """One owned, unopened-until-redeemed box. Opening is one-way."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="lootboxes"
    )
    lootbox = models.ForeignKey(LootBox, on_delete=models.PROTECT, related_name="instances")
    purchased_at = models.DateTimeField(auto_now_add=True)
    opened_at = models.DateTimeField(null=True, blank=True)
    granted_stock = models.ForeignKey(
        Stock, null=True, blank=True, on_delete=models.PROTECT, related_name="+"
    )

    class Meta:
        indexes = [
            models.Index(fields=["user", "opened_at"], name="lootboxes_u_user_id_3d9a71_idx"),
        ]

    @property
    def is_opened(self):
        return self.opened_at is not None

    def __str__(self):
        return f"{self.lootbox_id} for {self.user_id} ({'opened' if self.is_opened else 'sealed'})"
