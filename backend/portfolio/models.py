# portfolio/models.py
from django.conf import settings
from django.db import models


class Stock(models.Model):
    symbol = models.CharField(max_length=12, unique=True)
    name = models.CharField(max_length=120, blank=True)
    price = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.symbol


class Holding(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="holdings"
    )
    stock = models.ForeignKey(Stock, on_delete=models.PROTECT, related_name="holdings")
    quantity = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [("user", "stock")]

    def __str__(self):
        return f"{self.user_id} x{self.quantity} {self.stock_id}"
