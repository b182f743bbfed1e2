# daily_draw/models.py
from django.conf import settings
from django.db import models


class DailyDraw(models.Model):
    """
    One pot per calendar day. OPEN accepts entries; CLOSED is terminal and
    is only reached in the same transaction that pays the winner.
    """

    STATUS_OPEN = "OPEN"
    STATUS_CLOSED = "CLOSED"
    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_CLOSED, "Closed"),
    ]

    date_key = models.DateField(unique=True)
    status = models.CharField(max_length=8, choices=STATUS_CHOICES, default=STATUS_OPEN, db_index=True)
    winner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="daily_draw_wins",
    )
    payout = models.PositiveIntegerField(default=0)
    participants = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    closed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-date_key"]

    @property
    def is_closed(self):
        return self.status == self.STATUS_CLOSED

    def __str__(self):
        return f"Draw {self.date_key} ({self.status})"


class DailyDrawEntry(models.Model):
    draw = models.ForeignKey(DailyDraw, on_delete=models.CASCADE, related_name="entries")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="daily_draw_entries"
    )
    # Repeat entries on the same day add to this count
    tokens = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [("draw", "user")]

    def __str__(self):
        return f"{self.user_id} x{self.tokens} in {self.draw_id}"
