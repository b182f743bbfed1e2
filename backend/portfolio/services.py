# portfolio/services.py
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .models import Holding


@transaction.atomic
def grant_shares(user_id, stock, quantity: int = 1) -> Holding:
    """Upsert-increment a holding. Joins the caller's atomic block."""
    holding, created = Holding.objects.select_for_update().get_or_create(
        user_id=user_id,
        stock=stock,
        defaults={"quantity": quantity},
    )
    if not created:
        Holding.objects.filter(pk=holding.pk).update(
            quantity=F("quantity") + quantity,
            updated_at=timezone.now(),
        )
        holding.refresh_from_db()
    return holding
