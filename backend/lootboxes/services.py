# lootboxes/services.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from engine.probabilities import pick_lootbox_item
from engine.rng import get_rng
from portfolio.models import Stock
from portfolio.services import grant_shares
from wallets.exceptions import AlreadyOpened, NotFound, NotOwned
from wallets.models import GameHistory
from wallets.services import charge, record_grant
from .models import LootBox, UserLootBox

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Redemption:
    instance_id: uuid.UUID
    lootbox: str
    stock: Stock
    quantity: int
    holding_quantity: int
    history_id: int


# =====================================================
# CATALOG / OWNERSHIP
# =====================================================

def catalog():
    return LootBox.objects.filter(is_active=True).prefetch_related("items__stock").order_by("price", "name")


def owned_boxes(user_id):
    return (
        UserLootBox.objects.filter(user_id=user_id, opened_at__isnull=True)
        .select_related("lootbox")
        .order_by("purchased_at")
    )


# =====================================================
# PURCHASE
# =====================================================

@transaction.atomic
def purchase_lootbox(user_id, lootbox_id) -> UserLootBox:
    """Charge the box price as a settled full loss and issue one sealed instance."""
    try:
        lootbox = LootBox.objects.get(pk=lootbox_id, is_active=True)
    except LootBox.DoesNotExist:
        raise NotFound("Lootbox not found")

    instance_id = uuid.uuid4()
    charge(
        user_id,
        GameHistory.LOOTBOX_PURCHASE,
        lootbox.price,
        reference=f"lootbox:{instance_id}:purchase",
        meta={"lootbox_id": lootbox.id, "lootbox": lootbox.name, "instance_id": str(instance_id)},
    )
    instance = UserLootBox.objects.create(id=instance_id, user_id=user_id, lootbox=lootbox)

    logger.info(f"User {user_id} bought {lootbox.name} for {lootbox.price} (instance {instance_id})")
    return instance


# =====================================================
# REDEEM
# =====================================================

def redeem_lootbox(user_id, instance_id, rng=None) -> Redemption:
    """
    RedeemLootbox. Consumes exactly one owned, sealed instance and grants one
    share of the drawn stock. Marking the box opened, the holding increment
    and the history row commit together or not at all.
    """
    rng = rng or get_rng()

    with transaction.atomic():
        instance = (
            UserLootBox.objects.select_for_update()
            .select_related("lootbox")
            .filter(pk=instance_id)
            .first()
        )
        if instance is None:
            raise NotFound("Lootbox not found")
        if instance.user_id != user_id:
            raise NotOwned()
        if instance.is_opened:
            raise AlreadyOpened()

        items = list(instance.lootbox.items.select_related("stock").order_by("id"))
        if not items:
            raise NotFound(f"{instance.lootbox.name} has no contents")

        by_id = {item.id: item for item in items}
        item = by_id[pick_lootbox_item([(i.id, i.weight) for i in items], rng)]

        opened = UserLootBox.objects.filter(pk=instance.pk, opened_at__isnull=True).update(
            opened_at=timezone.now(),
            granted_stock=item.stock,
        )
        if opened != 1:
            raise AlreadyOpened()

        holding = grant_shares(user_id, item.stock, 1)
        history = record_grant(
            user_id,
            GameHistory.LOOTBOX_OPEN,
            reference=f"lootbox:{instance.pk}:open",
            meta={
                "lootbox_id": instance.lootbox_id,
                "lootbox": instance.lootbox.name,
                "instance_id": str(instance.pk),
                "stock": item.stock.symbol,
                "quantity": 1,
            },
        )

    logger.info(f"User {user_id} opened {instance.lootbox.name} ({instance.pk}) and got 1 {item.stock.symbol}")

    return Redemption(
        instance_id=instance.pk,
        lootbox=instance.lootbox.name,
        stock=item.stock,
        quantity=1,
        holding_quantity=holding.quantity,
        history_id=history.id,
    )
