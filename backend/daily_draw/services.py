# daily_draw/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from engine.probabilities import pick_draw_winner
from engine.rng import get_rng
from wallets.exceptions import AlreadySettled, InvalidWager, NotFound
from wallets.models import GameHistory
from wallets.services import escrow_tokens, settle_escrow
from .models import DailyDraw, DailyDrawEntry

logger = logging.getLogger(__name__)

GROUP_NAME = "daily_draw"


@dataclass(frozen=True)
class Participant:
    user_id: int
    name: str
    tokens: int


@dataclass(frozen=True)
class Pot:
    date_key: date
    status: str
    total_pot: int
    participants: List[Participant] = field(default_factory=list)
    winner_id: Optional[int] = None


@dataclass(frozen=True)
class DrawResult:
    date_key: date
    winner_id: int
    payout: int
    participants: int


# =====================================================
# DAY-KEYS
# =====================================================

def today_key() -> date:
    return timezone.localdate()


def parse_date_key(value) -> date:
    if value is None or value == "":
        return today_key()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidWager("Day-key must be YYYY-MM-DD")


# =====================================================
# BROADCAST
# =====================================================

def _broadcast(event_type: str, data: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    async_to_sync(channel_layer.group_send)(GROUP_NAME, {"type": event_type, "data": data})


def _broadcast_on_commit(event_type: str, data: dict) -> None:
    # A dead channel layer must not fail a committed settlement
    transaction.on_commit(lambda: _broadcast(event_type, data), robust=True)


# =====================================================
# ENTER
# =====================================================

@transaction.atomic
def enter_draw(user_id, tokens: int, date_key: Optional[date] = None) -> DailyDrawEntry:
    """
    Add tokens to the user's entry for the day. Tokens move into wallet
    escrow; a second entry on the same day accumulates onto the first.
    """
    date_key = date_key or today_key()

    DailyDraw.objects.get_or_create(date_key=date_key)
    draw = DailyDraw.objects.select_for_update().get(date_key=date_key)
    if draw.is_closed:
        raise AlreadySettled(f"The draw for {date_key} is closed")

    escrow_tokens(user_id, tokens)

    entry, created = DailyDrawEntry.objects.get_or_create(
        draw=draw,
        user_id=user_id,
        defaults={"tokens": tokens},
    )
    if not created:
        DailyDrawEntry.objects.filter(pk=entry.pk).update(
            tokens=F("tokens") + tokens,
            updated_at=timezone.now(),
        )
        entry.refresh_from_db()

    logger.info(f"User {user_id} entered draw {date_key} with {tokens} tokens (entry now {entry.tokens})")

    pot = get_pot(date_key)
    _broadcast_on_commit("draw.pot", {
        "date": date_key.isoformat(),
        "total_pot": pot.total_pot,
        "participants": len(pot.participants),
    })
    return entry


# =====================================================
# POT
# =====================================================

def get_pot(date_key: Optional[date] = None) -> Pot:
    """
    GetDailyDrawPot. Today (or a later day) with no entries yet is an empty
    open pot; a past day that never had a draw is NotFound.
    """
    date_key = date_key or today_key()
    draw = DailyDraw.objects.filter(date_key=date_key).first()
    if draw is None:
        if date_key < today_key():
            raise NotFound(f"No draw for {date_key}")
        return Pot(date_key=date_key, status=DailyDraw.STATUS_OPEN, total_pot=0)

    entries = (
        draw.entries.filter(tokens__gt=0)
        .select_related("user")
        .order_by("-tokens", "id")
    )
    participants = [
        Participant(user_id=e.user_id, name=e.user.public_name, tokens=e.tokens)
        for e in entries
    ]
    return Pot(
        date_key=date_key,
        status=draw.status,
        total_pot=sum(p.tokens for p in participants),
        participants=participants,
        winner_id=draw.winner_id,
    )


def user_entry_tokens(user_id, date_key: Optional[date] = None) -> int:
    entry = DailyDrawEntry.objects.filter(
        draw__date_key=date_key or today_key(),
        user_id=user_id,
    ).first()
    return entry.tokens if entry else 0


def previous_winners(limit: int = 30):
    return (
        DailyDraw.objects.filter(status=DailyDraw.STATUS_CLOSED, winner__isnull=False)
        .select_related("winner")
        .order_by("-date_key")[:limit]
    )


# =====================================================
# SELECT WINNER
# =====================================================

def select_winner(date_key: Optional[date] = None, rng=None) -> DrawResult:
    """
    SelectDailyDrawWinner. Picks a token-weighted winner, settles every
    entrant's escrow (winner takes the whole pot), and closes the day, all
    in one transaction. A closed day raises AlreadySettled and pays nothing.
    """
    date_key = date_key or today_key()
    rng = rng or get_rng()

    with transaction.atomic():
        try:
            draw = DailyDraw.objects.select_for_update().get(date_key=date_key)
        except DailyDraw.DoesNotExist:
            raise NotFound(f"No entries for {date_key}")

        if draw.is_closed:
            raise AlreadySettled(f"The draw for {date_key} was already settled")

        entries = list(draw.entries.filter(tokens__gt=0).order_by("id"))
        if not entries:
            raise NotFound(f"No entries for {date_key}")

        total = sum(e.tokens for e in entries)
        winner_id = pick_draw_winner([(e.user_id, e.tokens) for e in entries], rng)

        for entry in entries:
            won = entry.user_id == winner_id
            settle_escrow(
                entry.user_id,
                GameHistory.DAILY_DRAW,
                stake=entry.tokens,
                payout=total if won else 0,
                reference=f"daily_draw:{date_key.isoformat()}:{entry.user_id}",
                meta={
                    "date": date_key.isoformat(),
                    "total_pot": total,
                    "participants": len(entries),
                    "winner_id": winner_id,
                },
            )

        closed = DailyDraw.objects.filter(pk=draw.pk, status=DailyDraw.STATUS_OPEN).update(
            status=DailyDraw.STATUS_CLOSED,
            winner_id=winner_id,
            payout=total,
            participants=len(entries),
            closed_at=timezone.now(),
        )
        if closed != 1:
            raise AlreadySettled(f"The draw for {date_key} was already settled")

        _broadcast_on_commit("draw.winner", {
            "date": date_key.isoformat(),
            "winner_id": winner_id,
            "payout": total,
        })

    logger.info(f"Daily draw {date_key}: user {winner_id} won {total} tokens from {len(entries)} entries")

    return DrawResult(
        date_key=date_key,
        winner_id=winner_id,
        payout=total,
        participants=len(entries),
    )
