# wallets/services.py
"""
Settlement coordinator.

Every balance movement in the app goes through this module so that a
wallet change and its GameHistory row are written in the same atomic block.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Optional

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F, Sum
from django.utils import timezone

from engine.probabilities import D0, D1, Resolution, profit_for
from engine.rng import get_rng
from .exceptions import (
    AlreadySettled,
    InsufficientBalance,
    Internal,
    InvalidWager,
    NotFound,
)
from .models import GameHistory, Wallet

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Wager:
    user_id: int
    game_type: str
    stake: Decimal
    params: dict = field(default_factory=dict)
    reference: str = ""


@dataclass(frozen=True)
class Settlement:
    history_id: int
    outcome: str
    multiplier: Decimal
    profit: Decimal
    new_balance: Decimal
    detail: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ReconcileReport:
    user_id: int
    balance: Decimal
    expected_balance: Decimal
    tokens: int
    expected_tokens: int

    @property
    def ok(self) -> bool:
        return self.balance == self.expected_balance and self.tokens == self.expected_tokens


# ======================================================
# INTERNAL
# ======================================================
def _new_reference(game_type: str) -> str:
    return f"{game_type.lower()}:{uuid.uuid4().hex}"


def _get_wallet_for_update(user_id) -> Wallet:
    try:
        return Wallet.objects.select_for_update().get(user_id=user_id)
    except Wallet.DoesNotExist:
        raise NotFound("Wallet not found")


def _ensure_unsettled(reference: str) -> None:
    if GameHistory.objects.filter(reference=reference).exists():
        raise AlreadySettled(f"Wager {reference} was already settled")


def _apply_delta(wallet: Wallet, stake: Decimal, profit: Decimal) -> bool:
    """
    Guarded read-modify-write: the row only changes while it still covers
    the stake, so a stale read can never spend the same funds twice.
    """
    updated = Wallet.objects.filter(pk=wallet.pk, balance__gte=stake).update(
        balance=F("balance") + profit,
        updated_at=timezone.now(),
    )
    return updated == 1


def _append_history(user_id, game_type, currency, win, multiplier, profit, stake, reference, meta):
    return GameHistory.objects.create(
        user_id=user_id,
        game_type=game_type,
        currency=currency,
        outcome=GameHistory.WIN if win else GameHistory.LOSE,
        multiplier=multiplier,
        profit=profit,
        bet_amount=stake,
        reference=reference,
        meta=meta or {},
    )


def _validate_stake(stake) -> Decimal:
    try:
        stake = Decimal(str(stake))
    except (TypeError, ValueError, ArithmeticError):
        raise InvalidWager("Stake must be a number")
    if not stake.is_finite() or stake <= 0:
        raise InvalidWager("Stake must be greater than zero")
    if stake != stake.quantize(CENT):
        raise InvalidWager("Stake must be in whole cents")
    return stake


# ======================================================
# SETTLE WAGER
# ======================================================
def settle_wager(
    wager: Wager,
    resolver: Callable[[dict, object], Resolution],
    rng=None,
) -> Settlement:
    """
    Resolve one wager and apply it in a single atomic unit.

    The balance is re-read under a row lock, the resolver draws the outcome,
    then the balance delta and exactly one GameHistory row are written
    together. Any failure leaves both untouched.
    """
    stake = _validate_stake(wager.stake)

    rng = rng or get_rng()
    reference = wager.reference or _new_reference(wager.game_type)

    try:
        with transaction.atomic():
            _ensure_unsettled(reference)
            wallet = _get_wallet_for_update(wager.user_id)

            if wallet.balance < stake:
                raise InsufficientBalance()

            resolution = resolver(wager.params, rng)
            multiplier = Decimal(resolution.multiplier)
            profit = profit_for(multiplier, stake).quantize(CENT)

            if not _apply_delta(wallet, stake, profit):
                raise InsufficientBalance()

            history = _append_history(
                wager.user_id,
                wager.game_type,
                GameHistory.CASH,
                resolution.win,
                multiplier,
                profit,
                stake,
                reference,
                {**wager.params, **resolution.detail},
            )
            wallet.refresh_from_db()
    except InsufficientBalance:
        logger.warning(f"Rejected {wager.game_type} wager of {stake} for user {wager.user_id}: insufficient balance")
        raise
    except IntegrityError:
        # Lost a race with a concurrent settlement of the same reference
        raise AlreadySettled(f"Wager {reference} was already settled")
    except DatabaseError as exc:
        logger.exception(f"Settlement of {reference} for user {wager.user_id} failed")
        raise Internal() from exc

    logger.info(
        f"Settled {wager.game_type} for user {wager.user_id}: stake={stake} "
        f"outcome={history.outcome} multiplier={multiplier} profit={profit}"
    )

    return Settlement(
        history_id=history.id,
        outcome=history.outcome,
        multiplier=multiplier,
        profit=profit,
        new_balance=wallet.balance,
        detail=resolution.detail,
    )


def charge(user_id, game_type: str, amount, reference: str = "", meta: Optional[dict] = None) -> Settlement:
    """Debit cash as a settled full loss (used for purchases)."""
    detail = dict(meta or {})

    def _full_loss(params, rng):
        return Resolution(win=False, multiplier=D0, detail=detail)

    return settle_wager(
        Wager(user_id=user_id, game_type=game_type, stake=amount, reference=reference),
        _full_loss,
    )


# ======================================================
# TOKEN ESCROW (daily draw)
# ======================================================
@transaction.atomic
def escrow_tokens(user_id, tokens: int) -> Wallet:
    """
    Move tokens from the spendable balance into escrow. No history row:
    the stake is settled later by settle_escrow.
    """
    if int(tokens) <= 0:
        raise InvalidWager("Token amount must be greater than zero")

    wallet = _get_wallet_for_update(user_id)
    if wallet.token_balance < tokens:
        raise InsufficientBalance("Insufficient tokens")

    updated = Wallet.objects.filter(pk=wallet.pk, token_balance__gte=tokens).update(
        token_balance=F("token_balance") - tokens,
        locked_tokens=F("locked_tokens") + tokens,
        updated_at=timezone.now(),
    )
    if updated != 1:
        raise InsufficientBalance("Insufficient tokens")

    wallet.refresh_from_db()
    return wallet


@transaction.atomic
def settle_escrow(user_id, game_type: str, stake: int, payout: int, reference: str, meta=None) -> Settlement:
    """
    Release an escrowed stake and credit the payout (0 for a loss).
    Must run inside the caller's atomic block together with whatever
    closes the round.
    """
    _ensure_unsettled(reference)
    wallet = _get_wallet_for_update(user_id)

    updated = Wallet.objects.filter(pk=wallet.pk, locked_tokens__gte=stake).update(
        locked_tokens=F("locked_tokens") - stake,
        token_balance=F("token_balance") + payout,
        updated_at=timezone.now(),
    )
    if updated != 1:
        logger.error(f"Escrow for user {user_id} holds less than {stake} tokens ({reference})")
        raise Internal("Escrowed tokens out of sync")

    stake_d = Decimal(stake)
    profit = Decimal(payout) - stake_d
    multiplier = (Decimal(payout) / stake_d).quantize(Decimal("0.00000001"))

    history = _append_history(
        user_id,
        game_type,
        GameHistory.TOKEN,
        payout > 0,
        multiplier,
        profit,
        stake_d,
        reference,
        meta,
    )
    wallet.refresh_from_db()
    return Settlement(
        history_id=history.id,
        outcome=history.outcome,
        multiplier=multiplier,
        profit=profit,
        new_balance=Decimal(wallet.token_balance),
    )


# ======================================================
# NON-CASH GRANTS
# ======================================================
def record_grant(user_id, game_type: str, reference: str, meta=None) -> GameHistory:
    """
    Zero-profit ledger row for grants that do not move currency (lootbox
    openings). Joins the caller's atomic block.
    """
    return _append_history(user_id, game_type, GameHistory.CASH, True, D1, D0, D0, reference, meta)


# ======================================================
# READS
# ======================================================
def wager_history(user, game_type=None, limit=50):
    qs = GameHistory.objects.filter(user=user)
    if game_type:
        qs = qs.filter(game_type=game_type)
    return qs.order_by("-created_at", "-id")[:limit]


def reconcile(user_id) -> ReconcileReport:
    wallet = Wallet.objects.get(user_id=user_id)
    sums = {
        row["currency"]: row["total"] or D0
        for row in GameHistory.objects.filter(user_id=user_id)
        .values("currency")
        .annotate(total=Sum("profit"))
    }
    return ReconcileReport(
        user_id=user_id,
        balance=wallet.balance,
        expected_balance=wallet.opening_balance + sums.get(GameHistory.CASH, D0),
        tokens=wallet.token_balance + wallet.locked_tokens,
        expected_tokens=wallet.opening_tokens + int(sums.get(GameHistory.TOKEN, D0)),
    )
