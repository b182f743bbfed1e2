# roulette/services.py
from engine.probabilities import STRAIGHT, resolve_roulette
from wallets.models import GameHistory
from wallets.services import Settlement, Wager, settle_wager


def place_roulette_bet(user_id, bet_type, amount, number=None, color=None, wager_id=None, rng=None) -> Settlement:
    """
    PlaceRouletteBet: one spin of a 37-pocket wheel settled against the
    user's cash balance. settlement.detail["result"] is the pocket drawn.
    """
    params = {"bet_type": bet_type}
    if bet_type == STRAIGHT:
        params["number"] = number
    else:
        params["color"] = color

    wager = Wager(
        user_id=user_id,
        game_type=GameHistory.ROULETTE,
        stake=amount,
        params=params,
        reference=f"roulette:{wager_id}" if wager_id else "",
    )
    return settle_wager(wager, resolve_roulette, rng=rng)
