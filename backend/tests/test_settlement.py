import uuid
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from engine.probabilities import RED, STRAIGHT, COLOR
from roulette.services import place_roulette_bet
from wallets.exceptions import AlreadySettled, InsufficientBalance, InvalidWager, NotFound
from wallets.models import GameHistory, Wallet
from wallets.services import charge, reconcile
from .helpers import FixedRng, make_user, wallet_of


class RouletteSettlementTests(TestCase):
    def setUp(self):
        self.user = make_user("alice", balance="100.00")

    def test_straight_win(self):
        settlement = place_roulette_bet(self.user.id, STRAIGHT, Decimal("10"), number=7, rng=FixedRng(7))

        self.assertEqual(settlement.detail["result"], 7)
        self.assertEqual(settlement.new_balance, Decimal("450.00"))
        self.assertEqual(wallet_of(self.user).balance, Decimal("450.00"))

        rows = GameHistory.objects.filter(user=self.user)
        self.assertEqual(rows.count(), 1)
        row = rows.get()
        self.assertEqual(row.outcome, GameHistory.WIN)
        self.assertEqual(row.multiplier, Decimal("36"))
        self.assertEqual(row.profit, Decimal("350.00"))
        self.assertEqual(row.bet_amount, Decimal("10.00"))
        self.assertEqual(row.game_type, GameHistory.ROULETTE)

    def test_color_bet_loses_on_zero(self):
        settlement = place_roulette_bet(self.user.id, COLOR, Decimal("20"), color=RED, rng=FixedRng(0))

        self.assertEqual(settlement.outcome, GameHistory.LOSE)
        self.assertEqual(wallet_of(self.user).balance, Decimal("80.00"))
        row = GameHistory.objects.get(user=self.user)
        self.assertEqual(row.profit, Decimal("-20.00"))
        self.assertEqual(row.multiplier, Decimal("0"))

    def test_color_win(self):
        place_roulette_bet(self.user.id, COLOR, Decimal("5"), color=RED, rng=FixedRng(1))
        self.assertEqual(wallet_of(self.user).balance, Decimal("105.00"))

    def test_stake_above_balance_changes_nothing(self):
        with self.assertRaises(InsufficientBalance):
            place_roulette_bet(self.user.id, STRAIGHT, Decimal("100.01"), number=7, rng=FixedRng(7))

        self.assertEqual(wallet_of(self.user).balance, Decimal("100.00"))
        self.assertFalse(GameHistory.objects.exists())

    def test_whole_balance_can_be_staked(self):
        place_roulette_bet(self.user.id, STRAIGHT, Decimal("100"), number=7, rng=FixedRng(8))
        self.assertEqual(wallet_of(self.user).balance, Decimal("0.00"))

    def test_non_positive_stake_rejected(self):
        for stake in (Decimal("0"), Decimal("-5")):
            with self.assertRaises(InvalidWager):
                place_roulette_bet(self.user.id, STRAIGHT, stake, number=7, rng=FixedRng(7))
        self.assertFalse(GameHistory.objects.exists())

    def test_sub_cent_stake_rejected(self):
        with self.assertRaises(InvalidWager):
            place_roulette_bet(self.user.id, STRAIGHT, Decimal("0.001"), number=7, rng=FixedRng(7))
        with self.assertRaises(InvalidWager):
            place_roulette_bet(self.user.id, COLOR, Decimal("0.004"), color=RED, rng=FixedRng(0))

        self.assertEqual(wallet_of(self.user).balance, Decimal("100.00"))
        self.assertFalse(GameHistory.objects.exists())

    def test_profit_is_exact_for_cent_stakes(self):
        settlement = place_roulette_bet(self.user.id, STRAIGHT, Decimal("0.01"), number=7, rng=FixedRng(7))

        self.assertEqual(settlement.profit, Decimal("0.35"))
        row = GameHistory.objects.get(user=self.user)
        self.assertEqual(row.bet_amount, Decimal("0.01"))
        self.assertEqual(row.profit, (row.multiplier - 1) * row.bet_amount)

    def test_duplicate_wager_id_is_settled_once(self):
        wager_id = uuid.uuid4()
        place_roulette_bet(self.user.id, STRAIGHT, Decimal("10"), number=7, wager_id=wager_id, rng=FixedRng(7))

        with self.assertRaises(AlreadySettled):
            place_roulette_bet(self.user.id, STRAIGHT, Decimal("10"), number=7, wager_id=wager_id, rng=FixedRng(7))

        self.assertEqual(wallet_of(self.user).balance, Decimal("450.00"))
        self.assertEqual(GameHistory.objects.filter(user=self.user).count(), 1)

    def test_missing_wallet(self):
        Wallet.objects.filter(user=self.user).delete()
        with self.assertRaises(NotFound):
            place_roulette_bet(self.user.id, STRAIGHT, Decimal("10"), number=7, rng=FixedRng(7))


class LedgerTests(TestCase):
    def setUp(self):
        self.user = make_user("bob", balance="100.00")

    def test_history_rows_are_immutable(self):
        place_roulette_bet(self.user.id, STRAIGHT, Decimal("10"), number=7, rng=FixedRng(3))
        row = GameHistory.objects.get(user=self.user)

        row.profit = Decimal("1000")
        with self.assertRaises(ValueError):
            row.save()
        with self.assertRaises(ValueError):
            row.delete()

    def test_reconciles_after_mixed_play(self):
        place_roulette_bet(self.user.id, STRAIGHT, Decimal("10"), number=7, rng=FixedRng(7))
        place_roulette_bet(self.user.id, COLOR, Decimal("25.50"), color=RED, rng=FixedRng(2))
        charge(self.user.id, GameHistory.LOOTBOX_PURCHASE, Decimal("50"))

        report = reconcile(self.user.id)
        self.assertTrue(report.ok)
        self.assertEqual(report.balance, Decimal("100") + Decimal("350") - Decimal("25.50") - Decimal("50"))

    def test_reconcile_command(self):
        place_roulette_bet(self.user.id, STRAIGHT, Decimal("10"), number=7, rng=FixedRng(1))
        call_command("reconcile_wallets", verbosity=0, stdout=StringIO())

        Wallet.objects.filter(user=self.user).update(balance=Decimal("5000"))
        with self.assertRaises(CommandError):
            call_command("reconcile_wallets", "--user-id", str(self.user.id), stdout=StringIO())

