from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from daily_draw.models import DailyDraw, DailyDrawEntry
from daily_draw.services import enter_draw, get_pot, select_winner, today_key
from wallets.exceptions import AlreadySettled, InsufficientBalance, InvalidWager, NotFound
from wallets.models import GameHistory
from wallets.services import reconcile
from .helpers import FixedRng, make_user, wallet_of


class EnterDrawTests(TestCase):
    def setUp(self):
        self.user = make_user("frank", tokens=20)

    def test_entries_accumulate(self):
        enter_draw(self.user.id, 5)
        entry = enter_draw(self.user.id, 7)

        self.assertEqual(entry.tokens, 12)
        self.assertEqual(DailyDrawEntry.objects.count(), 1)
        self.assertEqual(get_pot().total_pot, 12)

        wallet = wallet_of(self.user)
        self.assertEqual(wallet.token_balance, 8)
        self.assertEqual(wallet.locked_tokens, 12)

    def test_not_enough_tokens(self):
        with self.assertRaises(InsufficientBalance):
            enter_draw(self.user.id, 21)

        self.assertFalse(DailyDrawEntry.objects.exists())
        self.assertEqual(wallet_of(self.user).token_balance, 20)

    def test_zero_tokens(self):
        with self.assertRaises(InvalidWager):
            enter_draw(self.user.id, 0)

    def test_entry_into_closed_day(self):
        enter_draw(self.user.id, 5)
        select_winner(rng=FixedRng(0))

        with self.assertRaises(AlreadySettled):
            enter_draw(self.user.id, 1)
        self.assertEqual(get_pot().total_pot, 5)

    def test_pot_for_today_without_entries_is_empty(self):
        pot = get_pot()
        self.assertEqual(pot.total_pot, 0)
        self.assertEqual(pot.status, DailyDraw.STATUS_OPEN)
        self.assertEqual(pot.participants, [])

    def test_pot_for_unknown_past_day(self):
        with self.assertRaises(NotFound):
            get_pot(today_key() - timedelta(days=3))


class SelectWinnerTests(TestCase):
    def setUp(self):
        self.alice = make_user("alice", tokens=20)
        self.bob = make_user("bob", tokens=20)
        enter_draw(self.alice.id, 5)
        enter_draw(self.bob.id, 3)

    def test_winner_takes_the_pot(self):
        # tickets 0..4 belong to alice, 5..7 to bob
        result = select_winner(rng=FixedRng(5))

        self.assertEqual(result.winner_id, self.bob.id)
        self.assertEqual(result.payout, 8)
        self.assertEqual(result.participants, 2)

        bob, alice = wallet_of(self.bob), wallet_of(self.alice)
        self.assertEqual((bob.token_balance, bob.locked_tokens), (25, 0))
        self.assertEqual((alice.token_balance, alice.locked_tokens), (15, 0))

        draw = DailyDraw.objects.get(date_key=today_key())
        self.assertTrue(draw.is_closed)
        self.assertEqual(draw.winner_id, self.bob.id)

    def test_one_history_row_per_entrant(self):
        select_winner(rng=FixedRng(0))

        alice_row = GameHistory.objects.get(user=self.alice, game_type=GameHistory.DAILY_DRAW)
        bob_row = GameHistory.objects.get(user=self.bob, game_type=GameHistory.DAILY_DRAW)
        self.assertEqual(alice_row.outcome, GameHistory.WIN)
        self.assertEqual(alice_row.profit, Decimal("3"))
        self.assertEqual(alice_row.multiplier, Decimal("1.6"))
        self.assertEqual(bob_row.outcome, GameHistory.LOSE)
        self.assertEqual(bob_row.profit, Decimal("-3"))
        self.assertEqual(bob_row.currency, GameHistory.TOKEN)

        self.assertTrue(reconcile(self.alice.id).ok)
        self.assertTrue(reconcile(self.bob.id).ok)

    def test_second_selection_pays_nothing(self):
        select_winner(rng=FixedRng(0))

        with self.assertRaises(AlreadySettled):
            select_winner(rng=FixedRng(5))

        self.assertEqual(wallet_of(self.alice).token_balance, 23)
        self.assertEqual(wallet_of(self.bob).token_balance, 17)
        self.assertEqual(GameHistory.objects.filter(game_type=GameHistory.DAILY_DRAW).count(), 2)

    def test_day_without_entries(self):
        with self.assertRaises(NotFound):
            select_winner(today_key() - timedelta(days=1), rng=FixedRng(0))

    def test_winner_is_broadcast_after_commit(self):
        with mock.patch("daily_draw.services._broadcast") as broadcast:
            with self.captureOnCommitCallbacks(execute=True):
                select_winner(rng=FixedRng(0))

        broadcast.assert_called_once_with("draw.winner", {
            "date": today_key().isoformat(),
            "winner_id": self.alice.id,
            "payout": 8,
        })

    def test_command(self):
        out = StringIO()
        call_command("run_daily_draw", "--date", today_key().isoformat(), "--no-lock", stdout=out)
        self.assertIn("won 8 tokens", out.getvalue())

        out = StringIO()
        call_command("run_daily_draw", "--date", today_key().isoformat(), "--no-lock", stdout=out)
        self.assertIn("Already settled", out.getvalue())


class DailyDrawApiTests(TestCase):
    def setUp(self):
        self.user = make_user("gina", tokens=20)
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_enter_and_state(self):
        response = self.client.post("/api/daily-draw/enter/", {"tokens": 4}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["wallet_tokens"], 16)
        self.assertEqual(response.json()["total_pot"], 4)

        state = self.client.get("/api/daily-draw/").json()
        self.assertEqual(state["current_pot"], 4)
        self.assertEqual(state["user_entry"], 4)
        self.assertEqual(state["entries"][0]["name"], "gina")

    def test_enter_rejects_bad_amount(self):
        response = self.client.post("/api/daily-draw/enter/", {"tokens": 0}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "invalid_wager")

    def test_pot_with_bad_date(self):
        response = self.client.get("/api/daily-draw/pot/", {"date": "yesterday"})
        self.assertEqual(response.status_code, 400)

    def test_select_winner_needs_privilege(self):
        enter_draw(self.user.id, 4)
        response = self.client.post("/api/daily-draw/select-winner/", {}, format="json")
        self.assertEqual(response.status_code, 403)
        self.assertFalse(DailyDraw.objects.get().is_closed)

    def test_staff_selects_winner(self):
        enter_draw(self.user.id, 4)
        staff = make_user("admin")
        staff.is_staff = True
        staff.save()

        client = APIClient()
        client.force_authenticate(staff)
        response = client.post("/api/daily-draw/select-winner/", {}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["winner_id"], self.user.id)

        winners = self.client.get("/api/daily-draw/winners/").json()
        self.assertEqual(winners[0]["winner_id"], self.user.id)

    @override_settings(DAILY_DRAW_CRON_SECRET="s3cret")
    def test_scheduler_secret(self):
        enter_draw(self.user.id, 4)

        response = APIClient().post(
            "/api/daily-draw/select-winner/", {}, format="json", HTTP_AUTHORIZATION="Bearer wrong"
        )
        self.assertIn(response.status_code, (401, 403))

        response = APIClient().post(
            "/api/daily-draw/select-winner/", {}, format="json", HTTP_AUTHORIZATION="Bearer s3cret"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["payout"], 4)
