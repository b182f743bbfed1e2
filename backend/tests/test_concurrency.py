import random
import threading
from decimal import Decimal

from django.db import connection
from django.db.models import Sum
from django.test import TransactionTestCase

from daily_draw.models import DailyDraw
from daily_draw.services import enter_draw, select_winner, today_key
from engine.probabilities import COLOR, RED, STRAIGHT
from lootboxes.models import LootBox, LootBoxItem
from lootboxes.services import purchase_lootbox, redeem_lootbox
from portfolio.models import Holding, Stock
from roulette.services import place_roulette_bet
from wallets.exceptions import AlreadyOpened, AlreadySettled, InsufficientBalance
from wallets.models import GameHistory
from wallets.services import reconcile
from .helpers import FixedRng, make_user, wallet_of

THREADS = 50


def run_in_threads(target, count=THREADS):
    """Release `count` threads at once; each gets its own DB connection."""
    results = []
    lock = threading.Lock()
    start = threading.Barrier(count)

    def worker(i):
        try:
            start.wait()
            outcome = target(i)
            with lock:
                results.append(outcome)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


class ConcurrentSettlementTests(TransactionTestCase):
    """Real threads against the file-backed test database."""

    def test_parallel_bets_all_settle(self):
        user = make_user("racer", balance="10000.00")

        def bet(i):
            rng = random.Random(i)
            if i % 2:
                place_roulette_bet(user.id, COLOR, Decimal("10"), color=RED, rng=rng)
            else:
                place_roulette_bet(user.id, STRAIGHT, Decimal("10"), number=i % 37, rng=rng)
            return "ok"

        results = run_in_threads(bet)

        self.assertEqual(results.count("ok"), THREADS)
        rows = GameHistory.objects.filter(user=user)
        self.assertEqual(rows.count(), THREADS)
        profit = rows.aggregate(total=Sum("profit"))["total"]
        self.assertEqual(wallet_of(user).balance, Decimal("10000.00") + profit)

    def test_parallel_bets_never_overdraw(self):
        user = make_user("racer", balance="100.00")

        def bet(i):
            try:
                # 8 is never 7: every bet loses its stake
                place_roulette_bet(user.id, STRAIGHT, Decimal("10"), number=7, rng=FixedRng(8))
            except InsufficientBalance:
                return "insufficient"
            return "ok"

        results = run_in_threads(bet)

        self.assertEqual(len(results), THREADS)
        self.assertEqual(results.count("ok"), 10)
        self.assertEqual(results.count("insufficient"), 40)
        self.assertEqual(wallet_of(user).balance, Decimal("0.00"))
        self.assertEqual(GameHistory.objects.filter(user=user).count(), 10)
        self.assertTrue(reconcile(user.id).ok)


class ConcurrentDrawTests(TransactionTestCase):
    def test_one_draw_per_day_under_parallel_triggers(self):
        users = [make_user(f"entrant{i}", tokens=10) for i in range(3)]
        for i, user in enumerate(users):
            enter_draw(user.id, i + 2)

        def trigger(i):
            try:
                select_winner(rng=random.Random(i))
            except AlreadySettled:
                return "settled"
            return "ok"

        results = run_in_threads(trigger, count=8)

        self.assertEqual(results.count("ok"), 1)
        self.assertEqual(results.count("settled"), 7)
        self.assertTrue(DailyDraw.objects.get(date_key=today_key()).is_closed)
        self.assertEqual(GameHistory.objects.filter(game_type=GameHistory.DAILY_DRAW).count(), 3)

        wallets = [wallet_of(u) for u in users]
        self.assertEqual(sum(w.locked_tokens for w in wallets), 0)
        self.assertEqual(sum(w.token_balance for w in wallets), 30)
        for user in users:
            self.assertTrue(reconcile(user.id).ok)


class ConcurrentRedeemTests(TransactionTestCase):
    def test_one_box_opens_once(self):
        user = make_user("opener", balance="100.00")
        stock = Stock.objects.create(symbol="NVDA", price=Decimal("650.45"))
        box = LootBox.objects.create(name="Rare Lootbox", price=Decimal("50.00"))
        LootBoxItem.objects.create(lootbox=box, stock=stock, weight=1)
        instance = purchase_lootbox(user.id, box.id)

        def redeem(i):
            try:
                redeem_lootbox(user.id, instance.id, rng=random.Random(i))
            except AlreadyOpened:
                return "opened"
            return "ok"

        results = run_in_threads(redeem, count=8)

        self.assertEqual(results.count("ok"), 1)
        self.assertEqual(results.count("opened"), 7)
        self.assertEqual(Holding.objects.get(user=user, stock=stock).quantity, 1)
        self.assertEqual(GameHistory.objects.filter(game_type=GameHistory.LOOTBOX_OPEN).count(), 1)
        self.assertTrue(reconcile(user.id).ok)
