import random
from collections import Counter
from decimal import Decimal

from django.test import SimpleTestCase

from engine.probabilities import (
    BLACK,
    BLACK_NUMBERS,
    COLOR,
    RED,
    RED_NUMBERS,
    STRAIGHT,
    color_of,
    pick_draw_winner,
    profit_for,
    resolve_roulette,
    roulette_multiplier,
    spin_wheel,
    weighted_choice,
)


class WheelTests(SimpleTestCase):
    def test_red_and_black_partition_one_to_36(self):
        self.assertEqual(len(RED_NUMBERS), 18)
        self.assertEqual(len(BLACK_NUMBERS), 18)
        self.assertEqual(RED_NUMBERS | BLACK_NUMBERS, set(range(1, 37)))
        self.assertIsNone(color_of(0))
        self.assertEqual(color_of(7), RED)
        self.assertEqual(color_of(8), BLACK)

    def test_spin_is_roughly_uniform(self):
        rng = random.Random(1234)
        n = 37000
        counts = Counter(spin_wheel(rng) for _ in range(n))

        self.assertEqual(set(counts), set(range(37)))
        expected = n / 37
        for pocket, count in counts.items():
            self.assertLess(abs(count - expected), expected * 0.2, pocket)

    def test_red_and_black_come_up_equally_often(self):
        rng = random.Random(99)
        colors = Counter(color_of(spin_wheel(rng)) for _ in range(20000))
        self.assertLess(abs(colors[RED] - colors[BLACK]) / 20000, 0.03)
        self.assertGreater(colors[None], 0)


class MultiplierTests(SimpleTestCase):
    def test_straight_hit_pays_36(self):
        self.assertEqual(roulette_multiplier(STRAIGHT, 7, number=7), Decimal("36"))
        self.assertEqual(roulette_multiplier(STRAIGHT, 0, number=0), Decimal("36"))

    def test_straight_miss_pays_nothing(self):
        self.assertEqual(roulette_multiplier(STRAIGHT, 8, number=7), Decimal("0"))

    def test_color_pays_2_on_match(self):
        self.assertEqual(roulette_multiplier(COLOR, 1, color=RED), Decimal("2"))
        self.assertEqual(roulette_multiplier(COLOR, 2, color=BLACK), Decimal("2"))
        self.assertEqual(roulette_multiplier(COLOR, 2, color=RED), Decimal("0"))

    def test_zero_loses_every_color_bet(self):
        self.assertEqual(roulette_multiplier(COLOR, 0, color=RED), Decimal("0"))
        self.assertEqual(roulette_multiplier(COLOR, 0, color=BLACK), Decimal("0"))

    def test_unknown_bet_type_pays_nothing(self):
        self.assertEqual(roulette_multiplier("split", 7, number=7), Decimal("0"))

    def test_profit(self):
        self.assertEqual(profit_for(Decimal("36"), Decimal("10")), Decimal("350"))
        self.assertEqual(profit_for(Decimal("0"), Decimal("20")), Decimal("-20"))
        self.assertEqual(profit_for(Decimal("2"), Decimal("5")), Decimal("5"))

    def test_resolve_reports_the_pocket(self):
        class Seven:
            def randint(self, a, b):
                return 7

        resolution = resolve_roulette({"bet_type": STRAIGHT, "number": 7}, Seven())
        self.assertTrue(resolution.win)
        self.assertEqual(resolution.detail, {"result": 7, "color": RED})


class WeightedChoiceTests(SimpleTestCase):
    def test_frequencies_follow_weights(self):
        rng = random.Random(7)
        n = 30000
        counts = Counter(weighted_choice([("a", 1), ("b", 2), ("c", 7)], rng) for _ in range(n))
        self.assertAlmostEqual(counts["a"] / n, 0.1, delta=0.015)
        self.assertAlmostEqual(counts["b"] / n, 0.2, delta=0.015)
        self.assertAlmostEqual(counts["c"] / n, 0.7, delta=0.015)

    def test_zero_weight_never_wins(self):
        rng = random.Random(3)
        picks = {weighted_choice([("a", 0), ("b", 5)], rng) for _ in range(500)}
        self.assertEqual(picks, {"b"})

    def test_single_entrant_always_wins(self):
        self.assertEqual(pick_draw_winner([(42, 3)], random.Random(0)), 42)

    def test_no_positive_weight(self):
        with self.assertRaises(ValueError):
            weighted_choice([("a", 0)], random.Random(0))
        with self.assertRaises(ValueError):
            weighted_choice([], random.Random(0))
