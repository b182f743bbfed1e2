# roulette/serializers.py
from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from engine.probabilities import BET_TYPES, COLOR, COLORS, STRAIGHT, WHEEL_POCKETS


class SpinIn(serializers.Serializer):
    bet_type = serializers.ChoiceField(choices=BET_TYPES)
    number = serializers.IntegerField(min_value=0, max_value=WHEEL_POCKETS - 1, required=False)
    color = serializers.ChoiceField(choices=COLORS, required=False)
    amount = serializers.DecimalField(
        max_digits=18,
        decimal_places=2,
        min_value=Decimal("0.01"),
    )
    # Client-generated idempotency key; a repeated key is never settled twice
    wager_id = serializers.UUIDField(required=False)

    def validate_amount(self, value):
        if value > settings.ROULETTE_MAX_BET:
            raise serializers.ValidationError(f"Maximum bet is {settings.ROULETTE_MAX_BET}")
        return value

    def validate(self, attrs):
        if attrs["bet_type"] == STRAIGHT and attrs.get("number") is None:
            raise serializers.ValidationError({"number": "A straight bet needs a number"})
        if attrs["bet_type"] == COLOR and not attrs.get("color"):
            raise serializers.ValidationError({"color": "A color bet needs red or black"})
        return attrs


class SpinOut(serializers.Serializer):
    result = serializers.IntegerField()
    color = serializers.CharField(allow_null=True)
    outcome = serializers.CharField()
    multiplier = serializers.DecimalField(max_digits=18, decimal_places=2)
    profit = serializers.DecimalField(max_digits=18, decimal_places=2)
    balance = serializers.DecimalField(max_digits=18, decimal_places=2)
    game_id = serializers.IntegerField()
