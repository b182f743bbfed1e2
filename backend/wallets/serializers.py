from rest_framework import serializers
from .models import GameHistory, Wallet


class GameHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = GameHistory
        fields = [
            'id',
            'game_type',
            'currency',
            'outcome',
            'multiplier',
            'profit',
            'bet_amount',
            'reference',
            'meta',
            'created_at',
        ]


class WalletSerializer(serializers.ModelSerializer):
    class Meta:
        model = Wallet
        fields = ['balance', 'token_balance', 'locked_tokens', 'updated_at']


class HistoryQuerySerializer(serializers.Serializer):
    game_type = serializers.ChoiceField(
        choices=[c[0] for c in GameHistory.GAME_CHOICES],
        required=False,
    )
    limit = serializers.IntegerField(min_value=1, max_value=200, default=50)
