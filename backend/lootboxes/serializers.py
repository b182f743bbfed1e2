from decimal import Decimal

from rest_framework import serializers

from portfolio.serializers import StockSerializer
from .models import LootBox, LootBoxItem, UserLootBox


class LootBoxItemSerializer(serializers.ModelSerializer):
    stock = StockSerializer(read_only=True)
    odds = serializers.SerializerMethodField()

    class Meta:
        model = LootBoxItem
        fields = ["stock", "weight", "odds"]

    def get_odds(self, obj):
        total = sum(i.weight for i in obj.lootbox.items.all())
        if not total:
            return "0"
        return str((Decimal(obj.weight) / Decimal(total)).quantize(Decimal("0.0001")))


class LootBoxSerializer(serializers.ModelSerializer):
    items = LootBoxItemSerializer(many=True, read_only=True)

    class Meta:
        model = LootBox
        fields = ["id", "name", "price", "items"]


class UserLootBoxSerializer(serializers.ModelSerializer):
    lootbox = serializers.CharField(source="lootbox.name", read_only=True)
    lootbox_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = UserLootBox
        fields = ["id", "lootbox_id", "lootbox", "purchased_at"]


class RedemptionOut(serializers.Serializer):
    instance_id = serializers.UUIDField()
    lootbox = serializers.CharField()
    granted_stock = StockSerializer(source="stock")
    quantity = serializers.IntegerField()
    holding_quantity = serializers.IntegerField()
    game_id = serializers.IntegerField(source="history_id")
