from rest_framework import serializers

from .models import Holding, Stock


class StockSerializer(serializers.ModelSerializer):
    class Meta:
        model = Stock
        fields = ["id", "symbol", "name", "price"]


class HoldingSerializer(serializers.ModelSerializer):
    stock = StockSerializer(read_only=True)

    class Meta:
        model = Holding
        fields = ["stock", "quantity", "updated_at"]
