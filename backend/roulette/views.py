# roulette/views.py
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from wallets.exceptions import InvalidWager
from .serializers import SpinIn, SpinOut
from .services import place_roulette_bet


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def spin(request):
    serializer = SpinIn(data=request.data)
    if not serializer.is_valid():
        raise InvalidWager(fields=serializer.errors)

    data = serializer.validated_data
    settlement = place_roulette_bet(
        request.user.id,
        data["bet_type"],
        data["amount"],
        number=data.get("number"),
        color=data.get("color"),
        wager_id=data.get("wager_id"),
    )

    return Response(SpinOut({
        "result": settlement.detail["result"],
        "color": settlement.detail["color"],
        "outcome": settlement.outcome,
        "multiplier": settlement.multiplier,
        "profit": settlement.profit,
        "balance": settlement.new_balance,
        "game_id": settlement.history_id,
    }).data)
