# daily_draw/views.py
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from wallets.exceptions import InvalidWager
from .permissions import IsStaffOrCronSecret
from .serializers import DateKeyIn, DrawResultOut, EnterIn, PotOut, WinnerOut
from .services import enter_draw, get_pot, previous_winners, select_winner, user_entry_tokens


def _date_key(data):
    serializer = DateKeyIn(data=data)
    if not serializer.is_valid():
        raise InvalidWager(fields=serializer.errors)
    return serializer.validated_data.get("date")


# =====================================================
# CURRENT STATE
# =====================================================

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def draw_state(request):
    pot = get_pot()
    return Response({
        "wallet_tokens": request.user.wallet.token_balance,
        "current_pot": pot.total_pot,
        "user_entry": user_entry_tokens(request.user.id, pot.date_key),
        "status": pot.status,
        "date": pot.date_key.isoformat(),
        "entries": PotOut(pot).data["participants"],
    })


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def enter(request):
    serializer = EnterIn(data=request.data)
    if not serializer.is_valid():
        raise InvalidWager(fields=serializer.errors)

    entry = enter_draw(request.user.id, serializer.validated_data["tokens"])
    request.user.wallet.refresh_from_db()
    pot = get_pot(entry.draw.date_key)

    return Response({
        "message": "Successfully entered draw",
        "wallet_tokens": request.user.wallet.token_balance,
        "user_entry": entry.tokens,
        "total_pot": pot.total_pot,
    })


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def pot(request):
    return Response(PotOut(get_pot(_date_key(request.query_params))).data)


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def winners(request):
    return Response(WinnerOut(previous_winners(), many=True).data)


# =====================================================
# WINNER SELECTION (STAFF / SCHEDULER)
# =====================================================

@api_view(["POST"])
@permission_classes([IsStaffOrCronSecret])
def select_winner_view(request):
    result = select_winner(_date_key(request.data))
    return Response(DrawResultOut(result).data)
