# wallets/views.py
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .exceptions import NotFound
from .models import Wallet
from .serializers import GameHistorySerializer, HistoryQuerySerializer, WalletSerializer
from .services import wager_history


class WalletViewSet(viewsets.GenericViewSet):
    """
    Wallet API:
    - balance
    - history (settled wagers, newest first)
    """

    permission_classes = [IsAuthenticated]
    serializer_class = WalletSerializer

    def get_queryset(self):
        return Wallet.objects.filter(user=self.request.user)

    # ---------------------------------------------------
    # BALANCE
    # ---------------------------------------------------
    @action(detail=False, methods=["get"])
    def balance(self, request):
        wallet = self.get_queryset().first()
        if wallet is None:
            raise NotFound("Wallet not found")
        return Response(self.get_serializer(wallet).data)

    # ---------------------------------------------------
    # HISTORY
    # ---------------------------------------------------
    @action(detail=False, methods=["get"])
    def history(self, request):
        query = HistoryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        rows = wager_history(
            request.user,
            game_type=query.validated_data.get("game_type"),
            limit=query.validated_data["limit"],
        )
        return Response(GameHistorySerializer(rows, many=True).data)
