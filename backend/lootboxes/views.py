# lootboxes/views.py
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .serializers import LootBoxSerializer, RedemptionOut, UserLootBoxSerializer
from .services import catalog, owned_boxes, purchase_lootbox, redeem_lootbox


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def lootbox_list(request):
    return Response(LootBoxSerializer(catalog(), many=True).data)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def purchase(request, pk):
    instance = purchase_lootbox(request.user.id, pk)
    request.user.wallet.refresh_from_db()
    return Response(
        {
            "instance": UserLootBoxSerializer(instance).data,
            "balance": str(request.user.wallet.balance),
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def mine(request):
    return Response(UserLootBoxSerializer(owned_boxes(request.user.id), many=True).data)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def redeem(request, instance_id):
    return Response(RedemptionOut(redeem_lootbox(request.user.id, instance_id)).data)
