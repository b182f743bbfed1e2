from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Holding
from .serializers import HoldingSerializer


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def holdings(request):
    qs = (
        Holding.objects.filter(user=request.user, quantity__gt=0)
        .select_related("stock")
        .order_by("stock__symbol")
    )
    return Response(HoldingSerializer(qs, many=True).data)
