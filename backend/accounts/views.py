# accounts/views.py
import logging

from django.contrib.auth import authenticate, login, logout
from django.middleware.csrf import get_token
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from wallets.exceptions import InvalidWager, Unauthenticated
from .serializers import LoginIn, ProfileOut, RegisterIn

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([AllowAny])
def register_view(request):
    serializer = RegisterIn(data=request.data)
    if not serializer.is_valid():
        raise InvalidWager("Invalid registration", fields=serializer.errors)

    user = serializer.save()
    login(request, user)
    logger.info(f"Registered user {user.pk}")
    return Response(ProfileOut(user).data, status=status.HTTP_201_CREATED)


@api_view(["POST"])
@permission_classes([AllowAny])
def login_view(request):
    serializer = LoginIn(data=request.data)
    if not serializer.is_valid():
        raise InvalidWager("Username and password are required", fields=serializer.errors)

    user = authenticate(request, **serializer.validated_data)
    if user is None:
        raise Unauthenticated("Invalid credentials")

    login(request, user)
    return Response(ProfileOut(user).data)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def logout_view(request):
    logout(request)
    return Response({"message": "Logged out"})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def profile_view(request):
    return Response(ProfileOut(request.user).data)


@api_view(["GET"])
@permission_classes([AllowAny])
def csrf_view(request):
    return Response({"csrfToken": get_token(request)})
