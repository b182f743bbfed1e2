# daily_draw/permissions.py
import hmac

from django.conf import settings
from rest_framework.permissions import BasePermission


class IsStaffOrCronSecret(BasePermission):
    """
    Winner selection is privileged: staff sessions, or the scheduler
    presenting "Authorization: Bearer <DAILY_DRAW_CRON_SECRET>".
    """

    def has_permission(self, request, view):
        user = request.user
        if user and user.is_authenticated and user.is_staff:
            return True

        secret = getattr(settings, "DAILY_DRAW_CRON_SECRET", None)
        if not secret:
            return False

        header = request.headers.get("Authorization", "")
        return hmac.compare_digest(header.encode("utf-8"), f"Bearer {secret}".encode("utf-8"))
