"""Notification inbox endpoint."""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.notifications import get_notifier


class NotificationInboxView(APIView):
    """GET /api/v1/notifications/: returns and clears pending notifications."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        items = get_notifier().drain(str(request.user.pk))
        return Response({"count": len(items), "results": items})
