"""Admin reporting endpoint."""

from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.catalog.repositories.django_repository import CatalogDjangoRepository
from modules.core.permissions import IsAdminRole
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.reports.serializers import DashboardSerializer
from modules.reports.services import DashboardService


class DashboardView(APIView):
    """GET /api/v1/admin/dashboard/"""

    permission_classes = [IsAdminRole]

    def get(self, request: Request) -> Response:
        service = DashboardService(
            order_repository=OrderDjangoRepository(),
            catalog_repository=CatalogDjangoRepository(),
        )
        return Response(DashboardSerializer(service.build()).data)
