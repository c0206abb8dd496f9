"""Catalog API views.

``CatalogViewSet`` serves the storefront (listing, varieties, pricing);
``InventoryViewSet`` is the admin back office.  Domain exceptions are
translated into HTTP status codes here; nothing is swallowed.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.dtos import (
    CreateCatalogItemDTO,
    PizzaSelectionDTO,
    UpdateCatalogItemDTO,
)
from modules.catalog.exceptions import CatalogItemNotFound
from modules.catalog.pricing import PricingEngine
from modules.catalog.repositories.django_repository import CatalogDjangoRepository
from modules.catalog.serializers import (
    CatalogItemSerializer,
    CatalogItemWriteSerializer,
    PriceQuoteSerializer,
    PriceRequestSerializer,
    StockSerializer,
    serialize_grouped,
)
from modules.catalog.services import CatalogService
from modules.catalog.tasks import check_low_stock
from modules.core.permissions import IsAdminRole

_NOT_FOUND = {"detail": "Catalog item not found."}


class CatalogViewSet(GenericViewSet):
    """Storefront catalog for authenticated customers."""

    serializer_class = CatalogItemSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        repository = CatalogDjangoRepository()
        self._service = CatalogService(repository=repository)
        self._pricing = PricingEngine(repository=repository)

    def list(self, request: Request) -> Response:
        """GET /api/v1/catalog/?category=base

        Only available, in-stock items, sorted by name.
        """
        try:
            items = self._service.list_selectable(request.query_params.get("category"))
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(CatalogItemSerializer(items, many=True).data)

    @action(detail=False, methods=["get"])
    def varieties(self, request: Request) -> Response:
        """GET /api/v1/catalog/varieties/: available items grouped by category."""
        return Response(serialize_grouped(self._service.list_varieties()))

    @action(detail=False, methods=["post"], url_path="calculate-price")
    def calculate_price(self, request: Request) -> Response:
        """POST /api/v1/catalog/calculate-price/"""
        serializer = PriceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        selection = PizzaSelectionDTO(
            base=data.get("base"),
            sauce=data.get("sauce"),
            cheese=data.get("cheese"),
            vegetables=data.get("vegetables", []),
            meats=data.get("meats", []),
        )
        quote = self._pricing.quote(selection, quantity=data["quantity"])
        return Response(PriceQuoteSerializer(quote).data)


class InventoryViewSet(GenericViewSet):
    """Admin inventory management."""

    permission_classes = [IsAdminRole]
    serializer_class = CatalogItemSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CatalogService(repository=CatalogDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/inventory/?category=meat: grouped by category."""
        grouped = self._service.list_inventory(request.query_params.get("category"))
        return Response(serialize_grouped(grouped))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            item = self._service.get_item(str(pk))
        except CatalogItemNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(CatalogItemSerializer(item).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/inventory/"""
        serializer = CatalogItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = CreateCatalogItemDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        item = self._service.create_item(dto)
        return Response(CatalogItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/inventory/{pk}/: partial semantics for both."""
        serializer = CatalogItemWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            dto = UpdateCatalogItemDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        try:
            item = self._service.update_item(str(pk), dto)
        except CatalogItemNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(CatalogItemSerializer(item).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/inventory/{pk}/ (soft delete)."""
        try:
            self._service.delete_item(str(pk))
        except CatalogItemNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["put", "patch"], url_path="stock")
    def set_stock(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/inventory/{pk}/stock/ with ``{"stock": N}``."""
        serializer = StockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            item = self._service.set_stock(str(pk), serializer.validated_data["stock"])
        except CatalogItemNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(CatalogItemSerializer(item).data)

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request: Request) -> Response:
        """GET /api/v1/inventory/low-stock/"""
        items = self._service.list_low_stock()
        return Response(CatalogItemSerializer(items, many=True).data)

    @action(detail=False, methods=["post"], url_path="check-low-stock")
    def check_low_stock(self, request: Request) -> Response:
        """POST /api/v1/inventory/check-low-stock/: run the alert now."""
        return Response(check_low_stock())
