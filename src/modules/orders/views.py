"""Order API views.

Exposes the ``OrderService`` over HTTP with DRF ViewSets.
Domain exceptions are caught and translated into HTTP status codes;
the view never swallows generic exceptions.

- ``OrderViewSet``: the customer's own orders (place, list, view,
  cancel, verify payment, payment config).
- ``AdminOrderViewSet``: back-office listing and status updates.
"""

from __future__ import annotations

from django.conf import settings
from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import AddressDTO
from modules.catalog.dtos import PizzaSelectionDTO
from modules.catalog.exceptions import CatalogItemUnavailable, InsufficientStock
from modules.catalog.repositories.django_repository import CatalogDjangoRepository
from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsAdminRole
from modules.orders.dtos import (
    CreateOrderDTO,
    OrderLineDTO,
    VerifyPaymentDTO,
)
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderNotFound,
    OrderNumberUnavailable,
    OrderPermissionDenied,
    OrderValidationError,
    PaymentVerificationFailed,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    PaymentIntentSerializer,
    StatusUpdateSerializer,
    VerifyPaymentSerializer,
)
from modules.orders.services import OrderService
from modules.payments.exceptions import PaymentGatewayError

_NOT_FOUND = {"detail": "Order not found."}
_FORBIDDEN = {"detail": "You do not have access to this order."}


def build_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        catalog_repository=CatalogDjangoRepository(),
    )


class OrderViewSet(GenericViewSet):
    """Orders of the authenticated customer.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.none()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_throttles(self) -> list[BaseThrottle]:
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        201 with the order; with payments enabled the body also carries
        ``payment_intent`` and ``key_id`` for the client checkout.
        """
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            dto = CreateOrderDTO(
                items=[
                    OrderLineDTO(
                        selection=PizzaSelectionDTO(**line["customizations"]),
                        quantity=line["quantity"],
                    )
                    for line in data["items"]
                ],
                delivery_address=(
                    AddressDTO(**data["delivery_address"])
                    if data.get("delivery_address")
                    else None
                ),
                notes=data.get("notes", ""),
            )
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            placement = self._service.create_order(request.user, dto)
        except (OrderValidationError, CatalogItemUnavailable) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except (InsufficientStock, OrderNumberUnavailable) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except PaymentGatewayError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        body = {"order": OrderSerializer(placement.order).data}
        if placement.payment_intent is not None:
            body["payment_intent"] = PaymentIntentSerializer(placement.payment_intent).data
            body["key_id"] = settings.RAZORPAY_KEY_ID or None
            body["message"] = "Order created successfully"
        else:
            body["message"] = "Order created and confirmed"
        return Response(body, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/: newest first, paginated."""
        queryset = self._service.list_user_orders(request.user)
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(OrderSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk, user=request.user)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except OrderPermissionDenied:
            return Response(_FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Cancel / payment
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/"""
        try:
            order = self._service.cancel_order(
                pk, user=request.user, notes=request.data.get("notes", "")
            )
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except OrderPermissionDenied:
            return Response(_FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(
            {"message": "Order cancelled successfully", "order": OrderSerializer(order).data}
        )

    @action(detail=False, methods=["post"], url_path="verify-payment")
    def verify_payment(self, request: Request) -> Response:
        """POST /api/v1/orders/verify-payment/"""
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = VerifyPaymentDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            order = self._service.verify_payment(request.user, dto)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except OrderPermissionDenied:
            return Response(_FORBIDDEN, status=status.HTTP_403_FORBIDDEN)
        except (InvalidOrderStatus, PaymentVerificationFailed, InsufficientStock) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except PaymentGatewayError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        return Response(
            {
                "message": "Payment verified and order confirmed",
                "order": OrderSerializer(order).data,
            }
        )

    @action(detail=False, methods=["get"])
    def config(self, request: Request) -> Response:
        """GET /api/v1/orders/config/: payment settings for the client."""
        return Response(self._service.payment_config())


class AdminOrderViewSet(GenericViewSet):
    """Back-office order management (admin role only)."""

    permission_classes = [IsAdminRole]
    serializer_class = OrderListSerializer
    filterset_class = OrderFilter
    search_fields = ["order_number", "user__username", "user__email"]
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_queryset(self):
        return self._service.list_orders()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/orders/?status=confirmed"""
        queryset = self.filter_queryset(self.get_queryset())
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(OrderListSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["put", "patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/admin/orders/{pk}/status/ with ``{"status": ...}``."""
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data["status"]
        try:
            order = self._service.update_status(
                pk,
                new_status,
                actor=request.user,
                notes=serializer.validated_data["notes"],
            )
        except OrderValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except (InvalidOrderStatus, InsufficientStock) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(OrderSerializer(order).data)
