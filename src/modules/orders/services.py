"""Order service layer (Use Cases).

Orchestrates order placement, payment verification, confirmation, the
status state machine and cancellation.  Every write runs inside one
atomic block that defines the unit of work; domain events are published
on the in-process bus only after that block has completed, so a
notification can never roll back an order state change.

Rules enforced here:
- Prices are computed server-side by the Pricing Engine.
- Confirmation requires payment (or payments disabled) and decrements
  stock for every resolved component, failing the whole operation when
  any item runs short.
- Mutations lock the order row before checking the transition guard.
- A tampered payment signature leaves the order untouched.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.catalog.pricing import PricingEngine
from modules.orders.constants import (
    ETA_MINUTES,
    OrderStatus,
    PaymentStatus,
    StockRestorePolicy,
)
from modules.orders.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderCreated,
    OrderEvent,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderNotFound,
    OrderPermissionDenied,
    OrderValidationError,
    PaymentVerificationFailed,
)
from modules.payments import get_gateway
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.catalog.repositories.interfaces import ICatalogRepository
    from modules.orders.dtos import CreateOrderDTO, OrderLineDTO, VerifyPaymentDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.payments.port import PaymentGateway, PaymentIntent
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderPlacement:
    """Result of ``create_order``; ``payment_intent`` only when payments are on."""

    order: Order
    payment_intent: Optional[PaymentIntent] = None


def status_message(status: str) -> str:
    return f"Order status updated to: {status.replace('_', ' ')}"


class OrderService:
    """Application service for Order use-cases.

    Collaborators are injected; anything omitted falls back to the
    configured default (settings, payment gateway registry, global bus).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        catalog_repository: ICatalogRepository,
        pricing: Optional[PricingEngine] = None,
        gateway: Optional[PaymentGateway] = None,
        bus: Optional[IEventBus] = None,
        payments_enabled: Optional[bool] = None,
        test_mode: Optional[bool] = None,
        restore_policy: Optional[str] = None,
    ) -> None:
        self._order_repo = order_repository
        self._catalog_repo = catalog_repository
        self._pricing = pricing or PricingEngine(catalog_repository)
        self._gateway = gateway
        self._bus = bus or default_event_bus
        self.payments_enabled = (
            settings.PAYMENTS_ENABLED if payments_enabled is None else payments_enabled
        )
        self.test_mode = settings.PAYMENTS_TEST_MODE if test_mode is None else test_mode
        self.restore_policy = StockRestorePolicy(
            restore_policy or settings.ORDER_STOCK_RESTORE_POLICY
        )

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway or get_gateway()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, user: Any, dto: CreateOrderDTO) -> OrderPlacement:
        """Price, persist and either confirm or register a payment intent.

        Raises:
            OrderValidationError: inactive user or a line with no valid item.
            CatalogItemUnavailable: a selected item is switched off.
            InsufficientStock: confirmation could not reserve stock.
            PaymentGatewayError: the payment intent could not be registered.
        """
        log = logger.bind(user_id=str(user.pk), line_count=len(dto.items))
        if not user.is_active:
            raise OrderValidationError("Inactive users cannot place orders.")

        log.info("order.creation_started")
        intent = None

        with transaction.atomic():
            lines = [self._price_line(line) for line in dto.items]
            if dto.delivery_address is not None:
                address = dto.delivery_address.model_dump()
            else:
                address = user.default_address()

            order = self._order_repo.create(
                {
                    "user_id": user.pk,
                    "items": lines,
                    "delivery_address": address,
                    "notes": dto.notes,
                }
            )
            self._order_repo.add_history(
                order_id=order.id,
                status=OrderStatus.PENDING,
                notes="Order created",
                user=user,
            )
            self._record(OrderCreated, order, "Order created")
            log = log.bind(order_id=str(order.id), order_number=order.order_number)

            if not self.payments_enabled:
                self._confirm(
                    order,
                    payment_id=f"pay_mock_{int(timezone.now().timestamp() * 1000)}",
                    notes="Auto-confirmed (payments disabled)",
                )
                self._record(
                    OrderConfirmed, order, "Order confirmed (payment disabled mode)"
                )
            else:
                intent = self.gateway.create_payment_intent(
                    amount_minor=to_minor_units(order.total_amount),
                    currency=settings.PAYMENT_CURRENCY,
                    receipt=order.order_number,
                    notes={"order_id": str(order.id), "user_id": str(user.pk)},
                )
                order.gateway_order_id = intent.id
                self._order_repo.save(order)
                log.info("order.payment_intent_registered", gateway_order_id=intent.id)

        log.info(
            "order.created",
            status=order.status,
            total_amount=str(order.total_amount),
        )
        self._publish(order)
        return OrderPlacement(
            order=self._order_repo.get_by_id(str(order.id)) or order,
            payment_intent=intent,
        )

    def verify_payment(self, user: Any, dto: VerifyPaymentDTO) -> Order:
        """Confirm a pending order after the client's checkout callback.

        Raises:
            OrderNotFound, OrderPermissionDenied,
            InvalidOrderStatus: the order is not awaiting payment.
            PaymentVerificationFailed: signature mismatch (no state change).
            InsufficientStock: stock ran out since the order was placed.
        """
        log = logger.bind(order_id=str(dto.order_id), user_id=str(user.pk))
        with transaction.atomic():
            order = self._locked(dto.order_id)
            if order.user_id != user.pk:
                log.warning("order.payment_foreign_order")
                raise OrderPermissionDenied("You do not own this order.")
            if order.status != OrderStatus.PENDING or (
                order.payment_status == PaymentStatus.PAID
            ):
                raise InvalidOrderStatus("Order is not awaiting payment.")

            gateway_order_id = order.gateway_order_id or dto.gateway_order_id or ""
            if (
                dto.gateway_order_id
                and order.gateway_order_id
                and dto.gateway_order_id != order.gateway_order_id
            ):
                log.warning("order.payment_intent_mismatch")
                raise PaymentVerificationFailed("Payment does not belong to this order.")

            if self.test_mode:
                log.info("order.signature_check_skipped")
            elif not self.gateway.verify_signature(
                gateway_order_id, dto.payment_id, dto.signature
            ):
                log.warning("order.signature_mismatch")
                raise PaymentVerificationFailed("Invalid payment signature.")

            self._confirm(
                order, payment_id=dto.payment_id, actor=user, notes="Payment verified"
            )
            self._record(
                OrderConfirmed, order, "Order confirmed and payment successful!"
            )

        log.info("order.payment_verified")
        self._publish(order)
        return self._order_repo.get_by_id(str(order.id)) or order

    def update_status(
        self,
        order_id: Any,
        new_status: str,
        actor: Any = None,
        notes: str = "",
    ) -> Order:
        """Admin driven transition along the order state machine.

        ``in_kitchen`` and ``out_for_delivery`` refresh the delivery
        estimate; ``cancelled`` goes through the cancellation path so
        stock is restored.

        Raises:
            OrderValidationError: unknown status value.
            OrderNotFound, InvalidOrderStatus, InsufficientStock.
        """
        if new_status not in OrderStatus.values:
            raise OrderValidationError(f"Invalid status: {new_status}.")
        if new_status == OrderStatus.CANCELLED:
            return self._cancel(order_id, actor, notes, enforce_owner=False)

        log = logger.bind(order_id=str(order_id), new_status=new_status)
        with transaction.atomic():
            order = self._locked(order_id)
            log = log.bind(current_status=order.status)
            if not order.can_transition_to(new_status):
                log.warning("order.invalid_transition")
                raise InvalidOrderStatus(
                    f"Cannot transition from {order.status} to {new_status}."
                )

            message = status_message(new_status)
            if new_status == OrderStatus.CONFIRMED:
                if self.payments_enabled and order.payment_status != PaymentStatus.PAID:
                    raise InvalidOrderStatus("Order cannot be confirmed before payment.")
                self._confirm(
                    order,
                    payment_id=order.payment_id or f"pay_manual_{order.order_number}",
                    actor=actor,
                    notes=notes,
                )
            else:
                old_status = order.status
                order.status = new_status
                if new_status in ETA_MINUTES:
                    order.estimated_delivery_time = timezone.now() + timedelta(
                        minutes=ETA_MINUTES[new_status]
                    )
                self._order_repo.save(order)
                self._order_repo.add_history(
                    order_id=order.id,
                    status=new_status,
                    notes=notes,
                    old_status=old_status,
                    user=actor,
                )
            self._record(OrderStatusChanged, order, message)

        log.info("order.status_updated")
        self._publish(order)
        return self._order_repo.get_by_id(str(order.id)) or order

    def cancel_order(self, order_id: Any, user: Any, notes: str = "") -> Order:
        """Owner cancellation; only ``pending`` or ``confirmed`` orders.

        Raises:
            OrderNotFound, OrderPermissionDenied, InvalidOrderStatus.
        """
        return self._cancel(order_id, user, notes, enforce_owner=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Any, user: Any = None) -> Order:
        """Retrieve one order; non-admin callers must own it.

        Raises:
            OrderNotFound, OrderPermissionDenied.
        """
        order = self._order_repo.require(order_id, OrderNotFound)
        if user is not None and not user.is_admin and order.user_id != user.pk:
            raise OrderPermissionDenied("You do not own this order.")
        return order

    def list_user_orders(self, user: Any) -> QuerySet:
        """The user's orders, newest first."""
        return self._order_repo.queryset({"user_id": user.pk})

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        return self._order_repo.queryset(filters)

    def payment_config(self) -> Dict[str, Any]:
        return {
            "payments_enabled": self.payments_enabled,
            "key_id": settings.RAZORPAY_KEY_ID or None,
            "test_mode": self.test_mode,
            "currency": settings.PAYMENT_CURRENCY,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _locked(self, order_id: Any) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _price_line(self, line: OrderLineDTO) -> Dict[str, Any]:
        quote = self._pricing.quote(
            line.selection, quantity=line.quantity, require_available=True
        )
        if not quote.components:
            raise OrderValidationError(
                "Each order item needs at least one valid ingredient."
            )
        by_slot: Dict[str, List[Any]] = {}
        for component in quote.components:
            by_slot.setdefault(component.slot, []).append(component.id)
        return {
            "catalog_item_id": quote.components[0].id,
            "base_id": by_slot.get("base", [None])[0],
            "sauce_id": by_slot.get("sauce", [None])[0],
            "cheese_id": by_slot.get("cheese", [None])[0],
            "vegetable_ids": by_slot.get("vegetable", []),
            "meat_ids": by_slot.get("meat", []),
            "quantity": quote.quantity,
            "unit_price": quote.unit_price,
        }

    def _confirm(
        self,
        order: Order,
        payment_id: str,
        actor: Any = None,
        notes: str = "",
    ) -> None:
        """Mark paid and confirmed, set the ETA and decrement stock.

        Must run inside the caller's transaction.
        """
        self._catalog_repo.decrement_stock(component_quantities(order.items.all()))

        old_status = order.status
        order.payment_status = PaymentStatus.PAID
        order.payment_id = payment_id
        order.status = OrderStatus.CONFIRMED
        order.estimated_delivery_time = timezone.now() + timedelta(
            minutes=ETA_MINUTES[OrderStatus.CONFIRMED]
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.CONFIRMED,
            notes=notes,
            old_status=old_status,
            user=actor,
        )
        logger.info(
            "order.confirmed",
            order_id=str(order.id),
            payment_id=payment_id,
        )

    def _cancel(
        self, order_id: Any, actor: Any, notes: str, enforce_owner: bool
    ) -> Order:
        log = logger.bind(order_id=str(order_id))
        with transaction.atomic():
            order = self._locked(order_id)
            if enforce_owner and order.user_id != getattr(actor, "pk", None):
                log.warning("order.cancel_foreign_order")
                raise OrderPermissionDenied("You do not own this order.")
            if not order.is_cancellable:
                log.warning("order.cancel_not_allowed", current_status=order.status)
                raise InvalidOrderStatus(f"Cannot cancel order in status {order.status}.")

            old_status = order.status
            restore = self._restore_quantities(order, old_status)
            if restore:
                self._catalog_repo.increment_stock(restore)

            order.status = OrderStatus.CANCELLED
            self._order_repo.save(order)
            self._order_repo.add_history(
                order_id=order.id,
                status=OrderStatus.CANCELLED,
                notes=notes or "Order cancelled",
                old_status=old_status,
                user=actor,
            )
            self._record(OrderCancelled, order, "Order cancelled")

        log.info(
            "order.cancelled",
            previous_status=old_status,
            restore_policy=self.restore_policy.value,
            restored_items=len(restore),
        )
        self._publish(order)
        return self._order_repo.get_by_id(str(order.id)) or order

    def _restore_quantities(self, order: Order, old_status: str) -> Dict[Any, int]:
        if self.restore_policy == StockRestorePolicy.COMPONENTS:
            if old_status != OrderStatus.CONFIRMED:
                return {}
            return component_quantities(order.items.all())

        restore: Counter = Counter()
        for item in order.items.all():
            restore[item.catalog_item_id] += item.quantity
        return dict(restore)

    @staticmethod
    def _record(event_class: type, order: Order, message: str) -> None:
        order.add_domain_event(
            event_class(
                aggregate_id=order.id,
                user_id=str(order.user_id),
                status=order.status,
                message=message,
            )
        )

    def _publish(self, order: Order) -> None:
        """Hand the collected events to the bus once the transaction is over."""
        events: List[OrderEvent] = order.pull_domain_events()
        self._bus.publish_all(events)


def component_quantities(items: Iterable[Any]) -> Dict[Any, int]:
    """Units per catalog item across ``items`` (component x line quantity)."""
    totals: Counter = Counter()
    for item in items:
        for component_id in item.component_ids():
            totals[component_id] += item.quantity
    return dict(totals)


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
