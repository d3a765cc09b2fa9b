"""Checkout flow: hosted payment sessions and order reconciliation.

An order is written as ``pending`` when the gateway issues a session and is
resolved later, either by the storefront calling ``verify_session`` /
``cancel_session`` on return from the hosted page or by a gateway webhook.
"""

from decimal import ROUND_HALF_UP, Decimal

import structlog
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from errors import InvalidRequest
from models import Order, OrderStatus
from schemas import CartItem, CheckoutRequest

logger = structlog.get_logger(__name__)

# event type -> resulting order status
WEBHOOK_STATUSES = {
    "checkout.session.async_payment_succeeded": OrderStatus.COMPLETED,
    "checkout.session.async_payment_failed": OrderStatus.FAILED,
    "checkout.session.expired": OrderStatus.CANCELLED,
}


def to_minor_units(amount):
    """Convert a major-unit amount to cents, rounding half up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def order_total(items):
    return sum(to_minor_units(item.price) * item.quantity for item in items) / 100


def _format_errors(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        loc = list(error["loc"])
        prefix = ""
        if len(loc) >= 2 and loc[0] == "items" and isinstance(loc[1], int):
            prefix = f"Invalid item {loc[1]}: "
            loc = loc[2:]
        location = ".".join(str(part) for part in loc)
        problems.append(f"{prefix}{location}: {error['msg']}" if location else f"{prefix}{error['msg']}")
    return "; ".join(problems)


def parse_request(data) -> CheckoutRequest:
    """Validate a checkout body; the email is checked before anything else."""
    if not isinstance(data, dict):
        data = {}
    email = data.get("email")
    if not isinstance(email, str) or not email.strip():
        raise InvalidRequest("Email is required")
    if data.get("items") in (None, []):
        raise InvalidRequest("Cart is empty")

    try:
        return CheckoutRequest.model_validate(data)
    except ValidationError as e:
        raise InvalidRequest(_format_errors(e)) from e


class CheckoutService:
    def __init__(self, session_factory, gateway, frontend_url, currency="usd"):
        self.session_factory = session_factory
        self.gateway = gateway
        self.frontend_url = frontend_url.rstrip("/")
        self.currency = currency

    def build_line_items(self, items: list[CartItem]) -> list[dict]:
        line_items = []
        for item in items:
            product_data = {"name": item.name}
            if item.image:
                product_data["images"] = [item.image]
            line_items.append(
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": product_data,
                        "unit_amount": to_minor_units(item.price),
                    },
                    "quantity": item.quantity,
                }
            )
        return line_items

    def create_session(self, items, email):
        """Open a hosted checkout session and record a pending order for it.

        ``items`` is the cart as posted by the client; it goes through
        ``parse_request`` so a missing email is reported whatever state the
        cart is in. Gateway failures propagate as ``GatewayError``; a failure
        to save the order is logged and does not fail the checkout.
        """
        checkout_request = parse_request({"items": items, "email": email})
        items = checkout_request.items
        total_amount = order_total(items)

        session = self.gateway.create_checkout_session(
            line_items=self.build_line_items(items),
            customer_email=checkout_request.email,
            success_url=f"{self.frontend_url}/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self.frontend_url}/cancel?session_id={{CHECKOUT_SESSION_ID}}",
        )
        logger.info("Checkout session created", session_id=session.id, total_amount=total_amount)

        db = self.session_factory()
        try:
            db.add(
                Order(
                    customer_email=checkout_request.email,
                    items=[item.model_dump() for item in items],
                    total_amount=total_amount,
                    currency=self.currency,
                    status=OrderStatus.PENDING,
                    stripe_session_id=session.id,
                )
            )
            db.commit()
            logger.info("Order saved", session_id=session.id)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Saving order failed, proceeding with checkout", session_id=session.id, error=str(e))
        finally:
            db.close()

        return session

    def verify_session(self, session_id):
        session = self.gateway.retrieve_session(session_id)
        if session.paid:
            self._set_status(session_id, OrderStatus.COMPLETED)
            return "success"
        self._set_status(session_id, OrderStatus.FAILED)
        return "failed"

    def cancel_session(self, session_id):
        self._set_status(session_id, OrderStatus.CANCELLED)
        return "cancelled"

    def handle_event(self, event):
        """Apply a gateway webhook event; returns the status written, if any."""
        event_type = event.get("type") if isinstance(event, dict) else None
        data = event.get("data") if event_type else None
        session_obj = data.get("object") if isinstance(data, dict) else None
        if not isinstance(session_obj, dict) or not session_obj.get("id"):
            logger.warning("Ignoring malformed webhook event", event_type=event_type)
            return None

        if event_type == "checkout.session.completed":
            if session_obj.get("payment_status") != "paid":
                # delayed payment methods settle through async_payment_* events
                return None
            status = OrderStatus.COMPLETED
        elif event_type in WEBHOOK_STATUSES:
            status = WEBHOOK_STATUSES[event_type]
        else:
            logger.debug("Ignoring webhook event", event_type=event_type)
            return None

        self._set_status(session_obj["id"], status)
        return status

    def get_order(self, session_id):
        with self.session_factory() as db:
            return db.scalars(select(Order).filter_by(stripe_session_id=session_id)).first()

    def _set_status(self, session_id, status):
        with self.session_factory() as db:
            order = db.scalars(select(Order).filter_by(stripe_session_id=session_id)).first()
            if order is None:
                logger.warning("No order for session", session_id=session_id, status=status.value)
                return
            order.status = status
            db.commit()
            logger.info("Order status updated", session_id=session_id, order_id=order.id, status=status.value)
