"""Payment gateway port and adapters.

The checkout service only talks to ``PaymentGateway``. ``StripeGateway`` calls
Stripe Checkout for real; ``FakeGateway`` keeps sessions in memory so the app
can be exercised without credentials.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import uuid4

import stripe

from errors import GatewayError, InvalidRequest


@dataclass(frozen=True)
class CheckoutSession:
    """A hosted checkout session as issued by the gateway."""

    id: str
    url: str | None = None
    payment_status: str | None = None

    @property
    def paid(self) -> bool:
        return self.payment_status == "paid"


class PaymentGateway(ABC):
    @abstractmethod
    def create_checkout_session(
        self,
        line_items: list[dict],
        customer_email: str,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """Create a hosted payment page for the given line items."""
        ...

    @abstractmethod
    def retrieve_session(self, session_id: str) -> CheckoutSession:
        """Fetch a session and its current payment status."""
        ...

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str | None):
        """Verify a webhook payload and return the decoded event."""
        ...


class StripeGateway(PaymentGateway):
    def __init__(self, api_key: str, webhook_secret: str = "") -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_checkout_session(self, line_items, customer_email, success_url, cancel_url):
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                payment_method_types=["card"],
                line_items=line_items,
                mode="payment",
                customer_email=customer_email,
                success_url=success_url,
                cancel_url=cancel_url,
            )
        except stripe.StripeError as e:
            raise GatewayError(e.user_message or str(e)) from e
        return CheckoutSession(id=session.id, url=session.url, payment_status=session.payment_status)

    def retrieve_session(self, session_id):
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.StripeError as e:
            raise GatewayError(e.user_message or str(e)) from e
        return CheckoutSession(id=session.id, url=session.url, payment_status=session.payment_status)

    def construct_event(self, payload, signature):
        if not signature:
            raise InvalidRequest("Invalid webhook: missing Stripe-Signature header")
        try:
            if isinstance(payload, bytes):
                payload = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(payload, signature, self.webhook_secret)
            return json.loads(payload)
        except (ValueError, stripe.SignatureVerificationError) as e:
            raise InvalidRequest(f"Invalid webhook: {e}") from e


class FakeGateway(PaymentGateway):
    """In-memory gateway for development and tests."""

    def __init__(self, base_url: str = "https://checkout.fake.test/pay") -> None:
        self.base_url = base_url
        self.sessions: dict[str, CheckoutSession] = {}
        self.calls: list[dict] = []
        self.failure: str | None = None

    def fail_with(self, message: str | None) -> None:
        """Make every following call raise ``GatewayError(message)``; ``None`` resets."""
        self.failure = message

    def mark_paid(self, session_id: str) -> None:
        session = self.sessions[session_id]
        self.sessions[session_id] = CheckoutSession(id=session.id, url=session.url, payment_status="paid")

    def _check(self):
        if self.failure:
            raise GatewayError(self.failure)

    def create_checkout_session(self, line_items, customer_email, success_url, cancel_url):
        self.calls.append(
            {
                "method": "create_checkout_session",
                "line_items": line_items,
                "customer_email": customer_email,
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
        )
        self._check()
        session_id = f"cs_test_{uuid4().hex[:24]}"
        session = CheckoutSession(id=session_id, url=f"{self.base_url}/{session_id}", payment_status="unpaid")
        self.sessions[session_id] = session
        return session

    def retrieve_session(self, session_id):
        self.calls.append({"method": "retrieve_session", "session_id": session_id})
        self._check()
        try:
            return self.sessions[session_id]
        except KeyError:
            raise GatewayError(f"No such checkout.session: '{session_id}'") from None

    def construct_event(self, payload, signature):
        if signature != "test-signature":
            raise InvalidRequest("Invalid webhook: signature mismatch")
        try:
            return json.loads(payload)
        except ValueError as e:
            raise InvalidRequest(f"Invalid webhook: {e}") from e
