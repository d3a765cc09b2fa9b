import structlog
from flask import Blueprint, Flask, current_app, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from catalog import PRODUCTS
from checkout import CheckoutService, parse_request
from config import Config, stripe_key_is_usable
from errors import CheckoutError
from gateway import StripeGateway
from models import init_db
from schemas import CheckoutSessionResponse, StatusResponse

logger = structlog.get_logger(__name__)

api = Blueprint("checkout", __name__, url_prefix="/api")


def checkout_service() -> CheckoutService:
    return current_app.extensions["checkout"]


@api.errorhandler(CheckoutError)
def handle_checkout_error(e):
    return jsonify({"error": e.message}), e.status_code


@api.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.exception("Unhandled checkout error", path=request.path)
    return jsonify({"error": str(e)}), 500


@api.route("/checkout/create-session", methods=["POST"])
def create_session():
    checkout_request = parse_request(request.get_json(silent=True))
    logger.info(
        "Received checkout request", email=checkout_request.email, item_count=len(checkout_request.items)
    )

    session = checkout_service().create_session(checkout_request.items, checkout_request.email)
    return jsonify(CheckoutSessionResponse(id=session.id, url=session.url).model_dump())


@api.route("/checkout/verify/<session_id>")
def verify_session(session_id):
    status = checkout_service().verify_session(session_id)
    return jsonify(StatusResponse(status=status).model_dump())


@api.route("/checkout/cancel/<session_id>")
def cancel_session(session_id):
    status = checkout_service().cancel_session(session_id)
    return jsonify(StatusResponse(status=status).model_dump())


@api.route("/orders/<session_id>")
def get_order(session_id):
    order = checkout_service().get_order(session_id)
    if order is None:
        return jsonify({"error": "Order not found"}), 404
    return jsonify(order.to_dict())


@api.route("/webhook", methods=["POST"])
def webhook_received():
    service = checkout_service()
    payload = request.get_data()
    sig_header = request.headers.get("Stripe-Signature")
    event = service.gateway.construct_event(payload, sig_header)

    status = service.handle_event(event)
    return jsonify({"received": True, "status": status.value if status else None})


def register_storefront(app):
    @app.route("/")
    def index():
        return render_template("index.html", products=PRODUCTS)

    @app.route("/success")
    def success():
        return render_template("success.html", session_id=request.args.get("session_id"))

    @app.route("/cancel")
    def cancel():
        return render_template("cancel.html", session_id=request.args.get("session_id"))

    @app.route("/health")
    def health():
        return {"ok": True}


def create_app(overrides=None, gateway=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    if gateway is None:
        if not stripe_key_is_usable(app.config["STRIPE_SECRET_KEY"]):
            logger.critical("STRIPE_SECRET_KEY is missing or invalid")
        else:
            logger.info("Stripe secret key loaded")
        gateway = StripeGateway(app.config["STRIPE_SECRET_KEY"], app.config["STRIPE_WEBHOOK_SECRET"])

    # Setup DB
    session_factory = init_db(app.config["DATABASE_URL"])
    app.extensions["checkout"] = CheckoutService(
        session_factory,
        gateway,
        frontend_url=app.config["FRONTEND_URL"],
        currency=app.config["CURRENCY"],
    )

    app.register_blueprint(api)
    register_storefront(app)
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=True)
