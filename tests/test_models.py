import pytest
from sqlalchemy.exc import IntegrityError

from config import stripe_key_is_usable
from models import Order, OrderStatus, init_db


@pytest.fixture()
def db_session():
    session_factory = init_db("sqlite://")
    with session_factory() as db:
        yield db


def _order(**overrides):
    fields = {
        "customer_email": "buyer@example.com",
        "items": [{"id": "1", "name": "Magnet", "price": 10.0, "quantity": 2, "image": None}],
        "total_amount": 20.0,
        "stripe_session_id": "cs_test_1",
    }
    fields.update(overrides)
    return Order(**fields)


def test_defaults_to_pending(db_session):
    order = _order()
    db_session.add(order)
    db_session.commit()

    assert order.status == OrderStatus.PENDING
    assert order.currency == "usd"


def test_timestamps_are_set(db_session):
    db_session.add(_order())
    db_session.commit()

    order = db_session.query(Order).one()
    assert order.created_at is not None
    assert order.updated_at is not None


def test_cancelled_is_a_declared_status(db_session):
    db_session.add(_order(status=OrderStatus.CANCELLED))
    db_session.commit()

    assert db_session.query(Order).one().status == OrderStatus.CANCELLED


def test_session_id_is_unique(db_session):
    db_session.add(_order())
    db_session.commit()
    db_session.add(_order(customer_email="other@example.com"))
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_to_dict(db_session):
    db_session.add(_order())
    db_session.commit()

    data = db_session.query(Order).one().to_dict()
    assert data["status"] == "pending"
    assert data["totalAmount"] == 20.0
    assert data["items"][0]["name"] == "Magnet"


@pytest.mark.parametrize(
    "key, usable",
    [("sk_test_abc", True), ("", False), (None, False), ("sk_test_replace_me", False)],
)
def test_stripe_key_check(key, usable):
    assert stripe_key_is_usable(key) is usable
