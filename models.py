import enum

from sqlalchemy import JSON, Column, DateTime, Enum, Float, Integer, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func

Base = declarative_base()


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    customer_email = Column(String, nullable=False)
    items = Column(JSON, nullable=False, default=list)  # snapshots: id, name, price, quantity, image
    total_amount = Column(Float, nullable=False)
    currency = Column(String, default="usd")
    status = Column(
        Enum(
            OrderStatus,
            native_enum=False,
            create_constraint=True,
            validate_strings=True,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    stripe_session_id = Column(String, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "customerEmail": self.customer_email,
            "items": self.items,
            "totalAmount": self.total_amount,
            "currency": self.currency,
            "status": self.status.value,
            "stripeSessionId": self.stripe_session_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


def init_db(database_url):
    """Create the engine and tables, returning a session factory bound to it."""
    kwargs = {}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, or every session sees its own empty database
        kwargs = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    engine = create_engine(database_url, **kwargs)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
