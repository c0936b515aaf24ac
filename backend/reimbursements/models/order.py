from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from reimbursements.db import Base


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(32), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    state = Column(String(32), nullable=False, default="complete")
    total = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    payments = relationship(
        "Payment", back_populates="order", order_by="Payment.id"
    )
    shipments = relationship(
        "Shipment", back_populates="order", order_by="Shipment.id"
    )
    inventory_units = relationship(
        "InventoryUnit", back_populates="order", order_by="InventoryUnit.id"
    )
