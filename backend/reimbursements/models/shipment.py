from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from reimbursements.db import Base


class Shipment(Base):
    __tablename__ = "shipments"
    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(32), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    state = Column(String(32), nullable=False, default="pending")  # pending, ready, shipped
    is_exchange = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    order = relationship("Order", back_populates="shipments")
    inventory_units = relationship(
        "InventoryUnit", back_populates="shipment", order_by="InventoryUnit.id"
    )
