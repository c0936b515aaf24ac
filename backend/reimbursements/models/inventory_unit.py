from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from reimbursements.db import Base


class InventoryUnit(Base):
    __tablename__ = "inventory_units"
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    variant_id = Column(Integer, ForeignKey("variants.id"), nullable=False, index=True)
    shipment_id = Column(Integer, ForeignKey("shipments.id"), nullable=True, index=True)
    state = Column(
        String(32), nullable=False, default="on_hand"
    )  # on_hand, backordered, shipped, returned
    # set on units sent out as an exchange
    original_return_item_id = Column(Integer, nullable=True, index=True)

    order = relationship("Order", back_populates="inventory_units")
    variant = relationship("Variant")
    shipment = relationship("Shipment", back_populates="inventory_units")
