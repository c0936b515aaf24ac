from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from reimbursements.db import Base
from reimbursements.engine.aggregator import item_contribution

ACCEPTANCE_STATUSES = ("pending", "accepted", "rejected", "manual_intervention")


class ReturnItem(Base):
    __tablename__ = "return_items"
    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_return_id = Column(
        Integer, ForeignKey("customer_returns.id"), nullable=True, index=True
    )
    inventory_unit_id = Column(Integer, ForeignKey("inventory_units.id"), nullable=True)
    exchange_variant_id = Column(Integer, ForeignKey("variants.id"), nullable=True)
    exchange_inventory_unit_id = Column(
        Integer, ForeignKey("inventory_units.id"), nullable=True
    )

    # supplied by the tax engine; kept unrounded
    pre_tax_amount = Column(Numeric(12, 4), nullable=False, default=0)
    additional_tax_total = Column(Numeric(12, 4), nullable=False, default=0)  # >= 0
    included_tax_total = Column(Numeric(12, 4), nullable=False, default=0)  # <= 0
    acceptance_status = Column(String(32), nullable=False, default="pending")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    customer_return = relationship("CustomerReturn", back_populates="return_items")
    inventory_unit = relationship("InventoryUnit", foreign_keys=[inventory_unit_id])
    exchange_variant = relationship("Variant")
    exchange_inventory_unit = relationship(
        "InventoryUnit", foreign_keys=[exchange_inventory_unit_id]
    )
    reimbursement = relationship(
        "Reimbursement",
        secondary="reimbursement_return_items",
        uselist=False,
        viewonly=True,
    )

    def exchange_required(self) -> bool:
        return self.exchange_variant_id is not None or self.exchange_variant is not None

    @property
    def total(self):
        return item_contribution(self)

    def __repr__(self):
        return f"<ReturnItem id={self.id} status={self.acceptance_status}>"
