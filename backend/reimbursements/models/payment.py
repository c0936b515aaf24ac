from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from reimbursements.db import Base


class Payment(Base):
    __tablename__ = "payments"
    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(32), nullable=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    state = Column(
        String(32), nullable=False, default="checkout"
    )  # checkout, pending, completed, failed, void
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    order = relationship("Order", back_populates="payments")
    refunds = relationship("Refund", back_populates="payment", order_by="Refund.id")

    @property
    def completed(self) -> bool:
        return self.state == "completed"

    @property
    def refunded_total(self) -> Decimal:
        return sum((Decimal(r.amount) for r in self.refunds), Decimal("0"))

    @property
    def credit_allowed(self) -> Decimal:
        """Amount that can still be refunded against this payment."""
        return max(Decimal(self.amount or 0) - self.refunded_total, Decimal("0"))
