from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
)
from sqlalchemy.orm import relationship

from reimbursements.config import settings
from reimbursements.db import Base
from reimbursements.engine.aggregator import reimbursement_amounts
from reimbursements.engine.exchanges import return_items_requiring_exchange
from reimbursements.utils.money import Money

# return_item_id is unique: an item is reimbursed at most once
reimbursement_return_items = Table(
    "reimbursement_return_items",
    Base.metadata,
    Column(
        "reimbursement_id",
        Integer,
        ForeignKey("reimbursements.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "return_item_id",
        Integer,
        ForeignKey("return_items.id"),
        nullable=False,
        unique=True,
    ),
)


class Reimbursement(Base):
    __tablename__ = "reimbursements"
    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(32), unique=True, nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    customer_return_id = Column(
        Integer, ForeignKey("customer_returns.id"), nullable=True, index=True
    )
    total = Column(Numeric(12, 2), nullable=False, default=0)
    # part of total settled by exchange shipments instead of refunds
    exchange_total = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String(32), nullable=False, default="pending")  # pending, reimbursed
    performed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    order = relationship("Order")
    customer_return = relationship("CustomerReturn")
    return_items = relationship(
        "ReturnItem", secondary=reimbursement_return_items, order_by="ReturnItem.id"
    )
    refunds = relationship(
        "Refund", back_populates="reimbursement", order_by="Refund.id"
    )

    @property
    def performed(self) -> bool:
        return self.performed_at is not None

    def calculated_total(self, policy=None) -> Decimal:
        policy = policy or settings.EXCHANGE_TOTAL_POLICY
        return reimbursement_amounts(self.return_items, policy).total

    @property
    def display_total(self) -> Money:
        currency = self.order.currency if self.order is not None else "USD"
        return Money(self.total or 0, currency)

    def return_items_requiring_exchange(self):
        return return_items_requiring_exchange(self.return_items)

    @property
    def paid_amount(self) -> Decimal:
        refunded = sum((Decimal(r.amount) for r in self.refunds), Decimal("0"))
        return refunded + Decimal(self.exchange_total or 0)

    @property
    def unpaid_amount(self) -> Decimal:
        return Decimal(self.total or 0) - self.paid_amount

    def __repr__(self):
        return f"<Reimbursement number={self.number} status={self.status}>"
