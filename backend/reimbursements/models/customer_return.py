from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from reimbursements.db import Base


class CustomerReturn(Base):
    __tablename__ = "customer_returns"
    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(32), unique=True, nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    order = relationship("Order")
    return_items = relationship(
        "ReturnItem",
        back_populates="customer_return",
        order_by="ReturnItem.id",
        cascade="all, delete-orphan",
    )

    def fully_reimbursed(self) -> bool:
        """True once every accepted item sits on a performed reimbursement."""
        accepted = [ri for ri in self.return_items if ri.acceptance_status == "accepted"]
        return bool(accepted) and all(
            ri.reimbursement is not None and ri.reimbursement.performed
            for ri in accepted
        )
