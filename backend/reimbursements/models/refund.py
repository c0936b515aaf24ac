from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from reimbursements.db import Base


class Refund(Base):
    __tablename__ = "refunds"
    id = Column(Integer, primary_key=True, autoincrement=True)
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=False, index=True)
    # refunds issued outside of a reimbursement leave this empty
    reimbursement_id = Column(
        Integer, ForeignKey("reimbursements.id"), nullable=True, index=True
    )
    amount = Column(Numeric(12, 2), nullable=False)
    reason = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    payment = relationship("Payment", back_populates="refunds")
    reimbursement = relationship("Reimbursement", back_populates="refunds")
