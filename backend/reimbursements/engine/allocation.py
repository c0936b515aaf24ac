"""
Refund allocation across an order's payments.

Pure functions with no side effects. Payments are only read; the caller turns
the returned allocations into Refund rows inside its own transaction.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Protocol, Sequence

ZERO = Decimal("0")


class RefundablePayment(Protocol):
    id: Any
    credit_allowed: Decimal


@dataclass(frozen=True)
class RefundAllocation:
    payment: Any
    amount: Decimal

    @property
    def payment_id(self):
        return self.payment.id


@dataclass(frozen=True)
class AllocationResult:
    allocations: List[RefundAllocation] = field(default_factory=list)
    remaining: Decimal = ZERO

    @property
    def complete(self) -> bool:
        return self.remaining <= ZERO

    @property
    def allocated(self) -> Decimal:
        return sum((a.amount for a in self.allocations), ZERO)


def allocate(total: Decimal, payments: Sequence[RefundablePayment]) -> AllocationResult:
    """
    Walk payments in the given order, taking as much of each payment's
    refundable capacity as the remaining need allows.

    Args:
        total: Amount that has to be refunded.
        payments: Ordered payments exposing ``credit_allowed``.

    Returns:
        AllocationResult whose ``remaining`` is the part no payment could
        cover. ``remaining > 0`` means the allocation failed.

    Example:
        total=30.00, capacities [10.00, 0.00, 50.00]
        -> allocations [10.00, 20.00], remaining 0.00
    """
    need = Decimal(total)
    if need <= ZERO:
        return AllocationResult(allocations=[], remaining=ZERO)

    allocations = []
    for payment in payments:
        if need <= ZERO:
            break
        capacity = Decimal(payment.credit_allowed or 0)
        if capacity <= ZERO:
            continue
        amount = min(need, capacity)
        allocations.append(RefundAllocation(payment=payment, amount=amount))
        need -= amount

    return AllocationResult(allocations=allocations, remaining=need)
