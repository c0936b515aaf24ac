"""
Monetary aggregation for reimbursements.

Pure functions, no I/O. All money math uses Decimal. Item contributions are
summed unrounded and the sum is floored to 2 decimal places once, at the end.
"""
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal

from reimbursements.engine.exchanges import split_for_policy

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def _amount(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def item_contribution(return_item) -> Decimal:
    """
    Unrounded amount a return item adds to a reimbursement.

    pre_tax_amount already has any included tax backed out, so only the
    additional (exclusive) tax is added on top of it. included_tax_total is
    informational here.
    """
    return _amount(return_item.pre_tax_amount) + _amount(
        getattr(return_item, "additional_tax_total", None)
    )


def calculated_total(return_items) -> Decimal:
    """
    Sum item contributions, then round the sum down to cents.

    Example:
        two items with pre_tax_amount=10.003
        -> 10.003 + 10.003 = 20.006 -> 20.00
    """
    total = sum((item_contribution(ri) for ri in return_items), ZERO)
    return total.quantize(CENTS, rounding=ROUND_FLOOR)


@dataclass(frozen=True)
class ReimbursementAmounts:
    total: Decimal
    refund_due: Decimal
    exchange_total: Decimal


def reimbursement_amounts(return_items, policy) -> ReimbursementAmounts:
    """
    Split a reimbursement's total into what is refunded and what exchanges settle.

    Both figures are floored independently and exchange_total takes the
    difference, so refund_due + exchange_total == total always holds.
    """
    split = split_for_policy(return_items, policy)
    total = calculated_total(split.counted)
    refund_due = calculated_total(split.refundable)
    return ReimbursementAmounts(
        total=total,
        refund_due=refund_due,
        exchange_total=total - refund_due,
    )
