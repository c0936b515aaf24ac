from decimal import Decimal
from types import SimpleNamespace

from reimbursements.engine.allocation import allocate


def _payment(pid, capacity):
    return SimpleNamespace(id=pid, credit_allowed=Decimal(capacity))


def test_single_payment_covers_total():
    result = allocate(Decimal("10.00"), [_payment(1, "10.00")])
    assert result.complete
    assert result.remaining == Decimal("0")
    assert [(a.payment_id, a.amount) for a in result.allocations] == [(1, Decimal("10.00"))]


def test_spreads_over_payments_in_order():
    payments = [_payment(1, "4.00"), _payment(2, "10.00"), _payment(3, "10.00")]
    result = allocate(Decimal("12.00"), payments)
    assert result.complete
    assert [(a.payment_id, a.amount) for a in result.allocations] == [
        (1, Decimal("4.00")),
        (2, Decimal("8.00")),
    ]
    assert result.allocated == Decimal("12.00")


def test_skips_zero_capacity_payments():
    payments = [_payment(1, "0.00"), _payment(2, "5.00")]
    result = allocate(Decimal("5.00"), payments)
    assert [a.payment_id for a in result.allocations] == [2]


def test_shortfall_is_reported():
    payments = [_payment(1, "3.00"), _payment(2, "2.00")]
    result = allocate(Decimal("9.00"), payments)
    assert not result.complete
    assert result.remaining == Decimal("4.00")
    assert result.allocated == Decimal("5.00")


def test_no_payments_means_full_shortfall():
    result = allocate(Decimal("1.00"), [])
    assert not result.complete
    assert result.remaining == Decimal("1.00")
    assert result.allocations == []


def test_zero_total_allocates_nothing():
    result = allocate(Decimal("0.00"), [_payment(1, "5.00")])
    assert result.complete
    assert result.allocations == []


def test_does_not_mutate_payments():
    p = _payment(1, "5.00")
    allocate(Decimal("3.00"), [p])
    assert p.credit_allowed == Decimal("5.00")
