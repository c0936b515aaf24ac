from decimal import Decimal
from types import SimpleNamespace

from reimbursements.engine.aggregator import (
    calculated_total,
    item_contribution,
    reimbursement_amounts,
)


def _item(pre_tax, additional="0", included="0", exchange=False):
    return SimpleNamespace(
        pre_tax_amount=Decimal(pre_tax),
        additional_tax_total=Decimal(additional),
        included_tax_total=Decimal(included),
        exchange_variant=object() if exchange else None,
        exchange_required=lambda: exchange,
    )


def test_rounds_down_after_summing():
    # 10.003 + 10.003 = 20.006 -> 20.00, not 20.01
    total = calculated_total([_item("10.003"), _item("10.003")])
    assert total == Decimal("20.00")


def test_does_not_round_each_item_first():
    # per-item flooring would give 0.00
    total = calculated_total([_item("0.006"), _item("0.006")])
    assert total == Decimal("0.01")


def test_empty_items_total_zero():
    assert calculated_total([]) == Decimal("0.00")


def test_exclusive_tax_is_added():
    item = _item("10.00", additional="1.00")
    assert item_contribution(item) == Decimal("11.00")
    assert calculated_total([item]) == Decimal("11.00")


def test_included_tax_is_already_backed_out():
    item = _item("9.0909", included="-0.9091")
    assert calculated_total([item]) == Decimal("9.09")


def test_missing_components_count_as_zero():
    item = SimpleNamespace(pre_tax_amount=Decimal("5.00"), additional_tax_total=None)
    assert calculated_total([item]) == Decimal("5.00")


def test_settle_policy_splits_refund_and_exchange():
    items = [_item("10.005"), _item("5.005", exchange=True)]
    amounts = reimbursement_amounts(items, "settle")
    assert amounts.total == Decimal("15.01")
    assert amounts.refund_due == Decimal("10.00")
    assert amounts.exchange_total == Decimal("5.01")
    assert amounts.refund_due + amounts.exchange_total == amounts.total


def test_refund_policy_refunds_exchanges_too():
    items = [_item("10.00"), _item("5.00", exchange=True)]
    amounts = reimbursement_amounts(items, "refund")
    assert amounts.total == Decimal("15.00")
    assert amounts.refund_due == Decimal("15.00")
    assert amounts.exchange_total == Decimal("0.00")


def test_exclude_policy_drops_exchanges_from_total():
    items = [_item("10.00"), _item("5.00", exchange=True)]
    amounts = reimbursement_amounts(items, "exclude")
    assert amounts.total == Decimal("10.00")
    assert amounts.refund_due == Decimal("10.00")
    assert amounts.exchange_total == Decimal("0.00")
