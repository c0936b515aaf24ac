from decimal import Decimal
from itertools import count

from reimbursements.models import (
    CustomerReturn,
    InventoryUnit,
    Order,
    Payment,
    Refund,
    ReturnItem,
    Variant,
)

_seq = count(1)


def create_variant(db, sku=None, stock=5, price="10.00"):
    n = next(_seq)
    v = Variant(sku=sku or f"SKU-{n}", name=f"Variant {n}", price=Decimal(price), stock=stock)
    db.add(v)
    db.commit()
    return v


def create_order(db, total="10.00", currency="USD", email="buyer@example.com"):
    order = Order(
        number=f"R{next(_seq):09d}",
        email=email,
        currency=currency,
        state="complete",
        total=Decimal(total),
    )
    db.add(order)
    db.commit()
    return order


def create_payment(db, order, amount, state="completed"):
    p = Payment(
        number=f"P{next(_seq):07d}", order_id=order.id, amount=Decimal(amount), state=state
    )
    db.add(p)
    db.commit()
    return p


def create_refund(db, payment, amount):
    """A refund recorded outside of any reimbursement."""
    r = Refund(payment_id=payment.id, amount=Decimal(amount), reason="Goodwill")
    db.add(r)
    db.commit()
    return r


def create_customer_return(db, order, items):
    """
    items: list of dicts with ReturnItem column values, e.g.
        {"pre_tax_amount": "10.00", "acceptance_status": "accepted"}
    Each item gets a shipped inventory unit on the order.
    """
    variant = create_variant(db)
    cr = CustomerReturn(number=f"RA{next(_seq):09d}", order_id=order.id)
    db.add(cr)
    db.flush()
    for item in items:
        unit = InventoryUnit(order_id=order.id, variant_id=variant.id, state="returned")
        db.add(unit)
        db.flush()
        values = {"acceptance_status": "accepted"}
        values.update(item)
        for key in ("pre_tax_amount", "additional_tax_total", "included_tax_total"):
            if key in values:
                values[key] = Decimal(values[key])
        db.add(ReturnItem(customer_return_id=cr.id, inventory_unit_id=unit.id, **values))
    db.commit()
    return cr
