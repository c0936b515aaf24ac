from decimal import Decimal

import pytest

from factories import create_variant
from reimbursements.models import Variant
from reimbursements.utils.transactions import smart_transaction, unit_of_work


def _variant(sku):
    return Variant(sku=sku, name=sku, price=Decimal("1.00"), stock=1)


def test_failed_savepoint_keeps_outer_work(db):
    create_variant(db, sku="KEEP")
    db.add(_variant("OUTER"))
    db.flush()

    with pytest.raises(RuntimeError):
        with smart_transaction(db, "inner"):
            db.add(_variant("INNER"))
            db.flush()
            raise RuntimeError("boom")

    db.commit()
    assert {v.sku for v in db.query(Variant)} == {"KEEP", "OUTER"}


def test_unit_of_work_commits(db, other_db):
    with unit_of_work(db, "add variant"):
        db.add(_variant("NEW"))

    assert other_db.query(Variant).filter(Variant.sku == "NEW").count() == 1


def test_unit_of_work_commits_nothing_on_error(db, other_db):
    with pytest.raises(ValueError):
        with unit_of_work(db, "add variant"):
            db.add(_variant("NEW"))
            db.flush()
            raise ValueError("bad")

    assert other_db.query(Variant).count() == 0
