from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from reimbursements.log import get_logger

log = get_logger("transactions")


@contextmanager
def smart_transaction(session: Session, name: str = "transaction") -> Iterator[Session]:
    """
    Run the block in a transaction on ``session``.

    Inside an active transaction a SAVEPOINT (begin_nested) is used, so a
    failing block only discards its own writes and the outer transaction
    stays usable. Otherwise a plain begin() is used, which commits on exit.
    """
    nested = session.in_transaction()
    cm = session.begin_nested() if nested else session.begin()
    try:
        with cm:
            yield session
    except Exception as e:
        log.debug(
            "%s rolled back (%s): %s",
            name,
            "savepoint" if nested else "transaction",
            type(e).__name__,
        )
        raise


@contextmanager
def unit_of_work(session: Session, name: str) -> Iterator[Session]:
    """
    smart_transaction that commits the session once the block succeeds.

    Used for reimbursement performs: either every refund, exchange unit and
    status change is committed together, or none is. Nothing is committed
    when the block raises.
    """
    with smart_transaction(session, name):
        yield session
    session.commit()
    log.debug("%s committed", name)
