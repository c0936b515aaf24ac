"""
Reimbursement service: builds reimbursements from customer returns and
performs them.

Flow: build -> save -> perform (aggregate -> allocate -> exchange -> commit -> notify)
"""
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from filelock import FileLock, Timeout
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reimbursements.adapters.mock_mailer import MockMailerAdapter
from reimbursements.config import settings
from reimbursements.engine.aggregator import reimbursement_amounts
from reimbursements.engine.allocation import RefundAllocation, allocate
from reimbursements.engine.exchanges import (
    ExchangeRequest,
    ExchangeTotalPolicy,
    plan_exchanges,
)
from reimbursements.engine.identifiers import ReimbursementNumberGenerator
from reimbursements.errors import (
    IncompleteReimbursement,
    ReimbursementAlreadyPerformed,
    ReimbursementError,
)
from reimbursements.log import get_logger
from reimbursements.models.customer_return import CustomerReturn
from reimbursements.models.payment import Payment
from reimbursements.models.refund import Refund
from reimbursements.models.reimbursement import (
    Reimbursement,
    reimbursement_return_items,
)
from reimbursements.models.return_item import ReturnItem
from reimbursements.services.fulfilment_service import FulfilmentService
from reimbursements.utils.transactions import unit_of_work

log = get_logger("reimbursement")


@dataclass
class ReimbursementSimulation:
    total: Decimal
    refund_due: Decimal
    exchange_total: Decimal
    allocations: List[RefundAllocation] = field(default_factory=list)
    exchanges: List[ExchangeRequest] = field(default_factory=list)
    remaining: Decimal = Decimal("0")

    @property
    def complete(self) -> bool:
        return self.remaining <= 0


class ReimbursementService:
    def __init__(
        self,
        db: Session,
        notifier=None,
        number_generator: Optional[ReimbursementNumberGenerator] = None,
        policy: Optional[str] = None,
    ):
        self.db = db
        self.notifier = notifier or MockMailerAdapter()
        self.numbers = number_generator or ReimbursementNumberGenerator(
            max_attempts=settings.NUMBER_MAX_ATTEMPTS
        )
        self.policy = ExchangeTotalPolicy(policy or settings.EXCHANGE_TOTAL_POLICY)
        self.fulfilment = FulfilmentService(db)

    def _number_taken(self, number: str) -> bool:
        return (
            self.db.query(Reimbursement.id)
            .filter(Reimbursement.number == number)
            .first()
            is not None
        )

    def _lock_path(self, order_id: int) -> str:
        os.makedirs(settings.LOCK_DIR, exist_ok=True)
        return os.path.join(settings.LOCK_DIR, f"reimburse_order_{order_id}.lock")

    def _eligible_payments(self, order_id: int, lock: bool = False) -> List[Payment]:
        qry = (
            self.db.query(Payment)
            .filter(Payment.order_id == order_id, Payment.state == "completed")
            .order_by(Payment.created_at, Payment.id)
            # reload refunds committed by other sessions since these were cached
            .populate_existing()
        )
        if lock:
            qry = qry.with_for_update()
        return qry.all()

    def get(self, reimbursement_id: int) -> Optional[Reimbursement]:
        return (
            self.db.query(Reimbursement)
            .filter(Reimbursement.id == reimbursement_id)
            .first()
        )

    def build_from_customer_return(
        self, customer_return: CustomerReturn
    ) -> Reimbursement:
        """
        Build an unsaved reimbursement holding the return's accepted items that
        no other reimbursement has claimed yet.
        """
        attached = select(reimbursement_return_items.c.return_item_id)
        items = (
            self.db.query(ReturnItem)
            .filter(
                ReturnItem.customer_return_id == customer_return.id,
                ReturnItem.acceptance_status == "accepted",
                ReturnItem.id.not_in(attached),
            )
            .order_by(ReturnItem.id)
            .all()
        )
        reimbursement = Reimbursement(
            order=customer_return.order,
            customer_return=customer_return,
            return_items=items,
        )
        log.info(
            "built reimbursement for return %s with %d item(s)",
            customer_return.number,
            len(items),
        )
        return reimbursement

    def save(self, reimbursement: Reimbursement) -> Reimbursement:
        """
        Persist a reimbursement and claim its return items.

        A return item already claimed by another reimbursement violates the
        unique association and raises IntegrityError after a rollback.
        """
        order = reimbursement.order
        if order is None:
            raise ReimbursementError("Reimbursement requires an order")
        foreign = [
            ri
            for ri in reimbursement.return_items
            if ri.customer_return is not None
            and ri.customer_return.order_id != order.id
        ]
        if foreign:
            raise ReimbursementError(
                f"Return items {[ri.id for ri in foreign]} do not belong to order {order.number}"
            )

        if not reimbursement.number:
            reimbursement.number = self.numbers.generate(exists=self._number_taken)
        reimbursement.total = reimbursement.calculated_total(self.policy)

        try:
            self.db.add(reimbursement)
            self.db.flush()
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            log.warning(
                "could not save reimbursement %s: return item already reimbursed",
                reimbursement.number,
            )
            raise
        self.db.refresh(reimbursement)
        log.info("saved reimbursement %s total=%s", reimbursement.number, reimbursement.total)
        return reimbursement

    def simulate(self, reimbursement: Reimbursement) -> ReimbursementSimulation:
        """Compute what perform would do, without writing anything."""
        amounts = reimbursement_amounts(reimbursement.return_items, self.policy)
        allocation = allocate(
            amounts.refund_due, self._eligible_payments(reimbursement.order.id)
        )
        return ReimbursementSimulation(
            total=amounts.total,
            refund_due=amounts.refund_due,
            exchange_total=amounts.exchange_total,
            allocations=allocation.allocations,
            exchanges=plan_exchanges(reimbursement.return_items),
            remaining=allocation.remaining,
        )

    def perform(self, reimbursement: Reimbursement) -> Reimbursement:
        """
        Refund and exchange everything the reimbursement owes, as one unit of work.

        Steps:
          1. Lock the order (file lock) and the reimbursement and payment rows.
          2. Recompute the total from the return items.
          3. Allocate the refund due across completed payments, oldest first.
          4. Create refunds and exchange inventory units, mark it reimbursed.
          5. Commit, then send the reimbursement email.

        Raises:
            IncompleteReimbursement: payments can't cover the refund due. Nothing
                is written and the reimbursement stays pending.
            ReimbursementAlreadyPerformed: it was performed before.
        """
        if reimbursement.id is None:
            raise ReimbursementError("Reimbursement must be saved before it is performed")

        reimbursement_id = reimbursement.id
        lock = FileLock(self._lock_path(reimbursement.order_id))
        try:
            with lock.acquire(timeout=settings.LOCK_TIMEOUT_SECONDS):
                with unit_of_work(self.db, f"perform reimbursement {reimbursement_id}"):
                    performed = self._perform_locked(reimbursement_id)
        except Timeout:
            raise ReimbursementError("Could not acquire reimbursement lock; try again")

        log.info(
            "performed reimbursement %s total=%s refunds=%d",
            performed.number,
            performed.total,
            len(performed.refunds),
        )
        try:
            self.notifier.reimbursement_email(performed)
        except Exception:
            # delivery problems never undo a committed reimbursement
            log.exception("reimbursement email failed for %s", performed.number)
        return performed

    def _perform_locked(self, reimbursement_id: int) -> Reimbursement:
        # populate_existing: cached state may predate another session's perform
        reimbursement = (
            self.db.query(Reimbursement)
            .filter(Reimbursement.id == reimbursement_id)
            .with_for_update()
            .populate_existing()
            .one()
        )
        if reimbursement.performed:
            raise ReimbursementAlreadyPerformed(
                f"Reimbursement {reimbursement.number} was already performed"
            )

        amounts = reimbursement_amounts(reimbursement.return_items, self.policy)
        reimbursement.total = amounts.total

        payments = self._eligible_payments(reimbursement.order_id, lock=True)
        allocation = allocate(amounts.refund_due, payments)
        if not allocation.complete:
            log.warning(
                "reimbursement %s short by %s of %s",
                reimbursement.number,
                allocation.remaining,
                amounts.refund_due,
            )
            raise IncompleteReimbursement(
                reimbursement.id, amounts.refund_due, allocation.remaining
            )

        for a in allocation.allocations:
            self.db.add(
                Refund(
                    payment=a.payment,
                    reimbursement=reimbursement,
                    amount=a.amount,
                    reason=settings.REFUND_REASON,
                )
            )

        self.fulfilment.fulfil_exchanges(
            reimbursement.order, plan_exchanges(reimbursement.return_items)
        )

        reimbursement.exchange_total = amounts.exchange_total
        reimbursement.status = "reimbursed"
        reimbursement.performed_at = datetime.now(timezone.utc)
        self.db.flush()
        return reimbursement
