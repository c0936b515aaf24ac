from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reimbursements.db import get_db
from reimbursements.errors import (
    IncompleteReimbursement,
    ReimbursementAlreadyPerformed,
    ReimbursementError,
)
from reimbursements.models.customer_return import CustomerReturn
from reimbursements.services.reimbursement_service import ReimbursementService

router = APIRouter(tags=["reimbursements"])


class CreateReimbursementIn(BaseModel):
    number: Optional[str] = Field(None, min_length=1, max_length=32)


def _reimbursement_out(r):
    return {
        "id": r.id,
        "number": r.number,
        "order_id": r.order_id,
        "customer_return_id": r.customer_return_id,
        "status": r.status,
        "total": str(r.total),
        "display_total": str(r.display_total),
        "exchange_total": str(r.exchange_total),
        "unpaid_amount": str(r.unpaid_amount),
        "performed_at": r.performed_at.isoformat() if r.performed_at else None,
        "return_item_ids": [ri.id for ri in r.return_items],
        "exchange_return_item_ids": [
            ri.id for ri in r.return_items_requiring_exchange()
        ],
        "refunds": [
            {"id": f.id, "payment_id": f.payment_id, "amount": str(f.amount)}
            for f in r.refunds
        ],
    }


def _get_or_404(svc: ReimbursementService, reimbursement_id: int):
    r = svc.get(reimbursement_id)
    if not r:
        raise HTTPException(status_code=404, detail="Reimbursement not found")
    return r


@router.post(
    "/api/customer-returns/{customer_return_id}/reimbursements",
    status_code=status.HTTP_201_CREATED,
)
def create_reimbursement(
    customer_return_id: int,
    payload: Optional[CreateReimbursementIn] = None,
    db: Session = Depends(get_db),
):
    customer_return = (
        db.query(CustomerReturn).filter(CustomerReturn.id == customer_return_id).first()
    )
    if not customer_return:
        raise HTTPException(status_code=404, detail="Customer return not found")

    svc = ReimbursementService(db)
    r = svc.build_from_customer_return(customer_return)
    if not r.return_items:
        raise HTTPException(status_code=400, detail="No reimbursable return items")
    if payload and payload.number:
        r.number = payload.number
    try:
        svc.save(r)
    except IntegrityError:
        raise HTTPException(
            status_code=409, detail="Return items or number already used"
        )
    except ReimbursementError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _reimbursement_out(r)


@router.get("/api/reimbursements/{reimbursement_id}")
def get_reimbursement(reimbursement_id: int, db: Session = Depends(get_db)):
    svc = ReimbursementService(db)
    return _reimbursement_out(_get_or_404(svc, reimbursement_id))


@router.get("/api/reimbursements/{reimbursement_id}/simulation")
def simulate_reimbursement(reimbursement_id: int, db: Session = Depends(get_db)):
    svc = ReimbursementService(db)
    sim = svc.simulate(_get_or_404(svc, reimbursement_id))
    return {
        "total": str(sim.total),
        "refund_due": str(sim.refund_due),
        "exchange_total": str(sim.exchange_total),
        "remaining": str(sim.remaining),
        "complete": sim.complete,
        "refunds": [
            {"payment_id": a.payment_id, "amount": str(a.amount)}
            for a in sim.allocations
        ],
        "exchanges": [
            {"return_item_id": x.return_item.id, "variant_id": x.variant_id}
            for x in sim.exchanges
        ],
    }


@router.post("/api/reimbursements/{reimbursement_id}/perform")
def perform_reimbursement(reimbursement_id: int, db: Session = Depends(get_db)):
    svc = ReimbursementService(db)
    r = _get_or_404(svc, reimbursement_id)
    try:
        r = svc.perform(r)
    except IncompleteReimbursement as e:
        raise HTTPException(
            status_code=409,
            detail={
                "error": "INCOMPLETE_REIMBURSEMENT",
                "message": str(e),
                "required": str(e.required),
                "shortfall": str(e.shortfall),
            },
        )
    except ReimbursementAlreadyPerformed as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ReimbursementError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _reimbursement_out(r)
