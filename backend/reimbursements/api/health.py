from fastapi import APIRouter
from sqlalchemy import text

from reimbursements.adapters.mock_mailer import MockMailerAdapter
from reimbursements.db import engine

router = APIRouter()


@router.get("/health", tags=["health"])
def health():
    db_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            db_ok = True
    except Exception:
        db_ok = False
    mailer_ok = MockMailerAdapter().health_check()

    return {
        "status": "ok" if db_ok and mailer_ok else "degraded",
        "db": db_ok,
        "mailer_adapter": mailer_ok,
    }
