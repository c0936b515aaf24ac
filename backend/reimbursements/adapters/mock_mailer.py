import time
from typing import Dict, List
from uuid import uuid4

from reimbursements.log import get_logger

log = get_logger("mailer")


class MockMailerAdapter:
    """
    Simple synchronous mock mailer adapter.
    reimbursement_email records a dict {message_id, to, subject, reimbursement_number, total}
    in ``sent`` and returns it.
    """

    def __init__(self, delay_ms: int = 0):
        self.delay = delay_ms / 1000.0
        self.sent: List[Dict] = []

    def reimbursement_email(self, reimbursement) -> Dict:
        # simulate latency
        time.sleep(self.delay)
        message = {
            "message_id": f"MSG-{uuid4().hex[:12].upper()}",
            "to": reimbursement.order.email if reimbursement.order else None,
            "subject": f"Your reimbursement {reimbursement.number}",
            "reimbursement_number": reimbursement.number,
            "total": str(reimbursement.display_total),
        }
        self.sent.append(message)
        log.info("queued %s for %s", message["message_id"], reimbursement.number)
        return message

    def health_check(self) -> bool:
        return True
