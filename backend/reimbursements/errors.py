from decimal import Decimal


class ReimbursementError(Exception):
    pass


class ReimbursementAlreadyPerformed(ReimbursementError):
    pass


class IncompleteReimbursement(ReimbursementError):
    """Raised when completed payments can't cover the refund a reimbursement owes."""

    def __init__(self, reimbursement_id, required: Decimal, shortfall: Decimal):
        self.reimbursement_id = reimbursement_id
        self.required = required
        self.shortfall = shortfall
        super().__init__(
            f"Reimbursement {reimbursement_id} could not be fully performed: "
            f"{shortfall} of {required} has no refundable payment"
        )
