from .aggregator import (
    ReimbursementAmounts,
    calculated_total,
    item_contribution,
    reimbursement_amounts,
)
from .allocation import AllocationResult, RefundAllocation, allocate
from .exchanges import (
    ExchangeRequest,
    ExchangeRequiredCheck,
    ExchangeTotalPolicy,
    plan_exchanges,
    return_items_requiring_exchange,
)
from .identifiers import ReimbursementNumberGenerator

__all__ = [
    "ReimbursementAmounts",
    "calculated_total",
    "item_contribution",
    "reimbursement_amounts",
    "AllocationResult",
    "RefundAllocation",
    "allocate",
    "ExchangeRequest",
    "ExchangeRequiredCheck",
    "ExchangeTotalPolicy",
    "plan_exchanges",
    "return_items_requiring_exchange",
    "ReimbursementNumberGenerator",
]
