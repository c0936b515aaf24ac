from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Protocol


class ExchangeRequiredCheck(Protocol):
    def exchange_required(self) -> bool:
        ...


class ExchangeTotalPolicy(str, Enum):
    """How items sent out as exchanges count toward a reimbursement's money."""

    SETTLE = "settle"  # counted in the total, settled by the exchange
    REFUND = "refund"  # counted in the total and refunded as well
    EXCLUDE = "exclude"  # not counted at all


@dataclass(frozen=True)
class ExchangeRequest:
    return_item: Any
    variant: Any

    @property
    def variant_id(self) -> Optional[int]:
        return getattr(self.variant, "id", None)


@dataclass
class PolicySplit:
    counted: List[Any] = field(default_factory=list)
    refundable: List[Any] = field(default_factory=list)


def return_items_requiring_exchange(
    return_items: Iterable[ExchangeRequiredCheck],
) -> List[ExchangeRequiredCheck]:
    return [ri for ri in return_items if ri.exchange_required()]


def plan_exchanges(return_items) -> List[ExchangeRequest]:
    return [
        ExchangeRequest(return_item=ri, variant=ri.exchange_variant)
        for ri in return_items_requiring_exchange(return_items)
    ]


def split_for_policy(
    return_items: Iterable[ExchangeRequiredCheck], policy
) -> PolicySplit:
    policy = ExchangeTotalPolicy(policy)
    split = PolicySplit()
    for ri in return_items:
        exchanged = ri.exchange_required()
        if exchanged and policy is ExchangeTotalPolicy.EXCLUDE:
            continue
        split.counted.append(ri)
        if not exchanged or policy is ExchangeTotalPolicy.REFUND:
            split.refundable.append(ri)
    return split
