from typing import List
from uuid import uuid4

from sqlalchemy.orm import Session

from reimbursements.engine.exchanges import ExchangeRequest
from reimbursements.errors import ReimbursementError
from reimbursements.log import get_logger
from reimbursements.models.inventory_unit import InventoryUnit
from reimbursements.models.order import Order
from reimbursements.models.shipment import Shipment
from reimbursements.models.variant import Variant
from reimbursements.utils.transactions import smart_transaction

log = get_logger("fulfilment")


class FulfilmentService:
    def __init__(self, db: Session):
        self.db = db

    def _gen_shipment_number(self) -> str:
        return f"H{uuid4().hex[:10].upper()}"

    def exchange_shipment_for(self, order: Order) -> Shipment:
        """Return the order's pending exchange shipment, creating one if needed."""
        shipment = (
            self.db.query(Shipment)
            .filter(
                Shipment.order_id == order.id,
                Shipment.is_exchange == True,
                Shipment.state == "pending",
            )
            .order_by(Shipment.id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if shipment:
            return shipment
        shipment = Shipment(
            number=self._gen_shipment_number(),
            order=order,
            state="pending",
            is_exchange=True,
        )
        self.db.add(shipment)
        self.db.flush()
        log.info("opened exchange shipment %s for order %s", shipment.number, order.number)
        return shipment

    def _lock_variant(self, req: ExchangeRequest) -> Variant:
        variant_id = req.variant_id or req.return_item.exchange_variant_id
        variant = (
            self.db.query(Variant)
            .filter(Variant.id == variant_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if variant is None:
            raise ReimbursementError(
                f"Exchange variant {variant_id} for return item {req.return_item.id} does not exist"
            )
        return variant

    def fulfil_exchanges(
        self, order: Order, requests: List[ExchangeRequest]
    ) -> List[InventoryUnit]:
        """
        Put one unit of each requested exchange variant on the order's exchange
        shipment. Stock is taken when available, otherwise the unit is backordered.
        Runs inside the caller's transaction when there is one.
        """
        if not requests:
            return []
        units = []
        with smart_transaction(self.db, f"exchanges for order {order.number}"):
            shipment = self.exchange_shipment_for(order)
            for req in requests:
                variant = self._lock_variant(req)
                if (variant.stock or 0) > 0:
                    variant.stock = variant.stock - 1
                    state = "on_hand"
                else:
                    state = "backordered"
                unit = InventoryUnit(
                    order=order,
                    variant=variant,
                    shipment=shipment,
                    state=state,
                    original_return_item_id=req.return_item.id,
                )
                self.db.add(unit)
                req.return_item.exchange_inventory_unit = unit
                units.append(unit)
                # the next locked read of this variant must see the decrement
                self.db.flush()
        log.info(
            "added %d exchange unit(s) to shipment %s", len(units), shipment.number
        )
        return units
