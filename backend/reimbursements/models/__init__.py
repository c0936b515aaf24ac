from reimbursements.models.variant import Variant
from reimbursements.models.order import Order
from reimbursements.models.payment import Payment
from reimbursements.models.refund import Refund
from reimbursements.models.shipment import Shipment
from reimbursements.models.inventory_unit import InventoryUnit
from reimbursements.models.customer_return import CustomerReturn
from reimbursements.models.return_item import ReturnItem
from reimbursements.models.reimbursement import Reimbursement, reimbursement_return_items

__all__ = [
    "Variant", "Order", "Payment", "Refund", "Shipment", "InventoryUnit",
    "CustomerReturn", "ReturnItem", "Reimbursement", "reimbursement_return_items",
]
