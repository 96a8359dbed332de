from stitchbook.core.database import Base
from stitchbook.models.inventory_item import InventoryItem
from stitchbook.models.payment import Payment, PaymentMethod, PaymentStatus
from stitchbook.models.product import Product
from stitchbook.models.production_entry import ProductionEntry
from stitchbook.models.rate import Rate
from stitchbook.models.staff import Staff, StaffRole
from stitchbook.models.stitch_entry import StitchEntry
from stitchbook.models.worker import Worker
from stitchbook.models.worker_category import WorkerCategory

__all__ = [
    "Base",
    "InventoryItem",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Product",
    "ProductionEntry",
    "Rate",
    "Staff",
    "StaffRole",
    "StitchEntry",
    "Worker",
    "WorkerCategory",
]
