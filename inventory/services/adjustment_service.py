import logging
from typing import Dict, Any

from inventory.models import Adjustment, AdjustmentStatus, StockLedgerEntry, WarehouseStock
from inventory.services.base_service import success_response, to_int, ValidationError
from inventory.services.operation_service import OperationService
from inventory.services.policies import AggregateDeltaPolicy, StockLine

logger = logging.getLogger(__name__)

DEFAULT_ADJUSTMENT_NOTE = "Stock adjustment validation"


class AdjustmentService(OperationService):
    """
    Physical count corrections. The system quantity is snapshotted when the
    adjustment is created; validation applies ``counted - system`` as is.
    """

    model = Adjustment
    prefix = "ADJ"
    result_key = "adjustment"
    list_key = "adjustments"
    search_fields = ("product__name", "product__sku", "reason")
    warehouse_fields = ("warehouse",)
    editable_fields = ("notes",)

    VALIDATABLE_STATUSES = (AdjustmentStatus.DRAFT,)
    CREATE_STATUSES = (AdjustmentStatus.DRAFT,)
    DELETABLE_STATUSES = (AdjustmentStatus.DRAFT, AdjustmentStatus.CANCELLED)
    TERMINAL_STATUSES = (AdjustmentStatus.DONE, AdjustmentStatus.CANCELLED)
    TRANSITIONS = {
        AdjustmentStatus.DRAFT: (AdjustmentStatus.CANCELLED,),
    }

    @classmethod
    def get_by_id(cls, id: int):
        try:
            return cls.model.objects.select_related("product", "warehouse").get(id=id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            return None

    @classmethod
    def serialize(cls, adjustment: Adjustment, include_items: bool = True) -> Dict[str, Any]:
        data = cls.serialize_header(adjustment)
        data.update({
            "product_id": adjustment.product_id,
            "product_name": adjustment.product.name,
            "product_sku": adjustment.product.sku,
            "warehouse_id": adjustment.warehouse_id,
            "warehouse_name": adjustment.warehouse.name,
            "counted_quantity": adjustment.counted_quantity,
            "system_quantity": adjustment.system_quantity,
            "difference": adjustment.difference,
            "reason": adjustment.reason,
        })
        return data

    @staticmethod
    def clean_counted(value) -> int:
        if value in (None, ""):
            raise ValidationError("counted_quantity is required", "counted_quantity")
        counted = to_int(value, "counted_quantity")
        if counted < 0:
            raise ValidationError("counted_quantity must be a non-negative number", "counted_quantity")
        return counted

    @classmethod
    def create(cls,
               product_id: int,
               warehouse_id: int,
               counted_quantity: int,
               reason: str = "",
               reference_number: str = None,
               status: str = None,
               notes: str = "",
               user_id: int = None) -> Dict[str, Any]:
        warehouse = cls.get_warehouse(warehouse_id)
        product = cls.get_product(product_id)
        counted = cls.clean_counted(counted_quantity)
        status = cls.check_create_status(status)

        row = WarehouseStock.objects.filter(product=product, warehouse=warehouse).first()
        system_quantity = row.quantity if row else 0

        def build(number):
            return Adjustment.objects.create(
                reference_number=number,
                product=product,
                warehouse=warehouse,
                counted_quantity=counted,
                system_quantity=system_quantity,
                difference=counted - system_quantity,
                reason=(reason or "").strip(),
                status=status,
                notes=notes or "",
                created_by_id=user_id,
            )

        adjustment = cls.insert_numbered(reference_number, build)
        logger.info(
            f"Adjustment {adjustment.reference_number} created: {product.sku} in {warehouse.name} "
            f"system {system_quantity}, counted {counted}"
        )

        return success_response(
            {cls.result_key: cls.serialize(adjustment)},
            "Adjustment created"
        )

    @classmethod
    def apply_header(cls, adjustment, data):
        changed = super().apply_header(adjustment, data)
        if "reason" in data:
            adjustment.reason = (data["reason"] or "").strip()
            changed.append("reason")
        if "counted_quantity" in data:
            adjustment.counted_quantity = cls.clean_counted(data["counted_quantity"])
            adjustment.difference = adjustment.counted_quantity - adjustment.system_quantity
            changed += ["counted_quantity", "difference"]
        return changed

    @classmethod
    def lines_for(cls, adjustment):
        return [StockLine(adjustment.product_id, adjustment.product.name, abs(adjustment.difference))]

    @classmethod
    def plan(cls, adjustment, lines, projection):
        return AggregateDeltaPolicy(
            projection,
            adjustment.warehouse_id,
            adjustment.difference,
            StockLedgerEntry.OperationType.ADJUSTMENT,
            notes=adjustment.reason or DEFAULT_ADJUSTMENT_NOTE,
        ).plan(lines)
