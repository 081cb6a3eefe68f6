import logging
from typing import Dict, Any, List

from inventory.models import Receipt, ReceiptItem, StockLedgerEntry
from inventory.services.base_service import success_response, ValidationError
from inventory.services.operation_service import OperationService
from inventory.services.policies import NoCheckPolicy

logger = logging.getLogger(__name__)


class ReceiptService(OperationService):
    model = Receipt
    prefix = "REC"
    result_key = "receipt"
    list_key = "receipts"
    search_fields = ("supplier_name",)
    warehouse_fields = ("warehouse",)
    editable_fields = ("notes", "supplier_name")

    @classmethod
    def get_by_id(cls, id: int):
        try:
            return cls.model.objects.select_related("warehouse").get(id=id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            return None

    @classmethod
    def serialize(cls, receipt: Receipt, include_items: bool = True) -> Dict[str, Any]:
        data = super().serialize(receipt, include_items)
        data.update({
            "warehouse_id": receipt.warehouse_id,
            "warehouse_name": receipt.warehouse.name,
            "supplier_name": receipt.supplier_name,
        })
        return data

    @classmethod
    def create(cls,
               warehouse_id: int,
               supplier_name: str,
               items: List[Dict[str, Any]] = None,
               reference_number: str = None,
               status: str = None,
               notes: str = "",
               user_id: int = None) -> Dict[str, Any]:
        if not supplier_name or not str(supplier_name).strip():
            raise ValidationError("supplier_name is required", "supplier_name")

        warehouse = cls.get_warehouse(warehouse_id)
        status = cls.check_create_status(status)
        lines = cls.clean_items(items, with_price=True)

        def build(number):
            receipt = Receipt.objects.create(
                reference_number=number,
                warehouse=warehouse,
                supplier_name=str(supplier_name).strip(),
                status=status,
                notes=notes or "",
                created_by_id=user_id,
            )
            ReceiptItem.objects.bulk_create([
                ReceiptItem(
                    receipt=receipt,
                    product=line["product"],
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                )
                for line in lines
            ])
            return receipt

        receipt = cls.insert_numbered(reference_number, build)
        logger.info(f"Receipt {receipt.reference_number} created with {len(lines)} items")

        return success_response(
            {cls.result_key: cls.serialize(receipt)},
            "Receipt created"
        )

    @classmethod
    def apply_header(cls, receipt, data):
        if "supplier_name" in data and not str(data["supplier_name"] or "").strip():
            raise ValidationError("supplier_name cannot be empty", "supplier_name")

        changed = super().apply_header(receipt, data)
        if data.get("warehouse_id") is not None:
            receipt.warehouse = cls.get_warehouse(data["warehouse_id"])
            changed.append("warehouse")
        return changed

    @classmethod
    def plan(cls, receipt, lines, projection):
        return NoCheckPolicy(
            projection,
            receipt.warehouse_id,
            StockLedgerEntry.OperationType.RECEIPT,
            notes=f"Receipt validation: {receipt.reference_number}",
        ).plan(lines)
