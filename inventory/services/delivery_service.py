import logging
from typing import Dict, Any, List

from inventory.models import Delivery, DeliveryItem, StockLedgerEntry
from inventory.services.base_service import success_response, ValidationError
from inventory.services.operation_service import OperationService
from inventory.services.policies import SingleWarehousePolicy, MultiWarehouseSplitPolicy

logger = logging.getLogger(__name__)


class DeliveryService(OperationService):
    model = Delivery
    prefix = "DEL"
    result_key = "delivery"
    list_key = "deliveries"
    search_fields = ("customer_name",)
    warehouse_fields = ("warehouse",)
    editable_fields = ("notes", "customer_name")

    @classmethod
    def get_by_id(cls, id: int):
        try:
            return cls.model.objects.select_related("warehouse").get(id=id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            return None

    @classmethod
    def serialize(cls, delivery: Delivery, include_items: bool = True) -> Dict[str, Any]:
        data = super().serialize(delivery, include_items)
        data.update({
            "warehouse_id": delivery.warehouse_id,
            "warehouse_name": delivery.warehouse.name if delivery.warehouse else None,
            "customer_name": delivery.customer_name,
        })
        return data

    @classmethod
    def create(cls,
               customer_name: str,
               items: List[Dict[str, Any]] = None,
               warehouse_id: int = None,
               reference_number: str = None,
               status: str = None,
               notes: str = "",
               user_id: int = None) -> Dict[str, Any]:
        if not customer_name or not str(customer_name).strip():
            raise ValidationError("customer_name is required", "customer_name")

        warehouse = cls.get_warehouse(warehouse_id) if warehouse_id not in (None, "") else None
        status = cls.check_create_status(status)
        lines = cls.clean_items(items, with_price=True)

        def build(number):
            delivery = Delivery.objects.create(
                reference_number=number,
                warehouse=warehouse,
                customer_name=str(customer_name).strip(),
                status=status,
                notes=notes or "",
                created_by_id=user_id,
            )
            DeliveryItem.objects.bulk_create([
                DeliveryItem(
                    delivery=delivery,
                    product=line["product"],
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                )
                for line in lines
            ])
            return delivery

        delivery = cls.insert_numbered(reference_number, build)
        logger.info(f"Delivery {delivery.reference_number} created with {len(lines)} items")

        return success_response(
            {cls.result_key: cls.serialize(delivery)},
            "Delivery created"
        )

    @classmethod
    def apply_header(cls, delivery, data):
        if "customer_name" in data and not str(data["customer_name"] or "").strip():
            raise ValidationError("customer_name cannot be empty", "customer_name")

        changed = super().apply_header(delivery, data)
        if "warehouse_id" in data:
            warehouse_id = data["warehouse_id"]
            delivery.warehouse = cls.get_warehouse(warehouse_id) if warehouse_id not in (None, "") else None
            changed.append("warehouse")
        return changed

    @classmethod
    def plan(cls, delivery, lines, projection):
        notes = f"Delivery validation: {delivery.reference_number}"
        operation_type = StockLedgerEntry.OperationType.DELIVERY

        if delivery.warehouse_id:
            policy = SingleWarehousePolicy(
                projection, delivery.warehouse_id, operation_type, notes=notes
            )
        else:
            policy = MultiWarehouseSplitPolicy(projection, operation_type, notes=notes)
        return policy.plan(lines)
