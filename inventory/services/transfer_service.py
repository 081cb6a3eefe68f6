import logging
from typing import Dict, Any, List

from inventory.models import Transfer, TransferItem, StockLedgerEntry
from inventory.services.base_service import success_response, InvalidWarehousesError
from inventory.services.operation_service import OperationService
from inventory.services.policies import SingleWarehousePolicy, NoCheckPolicy

logger = logging.getLogger(__name__)


class TransferService(OperationService):
    model = Transfer
    prefix = "TRF"
    result_key = "transfer"
    list_key = "transfers"
    warehouse_fields = ("from_warehouse", "to_warehouse")

    @classmethod
    def get_by_id(cls, id: int):
        try:
            return cls.model.objects.select_related("from_warehouse", "to_warehouse").get(id=id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            return None

    @classmethod
    def serialize(cls, transfer: Transfer, include_items: bool = True) -> Dict[str, Any]:
        data = super().serialize(transfer, include_items)
        data.update({
            "from_warehouse_id": transfer.from_warehouse_id,
            "from_warehouse_name": transfer.from_warehouse.name,
            "to_warehouse_id": transfer.to_warehouse_id,
            "to_warehouse_name": transfer.to_warehouse.name,
        })
        return data

    @classmethod
    def create(cls,
               from_warehouse_id: int,
               to_warehouse_id: int,
               items: List[Dict[str, Any]] = None,
               reference_number: str = None,
               status: str = None,
               notes: str = "",
               user_id: int = None) -> Dict[str, Any]:
        from_warehouse = cls.get_warehouse(from_warehouse_id, "from_warehouse_id")
        to_warehouse = cls.get_warehouse(to_warehouse_id, "to_warehouse_id")
        if from_warehouse.id == to_warehouse.id:
            raise InvalidWarehousesError(from_warehouse.id)

        status = cls.check_create_status(status)
        lines = cls.clean_items(items)

        def build(number):
            transfer = Transfer.objects.create(
                reference_number=number,
                from_warehouse=from_warehouse,
                to_warehouse=to_warehouse,
                status=status,
                notes=notes or "",
                created_by_id=user_id,
            )
            TransferItem.objects.bulk_create([
                TransferItem(transfer=transfer, product=line["product"], quantity=line["quantity"])
                for line in lines
            ])
            return transfer

        transfer = cls.insert_numbered(reference_number, build)
        logger.info(
            f"Transfer {transfer.reference_number} created: "
            f"{from_warehouse.name} -> {to_warehouse.name}, {len(lines)} items"
        )

        return success_response(
            {cls.result_key: cls.serialize(transfer)},
            "Transfer created"
        )

    @classmethod
    def apply_header(cls, transfer, data):
        changed = super().apply_header(transfer, data)
        if data.get("from_warehouse_id") is not None:
            transfer.from_warehouse = cls.get_warehouse(data["from_warehouse_id"], "from_warehouse_id")
            changed.append("from_warehouse")
        if data.get("to_warehouse_id") is not None:
            transfer.to_warehouse = cls.get_warehouse(data["to_warehouse_id"], "to_warehouse_id")
            changed.append("to_warehouse")
        if transfer.from_warehouse_id == transfer.to_warehouse_id:
            raise InvalidWarehousesError(transfer.from_warehouse_id)
        return changed

    @classmethod
    def plan(cls, transfer, lines, projection):
        # Only warehouse rows move; the product aggregate stays as it is
        outgoing = SingleWarehousePolicy(
            projection,
            transfer.from_warehouse_id,
            StockLedgerEntry.OperationType.TRANSFER_OUT,
            notes=f"Transfer to warehouse {transfer.to_warehouse.name}",
            adjust_product=False,
        )
        incoming = NoCheckPolicy(
            projection,
            transfer.to_warehouse_id,
            StockLedgerEntry.OperationType.TRANSFER_IN,
            notes=f"Transfer from warehouse {transfer.from_warehouse.name}",
            adjust_product=False,
        )

        moves = []
        for line in lines:
            moves += outgoing.plan([line])
            moves += incoming.plan([line])
        return moves
