import pytest

from inventory.models import Product, StockLedgerEntry, Transfer
from inventory.services import (
    TransferService, InvalidWarehousesError, InsufficientStockError,
)

from .utils import warehouse_qty, product_stock, items


@pytest.mark.django_db
class TestTransfer:
    def test_same_warehouse_rejected_at_creation(self, product, main_warehouse):
        with pytest.raises(InvalidWarehousesError) as exc:
            TransferService.create(main_warehouse.id, main_warehouse.id, items((product, 1)))

        assert exc.value.code == "INVALID_WAREHOUSES"
        assert Transfer.objects.count() == 0

    def test_moves_stock_between_warehouses(self, product, other_product, main_warehouse,
                                            store_warehouse, put_stock):
        put_stock(product, main_warehouse, 10)
        put_stock(other_product, main_warehouse, 6)
        created = TransferService.create(
            main_warehouse.id, store_warehouse.id, items((product, 4), (other_product, 6))
        )

        result = TransferService.validate(created["transfer"]["id"])

        assert warehouse_qty(product, main_warehouse) == 6
        assert warehouse_qty(product, store_warehouse) == 4
        assert warehouse_qty(other_product, main_warehouse) == 0
        assert warehouse_qty(other_product, store_warehouse) == 6
        assert product_stock(product) == 10
        assert product_stock(other_product) == 6
        assert result["items_processed"] == 2

        entries = list(StockLedgerEntry.objects.order_by("id"))
        assert [(e.product_id, e.operation_type, e.quantity_change, e.quantity_after) for e in entries] == [
            (product.id, "transfer_out", -4, 6),
            (product.id, "transfer_in", 4, 4),
            (other_product.id, "transfer_out", -6, 0),
            (other_product.id, "transfer_in", 6, 6),
        ]
        assert entries[0].notes == f"Transfer to warehouse {store_warehouse.name}"
        assert entries[1].notes == f"Transfer from warehouse {main_warehouse.name}"

    def test_does_not_write_product_total(self, product, main_warehouse, store_warehouse, put_stock):
        put_stock(product, main_warehouse, 10)
        before = Product.objects.get(id=product.id).updated_at
        created = TransferService.create(main_warehouse.id, store_warehouse.id, items((product, 3)))

        TransferService.validate(created["transfer"]["id"])

        assert Product.objects.get(id=product.id).updated_at == before

    def test_shortage_in_source(self, product, other_product, main_warehouse, store_warehouse, put_stock):
        put_stock(product, main_warehouse, 10)
        put_stock(other_product, main_warehouse, 1)
        put_stock(other_product, store_warehouse, 30)
        created = TransferService.create(
            main_warehouse.id, store_warehouse.id, items((product, 4), (other_product, 3))
        )

        with pytest.raises(InsufficientStockError) as exc:
            TransferService.validate(created["transfer"]["id"])

        assert exc.value.details["product_id"] == other_product.id
        assert exc.value.details["warehouse_id"] == main_warehouse.id
        assert exc.value.details["shortage"] == 2
        assert warehouse_qty(product, main_warehouse) == 10
        assert warehouse_qty(product, store_warehouse) == 0
        assert StockLedgerEntry.objects.count() == 0
        assert Transfer.objects.get(id=created["transfer"]["id"]).status == "draft"

    def test_detail_shows_both_legs(self, product, main_warehouse, store_warehouse, put_stock):
        put_stock(product, main_warehouse, 10)
        created = TransferService.create(main_warehouse.id, store_warehouse.id, items((product, 4)))
        assert TransferService.get(created["transfer"]["id"])["transfer"]["ledger"] == []

        TransferService.validate(created["transfer"]["id"])

        ledger = TransferService.get(created["transfer"]["id"])["transfer"]["ledger"]
        assert [(e["operation_type"], e["warehouse_id"], e["quantity_change"]) for e in ledger] == [
            ("transfer_out", main_warehouse.id, -4),
            ("transfer_in", store_warehouse.id, 4),
        ]

    def test_list_filters_by_either_warehouse(self, product, main_warehouse, store_warehouse, floor_warehouse):
        TransferService.create(main_warehouse.id, store_warehouse.id, items((product, 1)))
        TransferService.create(floor_warehouse.id, main_warehouse.id, items((product, 1)))
        TransferService.create(store_warehouse.id, floor_warehouse.id, items((product, 1)))

        result = TransferService.list(warehouse_id=main_warehouse.id)

        assert result["pagination"]["total_items"] == 2
