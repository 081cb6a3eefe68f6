import pytest

from inventory.models import Adjustment, StockLedgerEntry
from inventory.services import (
    AdjustmentService, InvalidStatusError, InsufficientStockError, ValidationError,
)

from .utils import warehouse_qty, product_stock


@pytest.mark.django_db
class TestAdjustment:
    def test_count_below_system_quantity(self, user, product, main_warehouse, put_stock):
        put_stock(product, main_warehouse, 18)
        created = AdjustmentService.create(
            product.id, main_warehouse.id, 15, reason="Damaged sheets", user_id=user.id
        )
        adjustment = created["adjustment"]
        assert adjustment["system_quantity"] == 18
        assert adjustment["difference"] == -3

        result = AdjustmentService.validate(adjustment["id"], user_id=user.id)

        assert warehouse_qty(product, main_warehouse) == 15
        assert product_stock(product) == 15
        entry = StockLedgerEntry.objects.get()
        assert entry.operation_type == "adjustment"
        assert entry.quantity_change == -3
        assert entry.quantity_after == 15
        assert entry.notes == "Damaged sheets"
        assert result["items_processed"] == 1
        assert Adjustment.objects.get(id=adjustment["id"]).status == "done"

    def test_count_for_product_never_stocked(self, product, main_warehouse):
        created = AdjustmentService.create(product.id, main_warehouse.id, 7)

        AdjustmentService.validate(created["adjustment"]["id"])

        assert created["adjustment"]["system_quantity"] == 0
        assert warehouse_qty(product, main_warehouse) == 7
        assert product_stock(product) == 7
        assert StockLedgerEntry.objects.get().notes == "Stock adjustment validation"

    def test_zero_difference_still_logged(self, product, main_warehouse, put_stock):
        put_stock(product, main_warehouse, 4)
        created = AdjustmentService.create(product.id, main_warehouse.id, 4)

        AdjustmentService.validate(created["adjustment"]["id"])

        assert StockLedgerEntry.objects.get().quantity_change == 0
        assert warehouse_qty(product, main_warehouse) == 4

    def test_stock_moved_since_count_cannot_go_negative(self, product, main_warehouse, put_stock):
        put_stock(product, main_warehouse, 10)
        created = AdjustmentService.create(product.id, main_warehouse.id, 2)
        put_stock(product, main_warehouse, 5)

        with pytest.raises(InsufficientStockError):
            AdjustmentService.validate(created["adjustment"]["id"])

        assert warehouse_qty(product, main_warehouse) == 5

    def test_negative_count_rejected(self, product, main_warehouse):
        with pytest.raises(ValidationError):
            AdjustmentService.create(product.id, main_warehouse.id, -1)

    @pytest.mark.parametrize("status", ["waiting", "ready", "done"])
    def test_only_draft_at_creation(self, product, main_warehouse, status):
        with pytest.raises(InvalidStatusError):
            AdjustmentService.create(product.id, main_warehouse.id, 1, status=status)

    def test_editing_count_recomputes_difference(self, product, main_warehouse, put_stock):
        put_stock(product, main_warehouse, 18)
        created = AdjustmentService.create(product.id, main_warehouse.id, 15)
        put_stock(product, main_warehouse, 30)

        result = AdjustmentService.update(created["adjustment"]["id"], counted_quantity=20)

        assert result["adjustment"]["system_quantity"] == 18
        assert result["adjustment"]["difference"] == 2

    def test_done_adjustment_rejected(self, product, main_warehouse):
        created = AdjustmentService.create(product.id, main_warehouse.id, 3)
        AdjustmentService.validate(created["adjustment"]["id"])

        with pytest.raises(InvalidStatusError):
            AdjustmentService.validate(created["adjustment"]["id"])

        assert product_stock(product) == 3
        assert StockLedgerEntry.objects.count() == 1

    def test_adjustment_has_no_waiting_state(self, product, main_warehouse):
        created = AdjustmentService.create(product.id, main_warehouse.id, 3)

        with pytest.raises(InvalidStatusError):
            AdjustmentService.update(created["adjustment"]["id"], status="waiting")
