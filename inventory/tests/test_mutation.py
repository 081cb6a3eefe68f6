import pytest

from inventory.models import WarehouseStock
from inventory.services import StockMutationService, NotFoundError

from .utils import warehouse_qty, product_stock


@pytest.mark.django_db
class TestApplyDelta:
    def test_creates_missing_row(self, product, main_warehouse):
        change = StockMutationService.apply_delta(product.id, main_warehouse.id, 7)

        assert WarehouseStock.objects.filter(product=product, warehouse=main_warehouse).count() == 1
        assert warehouse_qty(product, main_warehouse) == 7
        assert product_stock(product) == 7
        assert change.warehouse_before == 0
        assert change.warehouse_after == 7
        assert change.product_before == 0
        assert change.product_after == 7

    def test_negative_delta_is_not_checked(self, product, main_warehouse, put_stock):
        put_stock(product, main_warehouse, 2)

        change = StockMutationService.apply_delta(product.id, main_warehouse.id, -5)

        assert change.warehouse_after == -3
        assert product_stock(product) == -3

    def test_without_product_adjustment(self, product, main_warehouse, store_warehouse, put_stock):
        put_stock(product, main_warehouse, 10)

        StockMutationService.apply_delta(product.id, main_warehouse.id, -4, adjust_product=False)
        change = StockMutationService.apply_delta(product.id, store_warehouse.id, 4, adjust_product=False)

        assert warehouse_qty(product, main_warehouse) == 6
        assert warehouse_qty(product, store_warehouse) == 4
        assert product_stock(product) == 10
        assert change.product_before == change.product_after == 10

    def test_missing_product(self, main_warehouse):
        with pytest.raises(NotFoundError):
            StockMutationService.apply_delta(999, main_warehouse.id, 1)


@pytest.mark.django_db
def test_lock_rows_returns_every_row_of_the_products(product, other_product, main_warehouse,
                                                     store_warehouse, put_stock):
    put_stock(product, main_warehouse, 3)
    put_stock(product, store_warehouse, 4)
    put_stock(other_product, store_warehouse, 9)

    rows = StockMutationService.lock_rows([product.id])

    assert set(rows) == {(product.id, main_warehouse.id), (product.id, store_warehouse.id)}


@pytest.mark.django_db
def test_lock_rows_rejects_unknown_products(product):
    with pytest.raises(NotFoundError):
        StockMutationService.lock_rows([product.id, 424242])
