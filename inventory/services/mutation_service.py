import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

from django.db import transaction

from inventory.models import Product, WarehouseStock
from inventory.services.base_service import NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class StockChange:
    product_id: int
    warehouse_id: int
    delta: int
    product_before: int
    product_after: int
    warehouse_before: int
    warehouse_after: int


class StockMutationService:
    """
    The only writer of ``Product.current_stock`` and ``WarehouseStock.quantity``.

    No sufficiency check happens here: callers verify that a negative delta
    is covered before calling ``apply_delta``.
    """

    @classmethod
    def lock_rows(cls, product_ids: Iterable[int]) -> Dict[Tuple[int, int], WarehouseStock]:
        """
        Lock the products touched by a validation and their warehouse rows.

        Locks are taken in ascending key order so two validations touching
        the same rows cannot deadlock. Returns every existing warehouse row of
        those products keyed by (product_id, warehouse_id); missing rows are
        created lazily by ``apply_delta``.
        """
        product_ids = sorted(set(product_ids))

        locked = list(
            Product.objects.select_for_update().filter(id__in=product_ids).order_by("id")
        )
        found = {p.id for p in locked}
        for product_id in product_ids:
            if product_id not in found:
                raise NotFoundError("Product", product_id)

        rows = WarehouseStock.objects.select_for_update().filter(
            product_id__in=product_ids
        ).order_by("product_id", "warehouse_id")

        return {(row.product_id, row.warehouse_id): row for row in rows}

    @classmethod
    def get_row(cls, product_id: int, warehouse_id: int) -> WarehouseStock:
        row, created = WarehouseStock.objects.select_for_update().get_or_create(
            product_id=product_id,
            warehouse_id=warehouse_id,
            defaults={"quantity": 0},
        )
        if created:
            logger.debug(f"Created stock row for product {product_id} in warehouse {warehouse_id}")
        return row

    @classmethod
    @transaction.atomic
    def apply_delta(cls,
                    product_id: int,
                    warehouse_id: int,
                    delta: int,
                    adjust_product: bool = True) -> StockChange:
        try:
            product = Product.objects.select_for_update().get(id=product_id)
        except Product.DoesNotExist:
            raise NotFoundError("Product", product_id)

        row = cls.get_row(product_id, warehouse_id)

        product_before = product.current_stock
        warehouse_before = row.quantity

        row.quantity = warehouse_before + delta
        row.save(update_fields=["quantity", "updated_at"])

        # Moves between warehouses leave the aggregate untouched
        if adjust_product:
            product.current_stock = product_before + delta
            product.save(update_fields=["current_stock", "updated_at"])

        logger.debug(
            f"Stock {delta:+d} for product {product_id} in warehouse {warehouse_id}: "
            f"{warehouse_before} -> {row.quantity}"
        )

        return StockChange(
            product_id=product_id,
            warehouse_id=warehouse_id,
            delta=delta,
            product_before=product_before,
            product_after=product.current_stock,
            warehouse_before=warehouse_before,
            warehouse_after=row.quantity,
        )
