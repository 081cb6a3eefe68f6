from typing import Dict, Any, List

from django.db.models import Sum, Value
from django.db.models.functions import Coalesce

from inventory.models import Product, WarehouseStock, Warehouse
from inventory.services.base_service import (
    BaseService, success_response, to_int, isoformat, NotFoundError,
)


class ProductService(BaseService):
    model = Product

    @classmethod
    def serialize(cls, product: Product) -> Dict[str, Any]:
        return {
            "id": product.id,
            "uuid": str(product.uuid),
            "sku": product.sku,
            "name": product.name,
            "category_id": product.category_id,
            "category_name": product.category.name if product.category else None,
            "unit_of_measure": product.unit_of_measure,
            "reorder_level": product.reorder_level,
            "current_stock": product.current_stock,
            "is_low_stock": product.is_low_stock,
            "cost_price": str(product.cost_price),
            "selling_price": str(product.selling_price),
            "description": product.description,
            "is_active": product.is_active,
            "created_at": isoformat(product.created_at),
            "updated_at": isoformat(product.updated_at),
        }

    @classmethod
    def serialize_stock(cls, row: WarehouseStock) -> Dict[str, Any]:
        return {
            "id": row.id,
            "product_id": row.product_id,
            "warehouse_id": row.warehouse_id,
            "warehouse_name": row.warehouse.name,
            "warehouse_location": row.warehouse.location,
            "quantity": row.quantity,
            "updated_at": isoformat(row.updated_at),
        }

    @classmethod
    def get_product(cls, product_id: int) -> Product:
        try:
            return cls.model.objects.select_related("category").get(id=product_id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Product", product_id)

    @classmethod
    def get(cls, product_id: int) -> Dict[str, Any]:
        return success_response({"product": cls.serialize(cls.get_product(product_id))})

    @classmethod
    def get_stock(cls, product_id: int, warehouse_id: int = None) -> Dict[str, Any]:
        product = cls.get_product(product_id)

        if warehouse_id:
            warehouse_id = to_int(warehouse_id, "warehouse_id")
            if not Warehouse.objects.filter(id=warehouse_id).exists():
                raise NotFoundError("Warehouse", warehouse_id)
            row = WarehouseStock.objects.select_related("warehouse").filter(
                product=product, warehouse_id=warehouse_id
            ).first()
            return success_response({
                "product_id": product.id,
                "warehouse_id": warehouse_id,
                "quantity": row.quantity if row else 0,
                "stock": cls.serialize_stock(row) if row else None,
            })

        rows = WarehouseStock.objects.filter(product=product).select_related(
            "warehouse"
        ).order_by("warehouse__name", "warehouse_id")

        return success_response({
            "product_id": product.id,
            "current_stock": product.current_stock,
            "stocks": [cls.serialize_stock(r) for r in rows],
            "total_quantity": sum(r.quantity for r in rows),
        })

    @classmethod
    def find_stock_mismatches(cls) -> List[Dict[str, Any]]:
        """Products whose current_stock differs from the sum of their warehouse rows."""
        products = cls.model.objects.annotate(
            warehouse_total=Coalesce(Sum("warehouse_stocks__quantity"), Value(0))
        ).order_by("id")

        return [
            {
                "product_id": p.id,
                "sku": p.sku,
                "name": p.name,
                "current_stock": p.current_stock,
                "warehouse_total": p.warehouse_total,
                "difference": p.current_stock - p.warehouse_total,
            }
            for p in products
            if p.current_stock != p.warehouse_total
        ]

    @classmethod
    def check_invariant(cls) -> Dict[str, Any]:
        mismatches = cls.find_stock_mismatches()
        return success_response({
            "consistent": not mismatches,
            "mismatches": mismatches,
        })
