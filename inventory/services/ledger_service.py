from typing import Dict, Any

from django.db.models import Q

from inventory.models import StockLedgerEntry
from inventory.services.base_service import (
    BaseService, success_response, paginate_queryset, parse_date, to_int,
    isoformat, ValidationError,
)


class StockLedgerService(BaseService):
    model = StockLedgerEntry

    @classmethod
    def serialize(cls, entry: StockLedgerEntry) -> Dict[str, Any]:
        return {
            "id": entry.id,
            "uuid": str(entry.uuid),
            "product_id": entry.product_id,
            "product": {
                "id": entry.product.id,
                "sku": entry.product.sku,
                "name": entry.product.name,
            },
            "warehouse_id": entry.warehouse_id,
            "warehouse_name": entry.warehouse.name,
            "operation_type": entry.operation_type,
            "reference_number": entry.reference_number,
            "quantity_change": entry.quantity_change,
            "quantity_after": entry.quantity_after,
            "created_by": entry.created_by_id,
            "created_at": isoformat(entry.created_at),
            "notes": entry.notes,
        }

    @classmethod
    def append(cls,
               product_id: int,
               warehouse_id: int,
               operation_type: str,
               reference_number: str,
               quantity_change: int,
               quantity_after: int,
               user_id: int = None,
               notes: str = "") -> StockLedgerEntry:
        return cls.model.objects.create(
            product_id=product_id,
            warehouse_id=warehouse_id,
            operation_type=operation_type,
            reference_number=reference_number,
            quantity_change=quantity_change,
            quantity_after=quantity_after,
            created_by_id=user_id,
            notes=notes,
        )

    @classmethod
    def list(cls,
             product_id: int = None,
             warehouse_id: int = None,
             operation_type: str = None,
             reference: str = None,
             date_from: str = None,
             date_to: str = None,
             search: str = None,
             page: int = 1,
             per_page: int = None) -> Dict[str, Any]:
        queryset = cls.model.objects.select_related("product", "warehouse")

        if product_id:
            queryset = queryset.filter(product_id=to_int(product_id, "product_id"))

        if warehouse_id:
            queryset = queryset.filter(warehouse_id=to_int(warehouse_id, "warehouse_id"))

        if operation_type:
            valid_types = [c[0] for c in cls.model.OperationType.choices]
            if operation_type not in valid_types:
                raise ValidationError(
                    f"Invalid operation type. Valid: {valid_types}", "operation_type"
                )
            queryset = queryset.filter(operation_type=operation_type)

        if reference:
            queryset = queryset.filter(reference_number__icontains=reference)

        start = parse_date(date_from, "date_from")
        end = parse_date(date_to, "date_to")
        if start:
            queryset = queryset.filter(created_at__date__gte=start)
        if end:
            queryset = queryset.filter(created_at__date__lte=end)

        if search:
            queryset = queryset.filter(
                Q(product__name__icontains=search) |
                Q(product__sku__icontains=search) |
                Q(notes__icontains=search)
            )

        entries, pagination = paginate_queryset(queryset, page, per_page)

        return success_response({
            "entries": [cls.serialize(e) for e in entries],
            "pagination": pagination
        })

    @classmethod
    def for_reference(cls, reference_number: str):
        return cls.model.objects.filter(
            reference_number=reference_number
        ).select_related("product", "warehouse").order_by("id")
