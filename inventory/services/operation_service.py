import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Q

from inventory.models import OperationStatus, Product, Warehouse
from inventory.services.base_service import (
    BaseService, success_response, paginate_queryset, parse_date, to_int, isoformat,
    ValidationError, NotFoundError, InvalidStatusError, DuplicateNumberError,
)
from inventory.services.ledger_service import StockLedgerService
from inventory.services.numbering_service import NumberingService
from inventory.services.policies import StockLine
from inventory.services.validation_service import StockValidationService

logger = logging.getLogger(__name__)

NUMBER_ATTEMPTS = 3


class OperationService(BaseService):
    """
    Lifecycle shared by receipts, deliveries, transfers and adjustments:
    numbering, creation, header edits, status transitions, cancel, delete
    and validation.
    """

    prefix = None
    result_key = None
    list_key = None
    search_fields = ()
    warehouse_fields = ()
    editable_fields = ("notes",)

    VALIDATABLE_STATUSES = (OperationStatus.DRAFT, OperationStatus.WAITING)
    CREATE_STATUSES = (OperationStatus.DRAFT, OperationStatus.WAITING, OperationStatus.READY)
    DELETABLE_STATUSES = (OperationStatus.DRAFT, OperationStatus.CANCELLED)
    TERMINAL_STATUSES = (OperationStatus.DONE, OperationStatus.CANCELLED)
    TRANSITIONS = {
        OperationStatus.DRAFT: (OperationStatus.WAITING, OperationStatus.READY, OperationStatus.CANCELLED),
        OperationStatus.WAITING: (OperationStatus.DRAFT, OperationStatus.READY, OperationStatus.CANCELLED),
        OperationStatus.READY: (OperationStatus.DRAFT, OperationStatus.WAITING, OperationStatus.CANCELLED),
    }

    # ---------- serialization ----------

    @classmethod
    def serialize_header(cls, operation) -> Dict[str, Any]:
        return {
            "id": operation.id,
            "uuid": str(operation.uuid),
            "reference_number": operation.reference_number,
            "status": operation.status,
            "notes": operation.notes,
            "created_by": operation.created_by_id,
            "created_at": isoformat(operation.created_at),
            "updated_at": isoformat(operation.updated_at),
            "validated_at": isoformat(operation.validated_at),
        }

    @classmethod
    def serialize_item(cls, item) -> Dict[str, Any]:
        data = {
            "id": item.id,
            "product_id": item.product_id,
            "product_name": item.product.name,
            "product_sku": item.product.sku,
            "quantity": item.quantity,
        }
        if hasattr(item, "unit_price"):
            data["unit_price"] = str(item.unit_price) if item.unit_price is not None else None
        return data

    @classmethod
    def serialize(cls, operation, include_items: bool = True) -> Dict[str, Any]:
        data = cls.serialize_header(operation)
        if include_items:
            items = list(operation.items.select_related("product"))
            data["items"] = [cls.serialize_item(i) for i in items]
            data["total_quantity"] = sum(i.quantity for i in items)
        return data

    # ---------- lookups ----------

    @classmethod
    def get_operation(cls, operation_id: int):
        return cls.get_or_404(operation_id)

    @classmethod
    def get(cls, operation_id: int) -> Dict[str, Any]:
        operation = cls.get_operation(operation_id)
        data = cls.serialize(operation)
        data["ledger"] = [
            StockLedgerService.serialize(entry)
            for entry in StockLedgerService.for_reference(operation.reference_number)
        ]
        return success_response({cls.result_key: data})

    @staticmethod
    def get_warehouse(warehouse_id: Any, field: str = "warehouse_id") -> Warehouse:
        if warehouse_id in (None, ""):
            raise ValidationError(f"{field} is required", field)
        warehouse_id = to_int(warehouse_id, field)
        try:
            return Warehouse.objects.get(id=warehouse_id)
        except Warehouse.DoesNotExist:
            raise NotFoundError("Warehouse", warehouse_id)

    @staticmethod
    def get_product(product_id: Any, field: str = "product_id") -> Product:
        if product_id in (None, ""):
            raise ValidationError(f"{field} is required", field)
        product_id = to_int(product_id, field)
        try:
            return Product.objects.get(id=product_id)
        except Product.DoesNotExist:
            raise NotFoundError("Product", product_id)

    @classmethod
    def list(cls,
             status: str = None,
             warehouse_id: int = None,
             search: str = None,
             date_from: str = None,
             date_to: str = None,
             page: int = 1,
             per_page: int = None) -> Dict[str, Any]:
        queryset = cls.model.objects.all()

        if status:
            valid = [c[0] for c in cls.model._meta.get_field("status").choices]
            if status not in valid:
                raise InvalidStatusError(f"Invalid status. Valid: {valid}", status)
            queryset = queryset.filter(status=status)

        if warehouse_id:
            warehouse_id = to_int(warehouse_id, "warehouse_id")
            condition = Q()
            for field in cls.warehouse_fields:
                condition |= Q(**{f"{field}_id": warehouse_id})
            queryset = queryset.filter(condition)

        if search:
            condition = Q(reference_number__icontains=search)
            for field in cls.search_fields:
                condition |= Q(**{f"{field}__icontains": search})
            queryset = queryset.filter(condition)

        start = parse_date(date_from, "date_from")
        end = parse_date(date_to, "date_to")
        if start:
            queryset = queryset.filter(created_at__date__gte=start)
        if end:
            queryset = queryset.filter(created_at__date__lte=end)

        queryset = queryset.order_by("-created_at", "-id")
        operations, pagination = paginate_queryset(queryset, page, per_page)

        return success_response({
            cls.list_key: [cls.serialize(o, include_items=False) for o in operations],
            "pagination": pagination
        })

    # ---------- numbering ----------

    @classmethod
    def next_number(cls, year: int = None) -> Dict[str, Any]:
        return NumberingService.get_next(cls.prefix, year)

    @classmethod
    def check_number(cls, reference_number: str, exclude_id: int = None):
        queryset = cls.model.objects.filter(reference_number=reference_number)
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)
        if queryset.exists():
            raise DuplicateNumberError(reference_number)

    @classmethod
    def insert_numbered(cls, reference_number: Optional[str], build):
        """
        Run ``build(number)`` in a transaction. A supplied number must be
        unused; a generated one is retried when another request takes it first.
        """
        if reference_number is not None:
            reference_number = str(reference_number).strip()
            if not reference_number:
                raise ValidationError("reference_number cannot be empty", "reference_number")
            cls.check_number(reference_number)
            try:
                with transaction.atomic():
                    return build(reference_number)
            except IntegrityError:
                raise DuplicateNumberError(reference_number)

        number = None
        for attempt in range(NUMBER_ATTEMPTS):
            number = NumberingService.next_number(cls.prefix)
            try:
                with transaction.atomic():
                    return build(number)
            except IntegrityError:
                logger.warning(f"Generated number {number} already taken, retrying ({attempt + 1})")
        raise DuplicateNumberError(number)

    # ---------- items ----------

    @staticmethod
    def to_price(value: Any) -> Optional[Decimal]:
        if value in (None, ""):
            return None
        try:
            price = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError("unit_price must be a number", "unit_price")
        if price < 0:
            raise ValidationError("unit_price cannot be negative", "unit_price")
        return price

    @classmethod
    def clean_items(cls, items: Any, with_price: bool = False) -> List[Dict[str, Any]]:
        if items is None:
            return []
        if not isinstance(items, list):
            raise ValidationError("items must be a list", "items")

        products = {}
        cleaned = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValidationError(f"items[{index}] must be an object", "items")
            if item.get("product_id") in (None, ""):
                raise ValidationError(f"items[{index}].product_id is required", "product_id")
            quantity = to_int(item.get("quantity"), "quantity")
            if quantity <= 0:
                raise ValidationError(
                    f"items[{index}].quantity must be greater than 0", "quantity"
                )
            product_id = to_int(item["product_id"], "product_id")
            if product_id not in products:
                products[product_id] = cls.get_product(product_id)

            row = {"product": products[product_id], "quantity": quantity}
            if with_price:
                row["unit_price"] = cls.to_price(item.get("unit_price"))
            cleaned.append(row)
        return cleaned

    @classmethod
    def lines_for(cls, operation) -> List[StockLine]:
        return [
            StockLine(item.product_id, item.product.name, item.quantity)
            for item in operation.items.select_related("product").order_by("id")
        ]

    @classmethod
    def plan(cls, operation, lines, projection):
        raise NotImplementedError

    # ---------- lifecycle ----------

    @classmethod
    def check_create_status(cls, status: Optional[str]) -> str:
        status = status or OperationStatus.DRAFT
        if status not in cls.CREATE_STATUSES:
            raise InvalidStatusError(
                f"New {cls.model._meta.verbose_name} must start in one of: {list(cls.CREATE_STATUSES)}",
                status,
            )
        return status

    @classmethod
    def check_transition(cls, operation, new_status: str):
        if new_status == operation.status:
            return
        allowed = cls.TRANSITIONS.get(operation.status, ())
        if new_status not in allowed:
            raise InvalidStatusError(
                f"Cannot change {operation.reference_number} from '{operation.status}' to '{new_status}'",
                operation.status,
            )

    @classmethod
    def apply_header(cls, operation, data: Dict[str, Any]) -> List[str]:
        """Copy editable header fields; subclasses resolve their own relations."""
        changed = []
        for field in cls.editable_fields:
            if field in data:
                setattr(operation, field, data[field] if data[field] is not None else "")
                changed.append(field)
        return changed

    @classmethod
    @transaction.atomic
    def update(cls, operation_id: int, **data) -> Dict[str, Any]:
        if "created_by" in data or "user_id" in data:
            raise ValidationError("The creator cannot be changed", "created_by")

        try:
            operation = cls.model.objects.select_for_update().get(id=operation_id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(cls.model.__name__, operation_id)

        if operation.status in cls.TERMINAL_STATUSES:
            raise InvalidStatusError(
                f"{operation.reference_number} is {operation.status} and cannot be edited",
                operation.status,
            )

        changed = []

        if "reference_number" in data:
            number = str(data["reference_number"] or "").strip()
            if not number:
                raise ValidationError("reference_number cannot be empty", "reference_number")
            if number != operation.reference_number:
                cls.check_number(number, exclude_id=operation.id)
                operation.reference_number = number
                changed.append("reference_number")

        changed += cls.apply_header(operation, data)

        if data.get("status"):
            cls.check_transition(operation, data["status"])
            if data["status"] != operation.status:
                operation.status = data["status"]
                changed.append("status")

        if changed:
            operation.save(update_fields=changed + ["updated_at"])
            logger.info(f"{operation.reference_number} updated: {', '.join(changed)}")

        return success_response(
            {cls.result_key: cls.serialize(operation)},
            f"{cls.model.__name__} updated"
        )

    @classmethod
    @transaction.atomic
    def cancel(cls, operation_id: int, reason: str = "") -> Dict[str, Any]:
        try:
            operation = cls.model.objects.select_for_update().get(id=operation_id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(cls.model.__name__, operation_id)

        if operation.status in cls.TERMINAL_STATUSES:
            raise InvalidStatusError(
                f"{operation.reference_number} is already {operation.status}",
                operation.status,
            )

        operation.status = OperationStatus.CANCELLED
        if reason:
            note = f"Cancelled: {reason}"
            operation.notes = f"{operation.notes}\n{note}" if operation.notes else note
        operation.save(update_fields=["status", "notes", "updated_at"])

        logger.info(f"{operation.reference_number} cancelled")

        return success_response(
            {cls.result_key: cls.serialize(operation)},
            f"{cls.model.__name__} cancelled"
        )

    @classmethod
    @transaction.atomic
    def delete(cls, operation_id: int) -> Dict[str, Any]:
        operation = cls.get_operation(operation_id)

        if operation.status not in cls.DELETABLE_STATUSES:
            raise InvalidStatusError(
                f"Only draft or cancelled operations can be deleted, {operation.reference_number} is {operation.status}",
                operation.status,
            )

        reference_number = operation.reference_number
        operation.delete()
        logger.info(f"{reference_number} deleted")

        return success_response(
            {"reference_number": reference_number},
            f"{cls.model.__name__} deleted"
        )

    @classmethod
    def validate(cls, operation_id: int, user_id: int = None) -> Dict[str, Any]:
        return StockValidationService.validate(cls, operation_id, user_id)
