from typing import Dict, Any, Optional, List, Tuple
from datetime import datetime, date

from django.conf import settings
from django.db.models import Model


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str, code: str = "ERROR", details: Dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class ValidationError(ServiceError):
    def __init__(self, message: str, field: str = None, details: Dict = None):
        details = dict(details or {})
        if field:
            details.setdefault("field", field)
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class NotFoundError(ServiceError):
    status_code = 404

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            f"{resource} not found: {identifier}",
            "NOT_FOUND",
            {"resource": resource, "identifier": str(identifier)}
        )


class InvalidStatusError(ServiceError):
    def __init__(self, message: str, status: str = None):
        super().__init__(message, "INVALID_STATUS", {"status": status} if status else None)


class NoItemsError(ServiceError):
    def __init__(self, reference_number: str):
        super().__init__(
            f"{reference_number} has no items to validate",
            "NO_ITEMS",
            {"reference_number": reference_number}
        )


class InsufficientStockError(ServiceError):
    def __init__(self, product_id: int, product_name: str, required: int, available: int,
                 warehouse_id: int = None):
        details = {
            "product_id": product_id,
            "product_name": product_name,
            "warehouse_id": warehouse_id,
            "required": required,
            "available": available,
            "shortage": required - available,
        }
        where = f" in warehouse {warehouse_id}" if warehouse_id else ""
        super().__init__(
            f"Insufficient stock for {product_name}{where}: required {required}, available {available}",
            "INSUFFICIENT_STOCK",
            details
        )


class DuplicateNumberError(ServiceError):
    status_code = 409

    def __init__(self, reference_number: str):
        super().__init__(
            f"Reference number already exists: {reference_number}",
            "DUPLICATE_NUMBER",
            {"reference_number": reference_number}
        )


class InvalidWarehousesError(ServiceError):
    def __init__(self, warehouse_id: int):
        super().__init__(
            "Source and destination warehouses must be different",
            "INVALID_WAREHOUSES",
            {"from_warehouse_id": warehouse_id, "to_warehouse_id": warehouse_id}
        )


class CommitError(ServiceError):
    status_code = 500

    def __init__(self, message: str, reference_number: str = None):
        super().__init__(
            message,
            "INTERNAL_ERROR",
            {"reference_number": reference_number} if reference_number else None
        )


def success_response(data: Any = None, message: str = "Success") -> Dict:
    response = {"success": True, "message": message}
    if data is not None:
        if isinstance(data, dict):
            response.update(data)
        else:
            response["data"] = data
    return response


def paginate_queryset(queryset, page: int = 1, per_page: int = None) -> Tuple[List, Dict]:
    if per_page is None:
        per_page = settings.INVENTORY_DEFAULT_PAGE_SIZE
    page = max(1, page)
    per_page = min(max(1, per_page), 100)

    total = queryset.count()
    total_pages = (total + per_page - 1) // per_page

    offset = (page - 1) * per_page
    items = list(queryset[offset:offset + per_page])

    return items, {
        "page": page,
        "per_page": per_page,
        "total_items": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1
    }


def parse_date(value: Optional[str], field: str) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format", field)


def to_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", field)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", field)
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field} must be an integer", field)
    return number


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class BaseService:
    model = None

    @classmethod
    def get_by_id(cls, id: int) -> Optional[Model]:
        try:
            return cls.model.objects.get(id=id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            return None

    @classmethod
    def get_or_404(cls, id: int) -> Model:
        obj = cls.get_by_id(id)
        if not obj:
            raise NotFoundError(cls.model.__name__, id)
        return obj
