import logging

from rest_framework import status as http_status

from inventory.helpers.request import parse_json_body, query_int
from inventory.helpers.response import APIResponse
from inventory.services import ServiceError

logger = logging.getLogger(__name__)


def handle_service_error(e: Exception):
    if isinstance(e, ServiceError):
        return APIResponse.from_service_error(e)
    logger.exception("Unhandled error in inventory API")
    return APIResponse.error(
        message="Internal server error",
        code="INTERNAL_ERROR",
        status=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def list_params(request):
    return {
        "status": request.GET.get("status"),
        "warehouse_id": request.GET.get("warehouse_id"),
        "search": request.GET.get("search"),
        "date_from": request.GET.get("date_from"),
        "date_to": request.GET.get("date_to"),
        "page": query_int(request, "page", 1),
        "per_page": query_int(request, "per_page"),
    }


def check_fields(data, fields):
    """Reject the creator and any key outside ``fields``; ``None`` when the body is acceptable."""
    if "created_by" in data or "user_id" in data:
        return APIResponse.validation_error(
            errors={"created_by": "set from the authenticated user"},
            message="User ID cannot be provided in request body",
        )

    unknown = [key for key in data if key not in fields]
    if unknown:
        return APIResponse.validation_error(
            errors={key: "unknown field" for key in unknown},
            message=f"Unknown fields: {', '.join(unknown)}",
        )
    return None


# Generic handlers; each operation module binds them to its service


def list_operations(service, request):
    try:
        result = service.list(**list_params(request))
        return APIResponse.from_result(result)
    except Exception as e:
        return handle_service_error(e)


def get_operation(service, request, operation_id):
    try:
        return APIResponse.from_result(service.get(operation_id))
    except Exception as e:
        return handle_service_error(e)


def create_operation(service, request, fields, required):
    data, error = parse_json_body(request)
    if error:
        return error

    missing = [field for field in required if data.get(field) in (None, "")]
    if missing:
        return APIResponse.validation_error(
            errors={field: f"{field} is required" for field in missing},
            message=f"Missing required fields: {', '.join(missing)}",
        )

    error = check_fields(data, fields)
    if error:
        return error

    try:
        result = service.create(user_id=request.user.id, **data)
        return APIResponse.from_result(result, status=http_status.HTTP_201_CREATED)
    except Exception as e:
        return handle_service_error(e)


def update_operation(service, request, operation_id, fields):
    data, error = parse_json_body(request)
    if error:
        return error

    error = check_fields(data, fields)
    if error:
        return error

    try:
        return APIResponse.from_result(service.update(operation_id, **data))
    except Exception as e:
        return handle_service_error(e)


def delete_operation(service, request, operation_id):
    try:
        return APIResponse.from_result(service.delete(operation_id))
    except Exception as e:
        return handle_service_error(e)


def cancel_operation(service, request, operation_id):
    data, error = parse_json_body(request)
    if error:
        return error

    try:
        return APIResponse.from_result(service.cancel(operation_id, reason=data.get("reason", "")))
    except Exception as e:
        return handle_service_error(e)


def validate_operation(service, request, operation_id):
    try:
        return APIResponse.from_result(service.validate(operation_id, user_id=request.user.id))
    except Exception as e:
        return handle_service_error(e)


def next_number(service, request):
    try:
        return APIResponse.from_result(service.next_number(query_int(request, "year")))
    except Exception as e:
        return handle_service_error(e)
