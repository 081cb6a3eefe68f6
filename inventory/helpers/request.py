from rest_framework.exceptions import ParseError

from inventory.helpers.response import APIResponse


def parse_json_body(request):
    """Return ``(data, None)`` or ``(None, error_response)``."""
    try:
        data = request.data
    except ParseError as e:
        return None, APIResponse.validation_error(message=f"Invalid JSON body: {e.detail}")

    if data is None or data == "":
        return {}, None
    if not isinstance(data, dict):
        if hasattr(data, "dict"):
            return data.dict(), None
        return None, APIResponse.validation_error(message="Request body must be a JSON object")
    return dict(data), None


def query_int(request, name, default=None):
    value = request.GET.get(name)
    if value in (None, ""):
        return default
    try:
        return int(value)
    except ValueError:
        return default
