from rest_framework import status as http_status
from rest_framework.response import Response


class APIResponse:
    """JSON envelopes shared by all inventory endpoints."""

    @staticmethod
    def success(data=None, message="Success", status=http_status.HTTP_200_OK):
        payload = {"success": True, "message": message}
        if data is not None:
            payload["data"] = data
        return Response(payload, status=status)
    @staticmethod
    def error(message="Request failed", code="ERROR", details=None, status=http_status.HTTP_400_BAD_REQUEST):
        payload = {"success": False, "error": message, "code": code}
        if details:
            payload["details"] = details
        return Response(payload, status=status)

    @staticmethod
    def validation_error(errors=None, message="Validation failed"):
        return APIResponse.error(message=message, code="VALIDATION_ERROR", details=errors)
    @staticmethod
    def unauthorized(message="Authentication required"):
        return APIResponse.error(
            message=message, code="UNAUTHORIZED", status=http_status.HTTP_401_UNAUTHORIZED
        )

    @staticmethod
    def from_result(result, status=http_status.HTTP_200_OK):
        """Unwrap a service ``success_response`` dict into the envelope."""
        data = dict(result)
        data.pop("success", None)
        message = data.pop("message", "Success")
        return APIResponse.success(data=data, message=message, status=status)

    @staticmethod
    def from_service_error(e):
        return APIResponse.error(
            message=e.message, code=e.code, details=e.details, status=e.status_code
        )
