from django.views.decorators.csrf import csrf_exempt
from rest_framework.decorators import api_view

from inventory.helpers.require_login import user_required
from inventory.services import DeliveryService
from inventory.views import base

CREATE_FIELDS = ("customer_name", "items", "warehouse_id", "reference_number", "status", "notes")
REQUIRED_FIELDS = ("customer_name",)
UPDATE_FIELDS = ("customer_name", "warehouse_id", "reference_number", "status", "notes")


@csrf_exempt
@api_view(["GET"])
@user_required
def list_deliveries(request):
    return base.list_operations(DeliveryService, request)


@csrf_exempt
@api_view(["GET"])
@user_required
def get_delivery(request, delivery_id):
    return base.get_operation(DeliveryService, request, delivery_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def create_delivery(request):
    return base.create_operation(DeliveryService, request, CREATE_FIELDS, REQUIRED_FIELDS)


@csrf_exempt
@api_view(["PUT", "PATCH"])
@user_required
def update_delivery(request, delivery_id):
    return base.update_operation(DeliveryService, request, delivery_id, UPDATE_FIELDS)


@csrf_exempt
@api_view(["DELETE"])
@user_required
def delete_delivery(request, delivery_id):
    return base.delete_operation(DeliveryService, request, delivery_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def cancel_delivery(request, delivery_id):
    return base.cancel_operation(DeliveryService, request, delivery_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def validate_delivery(request, delivery_id):
    return base.validate_operation(DeliveryService, request, delivery_id)


@csrf_exempt
@api_view(["GET"])
@user_required
def next_delivery_number(request):
    return base.next_number(DeliveryService, request)
