from django.views.decorators.csrf import csrf_exempt
from rest_framework.decorators import api_view

from inventory.helpers.require_login import user_required
from inventory.services import AdjustmentService
from inventory.views import base

CREATE_FIELDS = ("product_id", "warehouse_id", "counted_quantity", "reason", "reference_number", "status", "notes")
REQUIRED_FIELDS = ("product_id", "warehouse_id", "counted_quantity")
UPDATE_FIELDS = ("counted_quantity", "reason", "reference_number", "status", "notes")


@csrf_exempt
@api_view(["GET"])
@user_required
def list_adjustments(request):
    return base.list_operations(AdjustmentService, request)


@csrf_exempt
@api_view(["GET"])
@user_required
def get_adjustment(request, adjustment_id):
    return base.get_operation(AdjustmentService, request, adjustment_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def create_adjustment(request):
    return base.create_operation(AdjustmentService, request, CREATE_FIELDS, REQUIRED_FIELDS)


@csrf_exempt
@api_view(["PUT", "PATCH"])
@user_required
def update_adjustment(request, adjustment_id):
    return base.update_operation(AdjustmentService, request, adjustment_id, UPDATE_FIELDS)


@csrf_exempt
@api_view(["DELETE"])
@user_required
def delete_adjustment(request, adjustment_id):
    return base.delete_operation(AdjustmentService, request, adjustment_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def cancel_adjustment(request, adjustment_id):
    return base.cancel_operation(AdjustmentService, request, adjustment_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def validate_adjustment(request, adjustment_id):
    return base.validate_operation(AdjustmentService, request, adjustment_id)


@csrf_exempt
@api_view(["GET"])
@user_required
def next_adjustment_number(request):
    return base.next_number(AdjustmentService, request)
