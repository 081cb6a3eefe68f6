from django.views.decorators.csrf import csrf_exempt
from rest_framework.decorators import api_view

from inventory.helpers.require_login import user_required
from inventory.services import ReceiptService
from inventory.views import base

CREATE_FIELDS = ("warehouse_id", "supplier_name", "items", "reference_number", "status", "notes")
REQUIRED_FIELDS = ("warehouse_id", "supplier_name")
UPDATE_FIELDS = ("warehouse_id", "supplier_name", "reference_number", "status", "notes")


@csrf_exempt
@api_view(["GET"])
@user_required
def list_receipts(request):
    return base.list_operations(ReceiptService, request)


@csrf_exempt
@api_view(["GET"])
@user_required
def get_receipt(request, receipt_id):
    return base.get_operation(ReceiptService, request, receipt_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def create_receipt(request):
    return base.create_operation(ReceiptService, request, CREATE_FIELDS, REQUIRED_FIELDS)


@csrf_exempt
@api_view(["PUT", "PATCH"])
@user_required
def update_receipt(request, receipt_id):
    return base.update_operation(ReceiptService, request, receipt_id, UPDATE_FIELDS)


@csrf_exempt
@api_view(["DELETE"])
@user_required
def delete_receipt(request, receipt_id):
    return base.delete_operation(ReceiptService, request, receipt_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def cancel_receipt(request, receipt_id):
    return base.cancel_operation(ReceiptService, request, receipt_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def validate_receipt(request, receipt_id):
    return base.validate_operation(ReceiptService, request, receipt_id)


@csrf_exempt
@api_view(["GET"])
@user_required
def next_receipt_number(request):
    return base.next_number(ReceiptService, request)
