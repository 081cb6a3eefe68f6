from django.views.decorators.csrf import csrf_exempt
from rest_framework.decorators import api_view

from inventory.helpers.require_login import user_required
from inventory.services import TransferService
from inventory.views import base

CREATE_FIELDS = ("from_warehouse_id", "to_warehouse_id", "items", "reference_number", "status", "notes")
REQUIRED_FIELDS = ("from_warehouse_id", "to_warehouse_id")
UPDATE_FIELDS = ("from_warehouse_id", "to_warehouse_id", "reference_number", "status", "notes")


@csrf_exempt
@api_view(["GET"])
@user_required
def list_transfers(request):
    return base.list_operations(TransferService, request)


@csrf_exempt
@api_view(["GET"])
@user_required
def get_transfer(request, transfer_id):
    return base.get_operation(TransferService, request, transfer_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def create_transfer(request):
    return base.create_operation(TransferService, request, CREATE_FIELDS, REQUIRED_FIELDS)


@csrf_exempt
@api_view(["PUT", "PATCH"])
@user_required
def update_transfer(request, transfer_id):
    return base.update_operation(TransferService, request, transfer_id, UPDATE_FIELDS)


@csrf_exempt
@api_view(["DELETE"])
@user_required
def delete_transfer(request, transfer_id):
    return base.delete_operation(TransferService, request, transfer_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def cancel_transfer(request, transfer_id):
    return base.cancel_operation(TransferService, request, transfer_id)


@csrf_exempt
@api_view(["POST"])
@user_required
def validate_transfer(request, transfer_id):
    return base.validate_operation(TransferService, request, transfer_id)


@csrf_exempt
@api_view(["GET"])
@user_required
def next_transfer_number(request):
    return base.next_number(TransferService, request)
