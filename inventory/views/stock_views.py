from django.views.decorators.csrf import csrf_exempt
from rest_framework.decorators import api_view

from inventory.helpers.request import query_int
from inventory.helpers.require_login import user_required
from inventory.helpers.response import APIResponse
from inventory.services import ProductService, StockLedgerService
from inventory.views.base import handle_service_error


@csrf_exempt
@api_view(["GET"])
@user_required
def get_product(request, product_id):
    try:
        return APIResponse.from_result(ProductService.get(product_id))
    except Exception as e:
        return handle_service_error(e)


@csrf_exempt
@api_view(["GET"])
@user_required
def get_product_stock(request, product_id):
    try:
        result = ProductService.get_stock(
            product_id,
            warehouse_id=request.GET.get("warehouse_id"),
        )
        return APIResponse.from_result(result)
    except Exception as e:
        return handle_service_error(e)


@csrf_exempt
@api_view(["GET"])
@user_required
def list_ledger(request):
    try:
        result = StockLedgerService.list(
            product_id=request.GET.get("product_id"),
            warehouse_id=request.GET.get("warehouse_id"),
            operation_type=request.GET.get("operation_type"),
            reference=request.GET.get("reference"),
            date_from=request.GET.get("date_from"),
            date_to=request.GET.get("date_to"),
            search=request.GET.get("search"),
            page=query_int(request, "page", 1),
            per_page=query_int(request, "per_page"),
        )
        return APIResponse.from_result(result)
    except Exception as e:
        return handle_service_error(e)


@csrf_exempt
@api_view(["GET"])
@user_required
def stock_invariant(request):
    try:
        return APIResponse.from_result(ProductService.check_invariant())
    except Exception as e:
        return handle_service_error(e)
