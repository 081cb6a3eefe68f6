from django.urls import path

from inventory.views import (
    receipt_views, delivery_views, transfer_views, adjustment_views, stock_views,
)

app_name = "inventory"

urlpatterns = [
    path("receipts", receipt_views.list_receipts, name="receipt-list"),
    path("receipts/create", receipt_views.create_receipt, name="receipt-create"),
    path("receipts/next-number", receipt_views.next_receipt_number, name="receipt-next-number"),
    path("receipts/<int:receipt_id>", receipt_views.get_receipt, name="receipt-detail"),
    path("receipts/<int:receipt_id>/update", receipt_views.update_receipt, name="receipt-update"),
    path("receipts/<int:receipt_id>/delete", receipt_views.delete_receipt, name="receipt-delete"),
    path("receipts/<int:receipt_id>/cancel", receipt_views.cancel_receipt, name="receipt-cancel"),
    path("receipts/<int:receipt_id>/validate", receipt_views.validate_receipt, name="receipt-validate"),

    path("deliveries", delivery_views.list_deliveries, name="delivery-list"),
    path("deliveries/create", delivery_views.create_delivery, name="delivery-create"),
    path("deliveries/next-number", delivery_views.next_delivery_number, name="delivery-next-number"),
    path("deliveries/<int:delivery_id>", delivery_views.get_delivery, name="delivery-detail"),
    path("deliveries/<int:delivery_id>/update", delivery_views.update_delivery, name="delivery-update"),
    path("deliveries/<int:delivery_id>/delete", delivery_views.delete_delivery, name="delivery-delete"),
    path("deliveries/<int:delivery_id>/cancel", delivery_views.cancel_delivery, name="delivery-cancel"),
    path("deliveries/<int:delivery_id>/validate", delivery_views.validate_delivery, name="delivery-validate"),

    path("transfers", transfer_views.list_transfers, name="transfer-list"),
    path("transfers/create", transfer_views.create_transfer, name="transfer-create"),
    path("transfers/next-number", transfer_views.next_transfer_number, name="transfer-next-number"),
    path("transfers/<int:transfer_id>", transfer_views.get_transfer, name="transfer-detail"),
    path("transfers/<int:transfer_id>/update", transfer_views.update_transfer, name="transfer-update"),
    path("transfers/<int:transfer_id>/delete", transfer_views.delete_transfer, name="transfer-delete"),
    path("transfers/<int:transfer_id>/cancel", transfer_views.cancel_transfer, name="transfer-cancel"),
    path("transfers/<int:transfer_id>/validate", transfer_views.validate_transfer, name="transfer-validate"),

    path("adjustments", adjustment_views.list_adjustments, name="adjustment-list"),
    path("adjustments/create", adjustment_views.create_adjustment, name="adjustment-create"),
    path("adjustments/next-number", adjustment_views.next_adjustment_number, name="adjustment-next-number"),
    path("adjustments/<int:adjustment_id>", adjustment_views.get_adjustment, name="adjustment-detail"),
    path("adjustments/<int:adjustment_id>/update", adjustment_views.update_adjustment, name="adjustment-update"),
    path("adjustments/<int:adjustment_id>/delete", adjustment_views.delete_adjustment, name="adjustment-delete"),
    path("adjustments/<int:adjustment_id>/cancel", adjustment_views.cancel_adjustment, name="adjustment-cancel"),
    path("adjustments/<int:adjustment_id>/validate", adjustment_views.validate_adjustment, name="adjustment-validate"),

    path("products/<int:product_id>", stock_views.get_product, name="product-detail"),
    path("products/<int:product_id>/stock", stock_views.get_product_stock, name="product-stock"),
    path("ledger", stock_views.list_ledger, name="ledger-list"),
    path("stock/invariant", stock_views.stock_invariant, name="stock-invariant"),
]
