from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin, TabularInline
from unfold.decorators import display, action
from unfold.contrib.filters.admin import RangeDateTimeFilter

from .models import (
    Category, Warehouse, Product, WarehouseStock,
    Receipt, ReceiptItem, Delivery, DeliveryItem, Transfer, TransferItem,
    Adjustment, StockLedgerEntry,
)
from .services import (
    ServiceError, NumberingService,
    ReceiptService, DeliveryService, TransferService, AdjustmentService,
)

STATUS_LABELS = {
    "draft": "info",
    "waiting": "warning",
    "ready": "warning",
    "done": "success",
    "cancelled": "danger",
}


class OperationAdmin(ModelAdmin):
    """Operations are edited while open; stock only moves through the validate action."""

    service = None
    list_filter_submit = True
    list_fullwidth = True
    actions = ["validate_selected"]

    @display(description=_("Status"), label=STATUS_LABELS)
    def status_badge(self, obj):
        return obj.status

    def get_readonly_fields(self, request, obj=None):
        readonly = ["status", "validated_at", "created_by", "created_at", "updated_at"]
        if obj and obj.status in ("done", "cancelled"):
            readonly += [f.name for f in obj._meta.fields if f.name not in readonly]
        return readonly

    def has_delete_permission(self, request, obj=None):
        if obj and obj.status not in ("draft", "cancelled"):
            return False
        return super().has_delete_permission(request, obj)

    def get_changeform_initial_data(self, request):
        initial = super().get_changeform_initial_data(request)
        initial.setdefault("reference_number", NumberingService.next_number(self.service.prefix))
        return initial

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)

    @action(description=_("Validate selected operations"))
    def validate_selected(self, request, queryset):
        validated = 0
        for operation in queryset:
            try:
                self.service.validate(operation.id, user_id=request.user.id)
                validated += 1
            except ServiceError as e:
                self.message_user(
                    request, f"{operation.reference_number}: {e.message}", level=messages.ERROR
                )
        if validated:
            self.message_user(request, f"{validated} operation(s) validated", level=messages.SUCCESS)


class ItemInline(TabularInline):
    extra = 0
    autocomplete_fields = ["product"]

    def has_change_permission(self, request, obj=None):
        if obj and obj.status in ("done", "cancelled"):
            return False
        return super().has_change_permission(request, obj)

    has_add_permission = has_change_permission
    has_delete_permission = has_change_permission


class ReceiptItemInline(ItemInline):
    model = ReceiptItem
    fields = ("product", "quantity", "unit_price")


class DeliveryItemInline(ItemInline):
    model = DeliveryItem
    fields = ("product", "quantity", "unit_price")


class TransferItemInline(ItemInline):
    model = TransferItem
    fields = ("product", "quantity")


class WarehouseStockInline(TabularInline):
    model = WarehouseStock
    extra = 0
    fields = ("warehouse", "quantity", "updated_at")
    readonly_fields = ("warehouse", "quantity", "updated_at")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Category)
class CategoryAdmin(ModelAdmin):
    list_display = ["id", "name", "created_at"]
    search_fields = ["name"]


@admin.register(Warehouse)
class WarehouseAdmin(ModelAdmin):
    list_display = ["id", "name", "location", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name", "location"]


@admin.register(Product)
class ProductAdmin(ModelAdmin):
    list_display = ["sku", "name", "category", "current_stock", "reorder_level", "stock_badge", "is_active"]
    list_filter = ["is_active", "category"]
    search_fields = ["sku", "name"]
    readonly_fields = ["current_stock", "created_at", "updated_at"]
    inlines = [WarehouseStockInline]
    list_filter_submit = True

    @display(description=_("Stock"), label={"Low": "danger", "OK": "success"})
    def stock_badge(self, obj):
        return "Low" if obj.is_low_stock else "OK"


@admin.register(Receipt)
class ReceiptAdmin(OperationAdmin):
    service = ReceiptService
    list_display = ["reference_number", "supplier_name", "warehouse", "status_badge", "created_at", "validated_at"]
    list_filter = ["status", "warehouse", ("created_at", RangeDateTimeFilter)]
    search_fields = ["reference_number", "supplier_name"]
    inlines = [ReceiptItemInline]


@admin.register(Delivery)
class DeliveryAdmin(OperationAdmin):
    service = DeliveryService
    list_display = ["reference_number", "customer_name", "warehouse", "status_badge", "created_at", "validated_at"]
    list_filter = ["status", "warehouse", ("created_at", RangeDateTimeFilter)]
    search_fields = ["reference_number", "customer_name"]
    inlines = [DeliveryItemInline]


@admin.register(Transfer)
class TransferAdmin(OperationAdmin):
    service = TransferService
    list_display = ["reference_number", "from_warehouse", "to_warehouse", "status_badge", "created_at", "validated_at"]
    list_filter = ["status", ("created_at", RangeDateTimeFilter)]
    search_fields = ["reference_number"]
    inlines = [TransferItemInline]


@admin.register(Adjustment)
class AdjustmentAdmin(OperationAdmin):
    service = AdjustmentService
    list_display = ["reference_number", "product", "warehouse", "system_quantity", "counted_quantity", "difference", "status_badge"]
    list_filter = ["status", "warehouse", ("created_at", RangeDateTimeFilter)]
    search_fields = ["reference_number", "product__name", "product__sku", "reason"]
    autocomplete_fields = ["product"]

    def get_readonly_fields(self, request, obj=None):
        readonly = super().get_readonly_fields(request, obj)
        extra = ["system_quantity", "difference"]
        # The snapshot belongs to one stock row; recount instead of moving it
        if obj:
            extra += ["product", "warehouse"]
        return readonly + [f for f in extra if f not in readonly]

    def save_model(self, request, obj, form, change):
        if obj.status == "draft":
            if not change or {"product", "warehouse"} & set(form.changed_data):
                row = WarehouseStock.objects.filter(product=obj.product, warehouse=obj.warehouse).first()
                obj.system_quantity = row.quantity if row else 0
            obj.difference = obj.counted_quantity - obj.system_quantity
        super().save_model(request, obj, form, change)


@admin.register(StockLedgerEntry)
class StockLedgerEntryAdmin(ModelAdmin):
    list_display = ["created_at", "reference_number", "operation_type", "product", "warehouse", "quantity_change", "quantity_after"]
    list_filter = ["operation_type", "warehouse", ("created_at", RangeDateTimeFilter)]
    search_fields = ["reference_number", "product__name", "product__sku", "notes"]
    list_filter_submit = True
    list_fullwidth = True

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
