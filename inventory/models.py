import uuid as uuid_lib

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class Category(models.Model):
    uuid = models.UUIDField(default=uuid_lib.uuid4, unique=True, editable=False)
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "Categories"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Warehouse(models.Model):
    uuid = models.UUIDField(default=uuid_lib.uuid4, unique=True, editable=False)
    name = models.CharField(max_length=100)
    location = models.CharField(max_length=255, blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Product(models.Model):
    uuid = models.UUIDField(default=uuid_lib.uuid4, unique=True, editable=False)
    sku = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="products"
    )
    unit_of_measure = models.CharField(max_length=20, default="pcs")
    reorder_level = models.PositiveIntegerField(default=0)

    # Aggregate across all warehouses; written only by StockMutationService
    current_stock = models.IntegerField(default=0)

    cost_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    selling_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["sku"], name="product_sku_idx"),
        ]

    @property
    def is_low_stock(self):
        return self.current_stock <= self.reorder_level

    def __str__(self):
        return f"{self.sku} - {self.name}"


class WarehouseStock(models.Model):
    """
    Stock of one product in one warehouse.
    Rows are created lazily on the first movement.
    """

    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="warehouse_stocks"
    )
    warehouse = models.ForeignKey(
        Warehouse, on_delete=models.CASCADE, related_name="stocks"
    )
    quantity = models.IntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [("product", "warehouse")]
        ordering = ["product_id", "warehouse_id"]

    def __str__(self):
        return f"{self.product.name} @ {self.warehouse.name}: {self.quantity}"


class OperationStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    WAITING = "waiting", "Waiting"
    READY = "ready", "Ready"
    DONE = "done", "Done"
    CANCELLED = "cancelled", "Cancelled"


class AdjustmentStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    DONE = "done", "Done"
    CANCELLED = "cancelled", "Cancelled"


class StockOperation(models.Model):
    """
    Shared header of receipts, deliveries, transfers and adjustments.
    Status becomes ``done`` only through validation.
    """

    uuid = models.UUIDField(default=uuid_lib.uuid4, unique=True, editable=False)
    reference_number = models.CharField(max_length=50, unique=True)
    notes = models.TextField(blank=True, default="")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    validated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.reference_number} ({self.status})"


class Receipt(StockOperation):
    status = models.CharField(
        max_length=20, choices=OperationStatus.choices, default=OperationStatus.DRAFT
    )
    warehouse = models.ForeignKey(
        Warehouse, on_delete=models.PROTECT, related_name="receipts"
    )
    supplier_name = models.CharField(max_length=200, blank=True, default="")

    class Meta(StockOperation.Meta):
        indexes = [
            models.Index(fields=["status"], name="receipt_status_idx"),
        ]


class Delivery(StockOperation):
    status = models.CharField(
        max_length=20, choices=OperationStatus.choices, default=OperationStatus.DRAFT
    )
    # Without a warehouse the stock is taken from the fullest warehouses first
    warehouse = models.ForeignKey(
        Warehouse, on_delete=models.PROTECT, null=True, blank=True, related_name="deliveries"
    )
    customer_name = models.CharField(max_length=200, blank=True, default="")

    class Meta(StockOperation.Meta):
        verbose_name_plural = "Deliveries"
        indexes = [
            models.Index(fields=["status"], name="delivery_status_idx"),
        ]


class Transfer(StockOperation):
    status = models.CharField(
        max_length=20, choices=OperationStatus.choices, default=OperationStatus.DRAFT
    )
    from_warehouse = models.ForeignKey(
        Warehouse, on_delete=models.PROTECT, related_name="transfers_out"
    )
    to_warehouse = models.ForeignKey(
        Warehouse, on_delete=models.PROTECT, related_name="transfers_in"
    )

    class Meta(StockOperation.Meta):
        indexes = [
            models.Index(fields=["status"], name="transfer_status_idx"),
        ]

    def clean(self):
        super().clean()
        if self.from_warehouse_id and self.from_warehouse_id == self.to_warehouse_id:
            raise ValidationError(
                {"to_warehouse": "Source and destination warehouses must be different"}
            )


class Adjustment(StockOperation):
    status = models.CharField(
        max_length=20, choices=AdjustmentStatus.choices, default=AdjustmentStatus.DRAFT
    )
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="adjustments"
    )
    warehouse = models.ForeignKey(
        Warehouse, on_delete=models.PROTECT, related_name="adjustments"
    )
    counted_quantity = models.IntegerField(validators=[MinValueValidator(0)])
    system_quantity = models.IntegerField(default=0)
    difference = models.IntegerField(default=0)
    reason = models.TextField(blank=True, default="")

    class Meta(StockOperation.Meta):
        indexes = [
            models.Index(fields=["status"], name="adjustment_status_idx"),
        ]


class ReceiptItem(models.Model):
    receipt = models.ForeignKey(Receipt, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.product.name} x {self.quantity}"


class DeliveryItem(models.Model):
    delivery = models.ForeignKey(Delivery, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.product.name} x {self.quantity}"


class TransferItem(models.Model):
    transfer = models.ForeignKey(Transfer, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.product.name} x {self.quantity}"


class StockLedgerEntry(models.Model):
    """
    Append-only audit trail: one row per quantity change per warehouse.
    """

    class OperationType(models.TextChoices):
        RECEIPT = "receipt", "Receipt"
        DELIVERY = "delivery", "Delivery"
        TRANSFER_IN = "transfer_in", "Transfer In"
        TRANSFER_OUT = "transfer_out", "Transfer Out"
        ADJUSTMENT = "adjustment", "Adjustment"

    uuid = models.UUIDField(default=uuid_lib.uuid4, unique=True, editable=False)
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="ledger_entries"
    )
    warehouse = models.ForeignKey(
        Warehouse, on_delete=models.PROTECT, related_name="ledger_entries"
    )
    operation_type = models.CharField(max_length=20, choices=OperationType.choices)
    reference_number = models.CharField(max_length=50)
    quantity_change = models.IntegerField()
    quantity_after = models.IntegerField()
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    notes = models.TextField(blank=True, default="")

    class Meta:
        verbose_name_plural = "Stock ledger entries"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["product", "created_at"], name="ledger_product_created_idx"),
            models.Index(fields=["reference_number"], name="ledger_reference_idx"),
            models.Index(fields=["operation_type"], name="ledger_operation_type_idx"),
        ]

    def __str__(self):
        return f"{self.reference_number} {self.operation_type} {self.quantity_change:+d}"
