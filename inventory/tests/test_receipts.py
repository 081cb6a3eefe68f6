import pytest
from django.utils import timezone

from inventory.models import Receipt, StockLedgerEntry
from inventory.services import (
    ReceiptService, InvalidStatusError, NoItemsError, DuplicateNumberError,
    NotFoundError, ValidationError,
)

from .utils import warehouse_qty, product_stock, items


@pytest.mark.django_db
class TestReceiptCreate:
    def test_generates_reference_number(self, user, product, main_warehouse):
        result = ReceiptService.create(
            warehouse_id=main_warehouse.id,
            supplier_name="Acme Metals",
            items=items((product, 10)),
            user_id=user.id,
        )

        receipt = result["receipt"]
        assert result["success"] is True
        assert receipt["reference_number"] == f"REC-{timezone.now().year}-001"
        assert receipt["status"] == "draft"
        assert receipt["created_by"] == user.id
        assert receipt["items"][0]["quantity"] == 10
        assert receipt["total_quantity"] == 10

    def test_consecutive_numbers(self, product, main_warehouse):
        first = ReceiptService.create(main_warehouse.id, "Acme", items((product, 1)))
        second = ReceiptService.create(main_warehouse.id, "Acme", items((product, 1)))

        year = timezone.now().year
        assert first["receipt"]["reference_number"] == f"REC-{year}-001"
        assert second["receipt"]["reference_number"] == f"REC-{year}-002"

    def test_duplicate_number(self, product, main_warehouse):
        ReceiptService.create(main_warehouse.id, "Acme", items((product, 1)), reference_number="REC-2024-001")

        with pytest.raises(DuplicateNumberError) as exc:
            ReceiptService.create(main_warehouse.id, "Acme", items((product, 1)), reference_number="REC-2024-001")

        assert exc.value.code == "DUPLICATE_NUMBER"
        assert Receipt.objects.count() == 1

    def test_cannot_start_as_done(self, product, main_warehouse):
        with pytest.raises(InvalidStatusError):
            ReceiptService.create(main_warehouse.id, "Acme", items((product, 1)), status="done")

    def test_unknown_warehouse(self, product):
        with pytest.raises(NotFoundError):
            ReceiptService.create(999, "Acme", items((product, 1)))

    def test_unknown_product(self, main_warehouse):
        with pytest.raises(NotFoundError):
            ReceiptService.create(main_warehouse.id, "Acme", [{"product_id": 999, "quantity": 1}])

    @pytest.mark.parametrize("quantity", [0, -2, "abc", 1.5])
    def test_invalid_quantity(self, product, main_warehouse, quantity):
        with pytest.raises(ValidationError):
            ReceiptService.create(main_warehouse.id, "Acme", [{"product_id": product.id, "quantity": quantity}])
        assert Receipt.objects.count() == 0

    def test_supplier_required(self, product, main_warehouse):
        with pytest.raises(ValidationError) as exc:
            ReceiptService.create(main_warehouse.id, "  ", items((product, 1)))
        assert exc.value.field == "supplier_name"


@pytest.mark.django_db
class TestReceiptValidate:
    def test_receipt_into_empty_warehouse(self, user, product, main_warehouse):
        created = ReceiptService.create(main_warehouse.id, "Acme", items((product, 10)), user_id=user.id)

        result = ReceiptService.validate(created["receipt"]["id"], user_id=user.id)

        assert warehouse_qty(product, main_warehouse) == 10
        assert product_stock(product) == 10

        entries = list(StockLedgerEntry.objects.filter(product=product))
        assert len(entries) == 1
        assert entries[0].operation_type == "receipt"
        assert entries[0].quantity_change == 10
        assert entries[0].quantity_after == 10
        assert entries[0].created_by_id == user.id
        assert entries[0].notes == f"Receipt validation: {created['receipt']['reference_number']}"

        assert result["reference_number"] == created["receipt"]["reference_number"]
        assert result["items_processed"] == 1
        assert result["stock_updates"] == [{
            "product_id": product.id,
            "warehouse_id": main_warehouse.id,
            "operation_type": "receipt",
            "quantity_change": 10,
            "quantity_after": 10,
            "product_stock_after": 10,
        }]

        receipt = Receipt.objects.get(id=created["receipt"]["id"])
        assert receipt.status == "done"
        assert receipt.validated_at is not None

    def test_waiting_receipt_can_be_validated(self, product, main_warehouse):
        created = ReceiptService.create(main_warehouse.id, "Acme", items((product, 3)), status="waiting")

        ReceiptService.validate(created["receipt"]["id"])

        assert Receipt.objects.get(id=created["receipt"]["id"]).status == "done"

    def test_ready_receipt_cannot_be_validated(self, product, main_warehouse):
        created = ReceiptService.create(main_warehouse.id, "Acme", items((product, 3)), status="ready")

        with pytest.raises(InvalidStatusError):
            ReceiptService.validate(created["receipt"]["id"])

    def test_second_validation_is_rejected(self, product, main_warehouse):
        created = ReceiptService.create(main_warehouse.id, "Acme", items((product, 10)))
        ReceiptService.validate(created["receipt"]["id"])
        validated_at = Receipt.objects.get(id=created["receipt"]["id"]).validated_at

        with pytest.raises(InvalidStatusError) as exc:
            ReceiptService.validate(created["receipt"]["id"])

        assert exc.value.code == "INVALID_STATUS"
        assert warehouse_qty(product, main_warehouse) == 10
        assert product_stock(product) == 10
        assert StockLedgerEntry.objects.count() == 1
        assert Receipt.objects.get(id=created["receipt"]["id"]).validated_at == validated_at

    def test_cancelled_receipt(self, product, main_warehouse):
        created = ReceiptService.create(main_warehouse.id, "Acme", items((product, 10)))
        ReceiptService.cancel(created["receipt"]["id"])

        with pytest.raises(InvalidStatusError):
            ReceiptService.validate(created["receipt"]["id"])
        assert StockLedgerEntry.objects.count() == 0

    def test_receipt_without_items(self, main_warehouse):
        created = ReceiptService.create(main_warehouse.id, "Acme", [])

        with pytest.raises(NoItemsError) as exc:
            ReceiptService.validate(created["receipt"]["id"])

        assert exc.value.code == "NO_ITEMS"
        assert Receipt.objects.get(id=created["receipt"]["id"]).status == "draft"

    def test_missing_receipt(self):
        with pytest.raises(NotFoundError):
            ReceiptService.validate(12345)

    def test_adds_to_existing_stock(self, product, other_product, main_warehouse, put_stock):
        put_stock(product, main_warehouse, 4)
        created = ReceiptService.create(
            main_warehouse.id, "Acme", items((product, 6), (other_product, 2), (product, 1))
        )

        result = ReceiptService.validate(created["receipt"]["id"])

        assert warehouse_qty(product, main_warehouse) == 11
        assert warehouse_qty(other_product, main_warehouse) == 2
        assert [u["quantity_after"] for u in result["stock_updates"]] == [10, 2, 11]
        assert StockLedgerEntry.objects.count() == 3
