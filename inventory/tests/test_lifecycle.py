import pytest

from inventory.models import Delivery, Receipt, ReceiptItem, StockLedgerEntry
from inventory.services import (
    ReceiptService, DeliveryService, TransferService,
    InvalidStatusError, DuplicateNumberError, ValidationError, NotFoundError,
    InvalidWarehousesError,
)

from .utils import items


@pytest.fixture
def receipt(product, main_warehouse):
    return ReceiptService.create(main_warehouse.id, "Acme", items((product, 5)))["receipt"]


@pytest.mark.django_db
class TestUpdate:
    def test_header_fields(self, receipt, store_warehouse):
        result = ReceiptService.update(
            receipt["id"], supplier_name="Initech", notes="call first", warehouse_id=store_warehouse.id
        )

        assert result["receipt"]["supplier_name"] == "Initech"
        assert result["receipt"]["notes"] == "call first"
        assert result["receipt"]["warehouse_id"] == store_warehouse.id

    @pytest.mark.parametrize("path", [["waiting"], ["ready"], ["waiting", "ready", "draft"]])
    def test_allowed_transitions(self, receipt, path):
        for status in path:
            result = ReceiptService.update(receipt["id"], status=status)
        assert result["receipt"]["status"] == path[-1]

    def test_done_only_through_validation(self, receipt):
        with pytest.raises(InvalidStatusError):
            ReceiptService.update(receipt["id"], status="done")
        assert Receipt.objects.get(id=receipt["id"]).status == "draft"

    def test_unknown_status(self, receipt):
        with pytest.raises(InvalidStatusError):
            ReceiptService.update(receipt["id"], status="shipped")

    def test_done_is_terminal(self, receipt):
        ReceiptService.validate(receipt["id"])

        with pytest.raises(InvalidStatusError):
            ReceiptService.update(receipt["id"], notes="late edit")

    def test_cancelled_is_terminal(self, receipt):
        ReceiptService.cancel(receipt["id"])

        with pytest.raises(InvalidStatusError):
            ReceiptService.update(receipt["id"], status="draft")

    def test_renumber_checks_duplicates(self, receipt, product, main_warehouse):
        other = ReceiptService.create(main_warehouse.id, "Acme", items((product, 1)))["receipt"]

        with pytest.raises(DuplicateNumberError):
            ReceiptService.update(other["id"], reference_number=receipt["reference_number"])

    def test_renumber_to_same_value(self, receipt):
        result = ReceiptService.update(receipt["id"], reference_number=receipt["reference_number"])
        assert result["receipt"]["reference_number"] == receipt["reference_number"]

    def test_creator_cannot_be_changed(self, receipt, user):
        with pytest.raises(ValidationError):
            ReceiptService.update(receipt["id"], created_by=user.id)

    def test_transfer_edit_keeps_warehouses_distinct(self, product, main_warehouse, store_warehouse):
        transfer = TransferService.create(main_warehouse.id, store_warehouse.id, items((product, 1)))["transfer"]

        with pytest.raises(InvalidWarehousesError):
            TransferService.update(transfer["id"], to_warehouse_id=main_warehouse.id)

    def test_delivery_warehouse_can_be_cleared(self, product, main_warehouse):
        delivery = DeliveryService.create("Globex", items((product, 1)), warehouse_id=main_warehouse.id)["delivery"]

        result = DeliveryService.update(delivery["id"], warehouse_id=None)

        assert result["delivery"]["warehouse_id"] is None
        assert Delivery.objects.get(id=delivery["id"]).warehouse is None


@pytest.mark.django_db
class TestCancel:
    def test_appends_reason(self, receipt):
        result = ReceiptService.cancel(receipt["id"], reason="supplier withdrew")

        assert result["receipt"]["status"] == "cancelled"
        assert "Cancelled: supplier withdrew" in result["receipt"]["notes"]

    def test_done_cannot_be_cancelled(self, receipt, product, main_warehouse):
        ReceiptService.validate(receipt["id"])

        with pytest.raises(InvalidStatusError):
            ReceiptService.cancel(receipt["id"])

        assert Receipt.objects.get(id=receipt["id"]).status == "done"


@pytest.mark.django_db
class TestDelete:
    def test_draft_deleted_with_items(self, receipt):
        ReceiptService.delete(receipt["id"])

        assert not Receipt.objects.filter(id=receipt["id"]).exists()
        assert ReceiptItem.objects.count() == 0

    def test_cancelled_can_be_deleted(self, receipt):
        ReceiptService.cancel(receipt["id"])
        ReceiptService.delete(receipt["id"])

        assert Receipt.objects.count() == 0

    @pytest.mark.parametrize("status", ["waiting", "ready"])
    def test_open_but_not_draft(self, receipt, status):
        ReceiptService.update(receipt["id"], status=status)

        with pytest.raises(InvalidStatusError):
            ReceiptService.delete(receipt["id"])

    def test_done_is_kept_with_its_ledger(self, receipt):
        ReceiptService.validate(receipt["id"])

        with pytest.raises(InvalidStatusError):
            ReceiptService.delete(receipt["id"])

        assert Receipt.objects.filter(id=receipt["id"]).exists()
        assert StockLedgerEntry.objects.count() == 1

    def test_missing(self):
        with pytest.raises(NotFoundError):
            ReceiptService.delete(404)


@pytest.mark.django_db
class TestList:
    def test_filters_and_search(self, product, main_warehouse, store_warehouse):
        ReceiptService.create(main_warehouse.id, "Acme Metals", items((product, 1)))
        ReceiptService.create(store_warehouse.id, "Initech", items((product, 1)), status="waiting")

        assert ReceiptService.list(search="acme")["pagination"]["total_items"] == 1
        assert ReceiptService.list(status="waiting")["receipts"][0]["supplier_name"] == "Initech"
        assert ReceiptService.list(warehouse_id=main_warehouse.id)["pagination"]["total_items"] == 1

    def test_bad_status_filter(self):
        with pytest.raises(InvalidStatusError):
            ReceiptService.list(status="bogus")

    def test_bad_date_filter(self):
        with pytest.raises(ValidationError):
            ReceiptService.list(date_from="15/01/2024")

    def test_pagination(self, product, main_warehouse):
        for _ in range(3):
            ReceiptService.create(main_warehouse.id, "Acme", items((product, 1)))

        result = ReceiptService.list(page=2, per_page=2)

        assert len(result["receipts"]) == 1
        assert result["pagination"]["total_pages"] == 2
        assert result["pagination"]["has_prev"] is True
