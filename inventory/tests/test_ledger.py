import pytest

from inventory.services import (
    ReceiptService, TransferService, StockLedgerService, ValidationError,
)

from .utils import items


@pytest.fixture
def history(product, other_product, main_warehouse, store_warehouse):
    receipt = ReceiptService.create(main_warehouse.id, "Acme", items((product, 10), (other_product, 4)))
    ReceiptService.validate(receipt["receipt"]["id"])
    transfer = TransferService.create(main_warehouse.id, store_warehouse.id, items((product, 3)))
    TransferService.validate(transfer["transfer"]["id"])
    return receipt["receipt"]["reference_number"], transfer["transfer"]["reference_number"]


@pytest.mark.django_db
class TestLedgerList:
    def test_newest_first(self, history):
        entries = StockLedgerService.list()["entries"]

        assert [e["operation_type"] for e in entries] == ["transfer_in", "transfer_out", "receipt", "receipt"]

    def test_filter_by_product(self, history, other_product):
        result = StockLedgerService.list(product_id=other_product.id)

        assert result["pagination"]["total_items"] == 1
        assert result["entries"][0]["product"]["sku"] == other_product.sku

    def test_filter_by_warehouse(self, history, store_warehouse):
        entries = StockLedgerService.list(warehouse_id=store_warehouse.id)["entries"]

        assert len(entries) == 1
        assert entries[0]["quantity_after"] == 3

    def test_filter_by_type_and_reference(self, history):
        receipt_number, transfer_number = history

        assert StockLedgerService.list(operation_type="receipt")["pagination"]["total_items"] == 2
        by_reference = StockLedgerService.list(reference=transfer_number)["entries"]
        assert {e["reference_number"] for e in by_reference} == {transfer_number}

    def test_search_matches_notes(self, history, store_warehouse):
        result = StockLedgerService.list(search=store_warehouse.name)

        assert result["pagination"]["total_items"] == 1
        assert result["entries"][0]["operation_type"] == "transfer_out"

    def test_date_range(self, history):
        assert StockLedgerService.list(date_from="2000-01-01")["pagination"]["total_items"] == 4
        assert StockLedgerService.list(date_to="2000-01-01")["pagination"]["total_items"] == 0

    def test_invalid_operation_type(self):
        with pytest.raises(ValidationError) as exc:
            StockLedgerService.list(operation_type="theft")
        assert exc.value.field == "operation_type"

    def test_invalid_date(self):
        with pytest.raises(ValidationError):
            StockLedgerService.list(date_to="yesterday")

    def test_for_reference(self, history):
        receipt_number, _ = history

        entries = list(StockLedgerService.for_reference(receipt_number))

        assert [e.quantity_change for e in entries] == [10, 4]
