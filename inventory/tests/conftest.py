import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from inventory.models import Category, Warehouse, Product, WarehouseStock


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(username="keeper", password="secret-pass")


@pytest.fixture
def category(db):
    return Category.objects.create(name="Raw Materials")


@pytest.fixture
def main_warehouse(db):
    return Warehouse.objects.create(name="Main Warehouse", location="New York")


@pytest.fixture
def store_warehouse(db):
    return Warehouse.objects.create(name="Retail Store", location="Downtown")


@pytest.fixture
def floor_warehouse(db):
    return Warehouse.objects.create(name="Production Floor", location="Factory A")


@pytest.fixture
def product(category):
    return Product.objects.create(sku="RM-STEEL-001", name="Steel Sheets", category=category, unit_of_measure="kg")


@pytest.fixture
def other_product(category):
    return Product.objects.create(sku="RM-ALU-002", name="Aluminum Bars", category=category, unit_of_measure="kg")


@pytest.fixture
def put_stock():
    """Seed consistent opening stock without going through validation."""

    def _put(product, warehouse, quantity):
        WarehouseStock.objects.update_or_create(
            product=product, warehouse=warehouse, defaults={"quantity": quantity}
        )
        product.current_stock = sum(
            WarehouseStock.objects.filter(product=product).values_list("quantity", flat=True)
        )
        product.save(update_fields=["current_stock"])
        return product

    return _put


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client
