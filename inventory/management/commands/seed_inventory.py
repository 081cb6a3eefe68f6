from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from inventory.models import Category, Warehouse, Product
from inventory.services import ReceiptService, ServiceError

CATEGORIES = [
    ("Raw Materials", "Unprocessed inputs for production"),
    ("Finished Goods", "Products ready for sale"),
    ("Tools & Equipment", "Workshop tools and machinery"),
    ("Office Supplies", "Stationery and consumables"),
    ("Electronics", "Components and devices"),
]

WAREHOUSES = [
    ("Main Warehouse", "New York"),
    ("Production Floor", "Factory A"),
    ("Retail Store", "Downtown"),
]

# sku, name, category, unit, reorder level, cost, price, opening stock per warehouse
PRODUCTS = [
    ("RM-STEEL-001", "Steel Sheets", "Raw Materials", "kg", 50, "4.50", "6.00", (140, 70, 40)),
    ("RM-ALU-002", "Aluminum Bars", "Raw Materials", "kg", 20, "7.20", "9.50", (15, 10, 5)),
    ("FG-CHAIR-001", "Office Chair", "Finished Goods", "pcs", 10, "45.00", "89.00", (30, 0, 12)),
    ("TL-DRILL-001", "Cordless Drill", "Tools & Equipment", "pcs", 5, "60.00", "110.00", (8, 4, 0)),
    ("OS-PAPER-001", "A4 Paper Ream", "Office Supplies", "box", 25, "3.10", "5.00", (100, 0, 40)),
    ("EL-CABLE-001", "USB-C Cable", "Electronics", "pcs", 30, "1.20", "4.99", (200, 0, 75)),
]


class Command(BaseCommand):
    help = 'Load demo categories, warehouses, products and opening stock'

    def add_arguments(self, parser):
        parser.add_argument('--username', type=str, help='User recorded as creator of the opening receipts')

    def handle(self, *args, **options):
        user_id = None
        if options.get('username'):
            User = get_user_model()
            try:
                user_id = User.objects.get(username=options['username']).id
            except User.DoesNotExist:
                raise CommandError(f"User not found: {options['username']}")

        categories = {}
        for name, description in CATEGORIES:
            categories[name], _ = Category.objects.get_or_create(
                name=name, defaults={"description": description}
            )

        warehouses = []
        for name, location in WAREHOUSES:
            warehouse, _ = Warehouse.objects.get_or_create(name=name, defaults={"location": location})
            warehouses.append(warehouse)

        opening = {warehouse.id: [] for warehouse in warehouses}
        for sku, name, category, unit, reorder, cost, price, stock in PRODUCTS:
            product, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "category": categories[category],
                    "unit_of_measure": unit,
                    "reorder_level": reorder,
                    "cost_price": Decimal(cost),
                    "selling_price": Decimal(price),
                },
            )
            if not created:
                continue
            for warehouse, quantity in zip(warehouses, stock):
                if quantity:
                    opening[warehouse.id].append({
                        "product_id": product.id,
                        "quantity": quantity,
                        "unit_price": cost,
                    })

        validated = 0
        for warehouse in warehouses:
            items = opening[warehouse.id]
            if not items:
                continue
            try:
                result = ReceiptService.create(
                    warehouse_id=warehouse.id,
                    supplier_name="Opening balance",
                    items=items,
                    notes="Opening stock",
                    user_id=user_id,
                )
                ReceiptService.validate(result["receipt"]["id"], user_id=user_id)
            except ServiceError as e:
                raise CommandError(f"Opening stock for {warehouse.name} failed: {e.message}")
            validated += 1

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {len(categories)} categories, {len(warehouses)} warehouses, '
            f'{len(PRODUCTS)} products, {validated} opening receipts'
        ))
