from inventory.models import Product, WarehouseStock


def warehouse_qty(product, warehouse):
    row = WarehouseStock.objects.filter(product=product, warehouse=warehouse).first()
    return row.quantity if row else 0


def product_stock(product):
    return Product.objects.get(id=product.id).current_stock


def items(*pairs):
    return [{"product_id": product.id, "quantity": quantity} for product, quantity in pairs]
