from django.core.management.base import BaseCommand, CommandError

from inventory.services import ProductService


class Command(BaseCommand):
    help = 'Report products whose current stock differs from the sum of their warehouse rows'

    def handle(self, *args, **options):
        mismatches = ProductService.find_stock_mismatches()

        if not mismatches:
            self.stdout.write(self.style.SUCCESS('All product stock totals match their warehouse rows.'))
            return

        for row in mismatches:
            self.stdout.write(
                f"{row['sku']} ({row['name']}): current_stock={row['current_stock']} "
                f"warehouses={row['warehouse_total']} difference={row['difference']:+d}"
            )

        raise CommandError(f'{len(mismatches)} product(s) out of balance')
