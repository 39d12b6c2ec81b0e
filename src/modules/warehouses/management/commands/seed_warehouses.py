from __future__ import annotations

from django.core.management.base import BaseCommand

from modules.warehouses.models import Warehouse

# name, latitude, longitude, stock
REFERENCE_WAREHOUSES = [
    ("Los Angeles", 33.9425, -118.408056, 355),
    ("New York", 40.639722, -73.778889, 578),
    ("São Paulo", -23.435556, -46.473056, 265),
    ("Paris", 49.009722, 2.547778, 694),
    ("Warsaw", 52.165833, 20.967222, 245),
    ("Hong Kong", 22.308889, 113.914444, 419),
]


class Command(BaseCommand):
    help = "Seed the reference warehouses (idempotent: existing names are kept)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset-stock",
            action="store_true",
            help="Restore the reference stock level on warehouses that already exist.",
        )

    def handle(self, *args, **options):
        self.stdout.write("Seeding warehouses...")
        created_count = 0
        reset_count = 0

        for name, latitude, longitude, stock in REFERENCE_WAREHOUSES:
            warehouse, created = Warehouse.objects.get_or_create(
                name=name,
                defaults={
                    "latitude": latitude,
                    "longitude": longitude,
                    "stock": stock,
                },
            )
            if created:
                created_count += 1
            elif options["reset_stock"] and warehouse.stock != stock:
                warehouse.stock = stock
                warehouse.save(update_fields=["stock"])
                reset_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"created={created_count}, "
                f"reset={reset_count}, "
                f"total={len(REFERENCE_WAREHOUSES)}"
            )
        )
