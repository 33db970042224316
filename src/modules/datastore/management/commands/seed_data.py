from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.datastore.models import Category, Inventory, Product


SEED_CATALOG: dict[str, list[tuple[str, str]]] = {
    "Tools": [
        ("Hammer", "9.99"),
        ("Screwdriver Set", "24.50"),
        ("Cordless Drill", "89.90"),
        ("Tape Measure", "7.25"),
    ],
    "Garden": [
        ("Pruning Shears", "18.00"),
        ("Garden Hose 20m", "32.40"),
        ("Watering Can", "12.99"),
    ],
    "Electrical": [
        ("Extension Cord", "15.75"),
        ("LED Bulb Pack", "11.20"),
        ("Circuit Tester", "21.60"),
    ],
}


class Command(BaseCommand):
    help = "Seed the data tier with a small catalog and stock levels."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding catalog data...")

        categories = self._seed_categories()
        products = self._seed_products(categories)
        inventories_created = self._seed_inventory(products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"categories={len(categories)}, "
                f"products={len(products)}, "
                f"inventory={inventories_created}"
            )
        )

    def _seed_categories(self) -> dict[str, Category]:
        self.stdout.write("Creating categories...")
        categories: dict[str, Category] = {}
        for name in SEED_CATALOG:
            category, _ = Category.objects.get_or_create(
                name=name,
                defaults={"description": f"{name} department"},
            )
            categories[name] = category
        return categories

    def _seed_products(self, categories: dict[str, Category]) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for category_name, items in SEED_CATALOG.items():
            for name, price in items:
                product, _ = Product.objects.get_or_create(
                    name=name,
                    category=categories[category_name],
                    defaults={"price": Decimal(price)},
                )
                products.append(product)
        return products

    def _seed_inventory(self, products: list[Product]) -> int:
        self.stdout.write("Creating inventory...")
        created = 0
        for product in products:
            # Half of the choices are at or below the threshold.
            _, was_created = Inventory.objects.get_or_create(
                product=product,
                defaults={
                    "quantity": random.choice([0, 3, 8, 25, 40, 60]),
                    "minimum_quantity": 10,
                },
            )
            created += int(was_created)
        return created
