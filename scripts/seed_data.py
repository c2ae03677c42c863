#!/usr/bin/env python3
"""
Load demo categories, suppliers and products.

Runs only when SEED_SAMPLE_DATA is enabled (or with --force) and only into
an empty catalog, so it is safe to call on every deploy.

Usage:
    SEED_SAMPLE_DATA=true python scripts/seed_data.py
    python scripts/seed_data.py --force
"""
import argparse
import sys
from decimal import Decimal

from app.core.config import settings
from app.db.base_class import Base
from app.db.session import engine, session_scope
from app.models import inventory_schemas as schemas
from app.models.inventory_models import Category
from app.services.cache_service import build_inventory_cache
from app.services.inventory import InventoryService

CATEGORIES = [
    ("Electronics", "Electronic devices and components"),
    ("Clothing", "Apparel and fashion items"),
    ("Books", "Books and educational materials"),
    ("Home & Garden", "Home improvement and gardening supplies"),
    ("Sports", "Sports equipment and accessories"),
]

SUPPLIERS = [
    dict(name="TechCorp Solutions", contact_person="Alice Johnson", email="alice@techcorp.com",
         phone="+1-555-0101", address="123 Tech Street", city="San Francisco", country="USA",
         postal_code="94105", notes="Leading technology supplier"),
    dict(name="Fashion Forward Inc", contact_person="Bob Smith", email="bob@fashionforward.com",
         phone="+1-555-0102", address="456 Fashion Ave", city="New York", country="USA",
         postal_code="10001", notes="Premium fashion supplier"),
    dict(name="BookWorld Distributors", contact_person="Carol Davis", email="carol@bookworld.com",
         phone="+1-555-0103", address="789 Library Lane", city="Chicago", country="USA",
         postal_code="60601", notes="Educational and general books"),
    dict(name="HomeStyle Suppliers", contact_person="David Wilson", email="david@homestyle.com",
         phone="+1-555-0104", address="321 Home Blvd", city="Los Angeles", country="USA",
         postal_code="90210", notes="Home and garden supplies"),
    dict(name="SportZone International", contact_person="Eva Martinez", email="eva@sportzone.com",
         phone="+1-555-0105", address="654 Sports Way", city="Miami", country="USA",
         postal_code="33101", notes="Sports equipment and gear"),
    dict(name="Global Electronics Ltd", contact_person="Frank Chen", email="frank@globalelectronics.com",
         phone="+86-21-1234-5678", address="888 Innovation Road", city="Shanghai", country="China",
         postal_code="200000", notes="International electronics supplier"),
    dict(name="European Textiles", contact_person="Grace Mueller", email="grace@eurotextiles.com",
         phone="+49-30-9876-5432", address="777 Textile Street", city="Berlin", country="Germany",
         postal_code="10115", notes="High-quality European textiles"),
]

# (name, description, price, quantity, sku, category, supplier, low-stock threshold)
PRODUCTS = [
    ("Smartphone Pro", "Latest smartphone with advanced features", "899.99", 50, "PHONE-001",
     "Electronics", "TechCorp Solutions", 10),
    ("Wireless Headphones", "Premium noise-cancelling headphones", "299.99", 25, "AUDIO-001",
     "Electronics", "TechCorp Solutions", 5),
    ("Laptop Computer", "High-performance laptop for professionals", "1299.99", 15, "COMP-001",
     "Electronics", "Global Electronics Ltd", 5),
    ("Designer T-Shirt", "Premium cotton t-shirt with designer logo", "49.99", 100, "SHIRT-001",
     "Clothing", "Fashion Forward Inc", 20),
    ("Jeans Classic", "Classic fit denim jeans", "79.99", 75, "JEANS-001",
     "Clothing", "European Textiles", 15),
    ("Programming Guide", "Complete guide to modern programming", "59.99", 30, "BOOK-001",
     "Books", "BookWorld Distributors", 10),
    ("Garden Tools Set", "Complete set of essential garden tools", "149.99", 20, "GARDEN-001",
     "Home & Garden", "HomeStyle Suppliers", 5),
    ("Tennis Racket", "Professional grade tennis racket", "199.99", 12, "TENNIS-001",
     "Sports", "SportZone International", 5),
    ("Tablet Device", "Lightweight tablet for entertainment and work", "399.99", 8, "TABLET-001",
     "Electronics", "Global Electronics Ltd", 10),
    ("Running Shoes", "High-performance running shoes", "129.99", 3, "SHOES-001",
     "Sports", "SportZone International", 10),
]


def seed(service: InventoryService) -> int:
    """Create the demo catalog through the service; return the product count."""
    categories = {
        name: service.create_category(schemas.CategoryCreate(name=name, description=description)).id
        for name, description in CATEGORIES
    }
    suppliers = {
        fields["name"]: service.create_supplier(schemas.SupplierCreate(active=True, **fields)).id
        for fields in SUPPLIERS
    }
    for name, description, price, quantity, sku, category, supplier, threshold in PRODUCTS:
        service.create_product(
            schemas.ProductCreate(
                name=name,
                description=description,
                price=Decimal(price),
                inventory_quantity=quantity,
                sku=sku,
                category_id=categories[category],
                supplier_id=suppliers[supplier],
                low_stock_threshold=threshold,
            )
        )
    return len(PRODUCTS)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Load demo inventory data")
    parser.add_argument("--force", action="store_true", help="Seed even when SEED_SAMPLE_DATA is off")
    args = parser.parse_args(argv)

    if not (settings.SEED_SAMPLE_DATA or args.force):
        print("SEED_SAMPLE_DATA is disabled; nothing to do (use --force to override)")
        return 0

    Base.metadata.create_all(bind=engine)
    try:
        with session_scope() as db:
            if db.query(Category).count():
                print("Catalog already has data; skipping seed")
                return 0
            created = seed(InventoryService(db, build_inventory_cache()))
    except Exception as e:
        print(f"❌ Error: {e}")
        return 1
    print(f"✅ Seeded {len(CATEGORIES)} categories, {len(SUPPLIERS)} suppliers, {created} products")
    return 0


if __name__ == "__main__":
    sys.exit(main())
