# scripts/seed_data.py
import asyncio
import logging
from app.core.config import LOG_LEVEL
from app.core.db import init_db, close_db
from app.models.order import Product
from app.services.settings_service import ensure_default_settings

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("seed_data")

PRODUCTS = [
    ("Ebook One", "BK-1"),
    ("Ebook Two", "BK-2"),
    ("Video Course", "VC-1"),
    ("Gift Wrap", None),  # No SKU: never synced
]

async def seed():
    await ensure_default_settings()

    for name, sku in PRODUCTS:
        product, created = await Product.get_or_create(name=name, defaults={"sku": sku, "is_active": True})
        # If existing, reset the SKU (idempotent)
        if not created and product.sku != sku:
            product.sku = sku
            await product.save(update_fields=["sku"])
        log.info(f"Product {product.id}: {name} (SKU: {sku or 'none'})")

    log.info("Products seeded.")

async def main():
    await init_db()
    try:
        await seed()
    finally:
        await close_db()

if __name__ == "__main__":
    asyncio.run(main())
