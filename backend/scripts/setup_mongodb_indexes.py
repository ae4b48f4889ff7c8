"""Setup MongoDB indexes for the order status backend.

Collections:
- orders: daily status maps, queried by delivery weekday
- userMealSelections: one selection per order, joined on orderId
- allergies: catalog read by the allergy name cache

Usage:
    python scripts/setup_mongodb_indexes.py

Environment Variables:
    MONGODB_URI: MongoDB connection string (required)
    MONGODB_DATABASE: Database name (default: meal_delivery)
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorDatabase

from infrastructure.config import get_mongodb_database
from infrastructure.persistence.mongodb import create_mongo_client

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

COLLECTIONS = ("orders", "userMealSelections", "allergies")


async def create_order_indexes(db: AsyncIOMotorDatabase[Dict[str, Any]]) -> None:
    """Create indexes for orders collection.

    Indexes:
    - _id: unique order id (automatic)
    - selectedDays + isActive: active orders delivering on a weekday
    """
    collection = db["orders"]
    logger.info("Creating indexes for 'orders' collection...")

    await collection.create_index(
        [("selectedDays", 1), ("isActive", 1)],
        name="idx_selected_days_active",
    )
    logger.info("  Created index: selectedDays + isActive")


async def create_meal_selection_indexes(db: AsyncIOMotorDatabase[Dict[str, Any]]) -> None:
    """Create indexes for userMealSelections collection.

    Indexes:
    - orderId: unique, one selection per order
    - userId: customer app lookups
    """
    collection = db["userMealSelections"]
    logger.info("Creating indexes for 'userMealSelections' collection...")

    existing_indexes = await collection.list_indexes().to_list(length=None)
    order_id_exists = any(
        "orderId" in idx.get("key", {}) and idx.get("unique", False) for idx in existing_indexes
    )

    if not order_id_exists:
        await collection.create_index(
            [("orderId", 1)],
            name="idx_order_unique",
            unique=True,
        )
        logger.info("  Created unique index: orderId")
    else:
        logger.info("  Unique index on orderId already exists (skipped)")

    await collection.create_index([("userId", 1)], name="idx_user")
    logger.info("  Created index: userId")


async def create_allergy_indexes(db: AsyncIOMotorDatabase[Dict[str, Any]]) -> None:
    collection = db["allergies"]
    logger.info("Creating indexes for 'allergies' collection...")

    await collection.create_index([("name", 1)], name="idx_name")
    logger.info("  Created index: name")


async def list_existing_indexes(db: AsyncIOMotorDatabase[Dict[str, Any]]) -> None:
    """List all existing indexes for verification."""
    logger.info("Existing Indexes Summary")

    for coll_name in COLLECTIONS:
        indexes = await db[coll_name].list_indexes().to_list(length=None)

        logger.info(f"{coll_name}:")
        for idx in indexes:
            name = idx.get("name", "unknown")
            keys = idx.get("key", {})
            unique = " (unique)" if idx.get("unique", False) else ""
            keys_str = ", ".join(f"{k}:{v}" for k, v in keys.items())
            logger.info(f"  - {name}: [{keys_str}]{unique}")


async def setup_all_indexes() -> None:
    try:
        client = create_mongo_client()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    database_name = get_mongodb_database()
    logger.info(f"Connecting to MongoDB: {database_name}")
    db = client[database_name]

    try:
        await client.admin.command("ping")
        logger.info("Connected to MongoDB successfully")

        await create_order_indexes(db)
        await create_meal_selection_indexes(db)
        await create_allergy_indexes(db)

        logger.info("All indexes created successfully")
        await list_existing_indexes(db)

    except Exception as e:
        logger.error(f"Error setting up indexes: {e}")
        sys.exit(1)

    finally:
        client.close()
        logger.info("MongoDB connection closed")


def main() -> None:
    try:
        asyncio.run(setup_all_indexes())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
