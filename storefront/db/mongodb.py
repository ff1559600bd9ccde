"""
MongoDB connection used for cart storage
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from storefront.core.config import config
from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger

CARTS_COLLECTION = "carts"


class Database:
    """Database connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    database: Optional[AsyncIOMotorDatabase] = None


db = Database()


async def connect_to_mongo():
    """Create the database connection"""
    logger.info(
        "Connecting to MongoDB...",
        metadata={"event": "mongodb_connect_attempt", "host": config.mongodb_host, "port": config.mongodb_port},
    )
    try:
        db.client = AsyncIOMotorClient(config.mongodb_url)
        db.database = db.client[config.mongodb_database]
        await db.client.admin.command("ping")
    except PyMongoError as e:
        logger.error(
            "Could not connect to MongoDB",
            error=e,
            metadata={"event": "mongodb_connection_error"},
        )
        db.client = None
        db.database = None
        raise ErrorResponse("Cart storage is unavailable", status_code=503)

    logger.info(
        f"Connected to MongoDB database '{config.mongodb_database}'",
        metadata={"event": "mongodb_connected", "database": config.mongodb_database},
    )


async def close_mongo_connection():
    """Close the database connection"""
    if db.client is not None:
        logger.info("Closing connection to MongoDB...")
        db.client.close()
        db.client = None
        db.database = None


async def get_database() -> AsyncIOMotorDatabase:
    if db.database is None:
        await connect_to_mongo()
    return db.database


async def get_cart_collection() -> AsyncIOMotorCollection:
    database = await get_database()
    return database[CARTS_COLLECTION]
