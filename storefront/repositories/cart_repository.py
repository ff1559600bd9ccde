"""
Cart repository backed by a MongoDB collection.

Each session's cart is one document whose id is the cart namespace joined
with the session id. The stored items are reloaded exactly as saved.
Line additions and removals are single-document updates, so concurrent
requests for one session do not overwrite each other.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from storefront.core.config import config
from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.cart import Cart, CartItem, CartItemBase

MAX_ADD_ATTEMPTS = 3


class CartRepository:
    """Load and save carts keyed by session id."""

    def __init__(self, collection: AsyncIOMotorCollection, namespace: Optional[str] = None):
        self.collection = collection
        self.namespace = namespace or config.cart_namespace

    def document_id(self, session_id: str) -> str:
        return f"{self.namespace}:{session_id}"

    async def load(self, session_id: str) -> Cart:
        """Return the stored cart, or an empty one."""
        try:
            document = await self.collection.find_one({"_id": self.document_id(session_id)})
        except PyMongoError as e:
            logger.error(
                "Failed to load cart",
                error=e,
                metadata={"event": "cart_load_error", "session_id": session_id},
            )
            raise ErrorResponse("Cart storage is unavailable", status_code=503)

        if not document:
            return Cart(session_id=session_id)

        try:
            return Cart(session_id=session_id, items=document.get("items", []))
        except ValidationError as e:
            # A cart that no longer parses is discarded, same as unreadable local storage
            logger.warning(
                "Discarding unreadable stored cart",
                metadata={"event": "cart_parse_error", "session_id": session_id, "error": str(e)},
            )
            return Cart(session_id=session_id)

    async def save(self, cart: Cart) -> Cart:
        document = {
            "namespace": self.namespace,
            "session_id": cart.session_id,
            "items": [item.model_dump(mode="json") for item in cart.items],
        }
        try:
            await self.collection.replace_one(
                {"_id": self.document_id(cart.session_id)},
                document,
                upsert=True,
            )
        except PyMongoError as e:
            logger.error(
                "Failed to save cart",
                error=e,
                metadata={"event": "cart_save_error", "session_id": cart.session_id},
            )
            raise ErrorResponse("Cart storage is unavailable", status_code=503)
        return cart

    async def add_line(self, session_id: str, item: CartItemBase) -> Cart:
        """
        Add a line in place and return the updated cart.

        An equal line (same product and attributes) has its quantity
        incremented with `$inc`; otherwise the line is pushed, guarded so
        that a line pushed concurrently is incremented instead. Concurrent
        adds to one session therefore never lose a unit.
        """
        document_id = self.document_id(session_id)
        line = CartItem(**item.model_dump()).model_dump(mode="json")
        same_line = {"product_id": line["product_id"], "attributes": line["attributes"]}

        try:
            for _ in range(MAX_ADD_ATTEMPTS):
                result = await self.collection.update_one(
                    {"_id": document_id, "items": {"$elemMatch": same_line}},
                    {"$inc": {"items.$.quantity": item.quantity}},
                )
                if result.matched_count:
                    break
                try:
                    result = await self.collection.update_one(
                        {"_id": document_id, "items": {"$not": {"$elemMatch": same_line}}},
                        {
                            "$push": {"items": line},
                            "$setOnInsert": {"namespace": self.namespace, "session_id": session_id},
                        },
                        upsert=True,
                    )
                except DuplicateKeyError:
                    # The cart exists and already holds an equal line
                    continue
                if result.matched_count or result.upserted_id is not None:
                    break
            else:
                logger.warning(
                    "Cart line could not be added after retries",
                    metadata={"event": "cart_add_contended", "session_id": session_id},
                )
                raise ErrorResponse("Cart is being updated, please retry", status_code=409)
        except PyMongoError as e:
            logger.error(
                "Failed to add cart line",
                error=e,
                metadata={"event": "cart_save_error", "session_id": session_id},
            )
            raise ErrorResponse("Cart storage is unavailable", status_code=503)

        return await self.load(session_id)

    async def remove_line(self, session_id: str, cart_id: str) -> bool:
        """Pull one line by its cart id. Returns False when no such line exists."""
        try:
            result = await self.collection.update_one(
                {"_id": self.document_id(session_id)},
                {"$pull": {"items": {"cart_id": cart_id}}},
            )
        except PyMongoError as e:
            logger.error(
                "Failed to remove cart line",
                error=e,
                metadata={"event": "cart_save_error", "session_id": session_id},
            )
            raise ErrorResponse("Cart storage is unavailable", status_code=503)
        return bool(result.modified_count)
