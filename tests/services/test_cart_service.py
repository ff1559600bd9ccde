"""
Unit tests for the cart service and repository
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from storefront.core.errors import ErrorResponse
from storefront.models.cart import AddToCartRequest
from storefront.models.catalog import ProductType
from storefront.models.raw_records import RecordKind
from storefront.models.selection import SelectionRequest
from storefront.repositories.cart_repository import CartRepository
from storefront.services.cart_service import CartService
from storefront.services.selection_engine import SelectionEngine


MASCULINO_GARMENT = {"gender": "masculino", "product_type": "garment"}


@pytest.fixture
def repository(cart_collection):
    return CartRepository(cart_collection, namespace="alef-cart")


@pytest.fixture
def cart_service(repository, engine):
    catalog = MagicMock()
    catalog.build_engine = AsyncMock(return_value=engine)
    return CartService(repository, catalog)


def add_request(product_id, selection=None, **kwargs):
    return AddToCartRequest(
        product_id=product_id,
        selection=SelectionRequest(**(selection or {})),
        **kwargs,
    )


class TestAddGarment:

    @pytest.mark.asyncio
    async def test_clicked_tile_builds_line(self, cart_service, media_src):
        cart = await cart_service.add_item("s1", add_request(
            "garment-shemah_israel",
            {**MASCULINO_GARMENT, "edition": "shemah_israel", "model": "modelo_2"},
            variant_id="2",
            size="L",
        ))

        item = cart.items[0]
        assert item.product_name == "Camisa shemah_israel"
        assert item.price == 38.0
        assert item.type == ProductType.GARMENT
        assert item.attributes.model == "modelo_2"
        assert item.attributes.color == "azul"
        assert item.attributes.size == "L"
        assert item.attributes.gender == "masculino"
        assert item.image == media_src("download/b.jpg")

    @pytest.mark.asyncio
    async def test_same_line_twice_increments_quantity(self, cart_service):
        request = add_request(
            "garment-shemah_israel",
            {**MASCULINO_GARMENT, "edition": "shemah_israel", "model": "modelo_1", "color": "blanco"},
            variant_id="1",
            size="M",
        )
        await cart_service.add_item("s1", request)
        cart = await cart_service.add_item("s1", request)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2
        assert cart.total == pytest.approx(70.8)

    @pytest.mark.asyncio
    async def test_fringe_addon_priced_and_recorded(self, cart_service):
        cart = await cart_service.add_item("s1", add_request(
            "garment-jerusalem",
            {**MASCULINO_GARMENT, "edition": "jerusalem"},
            variant_id="4",
            with_fringe_addon=True,
        ))
        item = cart.items[0]
        assert item.price == 46.0
        assert item.attributes.fringe_addon is True

    @pytest.mark.asyncio
    async def test_defaults_without_variant(self, cart_service, media_src):
        cart = await cart_service.add_item("s1", add_request(
            "garment-jerusalem",
            {**MASCULINO_GARMENT, "edition": "jerusalem"},
        ))
        item = cart.items[0]
        assert item.price == 40.0
        assert item.attributes.size == "M"
        assert item.image == media_src("download/d.jpg")

    @pytest.mark.asyncio
    async def test_custom_edition_name_and_placeholder(self, cart_service):
        cart = await cart_service.add_item("s1", add_request(
            "garment-shemah_israel",
            {**MASCULINO_GARMENT, "edition": "Personalizado"},
            size="XL",
        ))
        item = cart.items[0]
        assert item.product_name.endswith("(Personalizado)")
        assert item.image == "/placeholder.jpg"


class TestAddAccessory:

    @pytest.mark.asyncio
    async def test_accessory_uses_first_variant(self, cart_service, media_src):
        cart = await cart_service.add_item("s1", add_request(
            "accessory-talith",
            {"gender": "masculino", "product_type": "accessory"},
            with_fringe_addon=True,
        ))
        item = cart.items[0]
        assert item.product_name == "talith"
        assert item.price == 17.5
        assert item.type == ProductType.ACCESSORY
        assert item.attributes.fringe_addon is None
        assert item.image == media_src("download/t.jpg")

    @pytest.mark.asyncio
    async def test_negative_feed_price_adds_at_zero(self, repository, normalizer):
        products = normalizer.normalize([
            (RecordKind.ACCESSORY, {"nombre_articulo": "talith", "precio": "-5", "genero": "masculino"}),
        ])
        catalog = MagicMock()
        catalog.build_engine = AsyncMock(return_value=SelectionEngine(products))
        service = CartService(repository, catalog)

        cart = await service.add_item("s1", add_request("accessory-talith"))

        assert cart.items[0].price == 0.0
        assert cart.total == 0.0

    @pytest.mark.asyncio
    async def test_accessory_without_media_gets_placeholder(self, cart_service):
        cart = await cart_service.add_item("s1", add_request(
            "accessory-kipa",
            {"gender": "masculino", "product_type": "accessory"},
        ))
        assert cart.items[0].image == "/placeholder.jpg"


class TestCartErrors:

    @pytest.mark.asyncio
    async def test_unknown_product(self, cart_service):
        with pytest.raises(ErrorResponse) as exc_info:
            await cart_service.add_item("s1", add_request("garment-nope"))
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_variant(self, cart_service):
        with pytest.raises(ErrorResponse) as exc_info:
            await cart_service.add_item("s1", add_request("garment-jerusalem", variant_id="1"))
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_remove_unknown_line(self, cart_service):
        with pytest.raises(ErrorResponse) as exc_info:
            await cart_service.remove_item("s1", "missing")
        assert exc_info.value.status_code == 404


class TestCartLifecycle:

    @pytest.mark.asyncio
    async def test_remove_and_clear(self, cart_service):
        cart = await cart_service.add_item("s1", add_request("accessory-talith"))
        await cart_service.add_item("s1", add_request("accessory-kipa"))

        cart = await cart_service.remove_item("s1", cart.items[0].cart_id)
        assert [item.product_name for item in cart.items] == ["kipa"]

        cart = await cart_service.clear("s1")
        assert cart.is_empty
        assert (await cart_service.get_cart("s1")).is_empty

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, cart_service):
        await cart_service.add_item("s1", add_request("accessory-talith"))
        assert (await cart_service.get_cart("s2")).is_empty


class TestCartRepository:

    @pytest.mark.asyncio
    async def test_saved_under_namespaced_id(self, repository, cart_service, cart_collection):
        await cart_service.add_item("s1", add_request("accessory-talith"))
        document = cart_collection.documents["alef-cart:s1"]
        assert document["namespace"] == "alef-cart"
        assert document["items"][0]["product_id"] == "accessory-talith"

    @pytest.mark.asyncio
    async def test_round_trip_keeps_line_ids(self, repository, cart_service):
        cart = await cart_service.add_item("s1", add_request("accessory-talith"))
        reloaded = await repository.load("s1")
        assert reloaded.items == cart.items

    @pytest.mark.asyncio
    async def test_unreadable_cart_is_discarded(self, repository, cart_collection):
        cart_collection.documents["alef-cart:s1"] = {"_id": "alef-cart:s1", "items": [{"price": "lots"}]}
        cart = await repository.load("s1")
        assert cart.is_empty

    @pytest.mark.asyncio
    async def test_storage_failure_is_503(self):
        collection = MagicMock()
        collection.find_one = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))
        with pytest.raises(ErrorResponse) as exc_info:
            await CartRepository(collection).load("s1")
        assert exc_info.value.status_code == 503


class TestConcurrentAdds:

    @pytest.mark.asyncio
    async def test_simultaneous_equal_adds_both_count(self, cart_service):
        request = add_request("accessory-talith")

        await asyncio.gather(
            cart_service.add_item("s1", request),
            cart_service.add_item("s1", request),
        )

        cart = await cart_service.get_cart("s1")
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    @pytest.mark.asyncio
    async def test_simultaneous_different_adds_keep_both_lines(self, cart_service):
        await asyncio.gather(
            cart_service.add_item("s1", add_request("accessory-talith")),
            cart_service.add_item("s1", add_request("accessory-kipa")),
        )

        cart = await cart_service.get_cart("s1")
        assert sorted(item.product_name for item in cart.items) == ["kipa", "talith"]

    @pytest.mark.asyncio
    async def test_add_gives_up_after_repeated_conflicts(self, cart_service):
        collection = MagicMock()
        collection.update_one = AsyncMock(side_effect=[
            SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None),
            DuplicateKeyError("E11000"),
        ] * 3)
        item = cart_service.build_item(*await _talith(cart_service))

        with pytest.raises(ErrorResponse) as exc_info:
            await CartRepository(collection).add_line("s1", item)
        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_add_storage_failure_is_503(self, cart_service):
        collection = MagicMock()
        collection.update_one = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))
        item = cart_service.build_item(*await _talith(cart_service))

        with pytest.raises(ErrorResponse) as exc_info:
            await CartRepository(collection).add_line("s1", item)
        assert exc_info.value.status_code == 503


async def _talith(cart_service):
    engine = await cart_service.catalog.build_engine()
    product, _ = engine.resolve_variant("accessory-talith")
    return engine, product
