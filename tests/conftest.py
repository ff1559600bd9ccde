"""Shared test fixtures"""
import asyncio
import copy
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError

from storefront.services.catalog_normalizer import CatalogNormalizer, media_reference
from storefront.services.catalog_service import CatalogService
from storefront.services.selection_engine import SelectionEngine


GARMENT_ROWS = [
    {
        "Id": 1,
        "edicion": "shemah_israel",
        "modelo": "modelo_1",
        "color": "blanco",
        "genero": "Masculino",
        "precio": "35.4",
        "descripcion": "Camisa de lino",
        "tallas": "S,M,L",
        "imagen": [
            {"path": "download/a.jpg", "mimetype": "image/jpeg"},
            {"path": "download/a.mp4", "mimetype": "video/mp4"},
        ],
    },
    {
        "Id": 2,
        "edicion": "shemah_israel",
        "modelo": "modelo_2",
        "color": "azul",
        "genero": "masculino",
        "precio": "38",
        "tallas": "M, L ,",
        "imagen": [{"path": "download/b.jpg", "mimetype": "image/jpeg"}],
    },
    {
        "Id": 3,
        "edicion": "shemah_israel",
        "modelo": "modelo_1",
        "color": "negro",
        "genero": "femenino",
        "precio": "35.4",
        "tallas": "S",
        "imagen": [{"path": "download/c.jpg", "mimetype": "image/jpeg"}],
    },
    {
        "Id": 4,
        "edicion": "jerusalem",
        "modelo": "modelo_1",
        "color": "blanco",
        "genero": "masculino",
        "precio": "40",
        "imagen": [{"path": "download/d.jpg", "mimetype": "image/jpeg"}],
    },
    {
        "Id": 5,
        "edicion": None,
        "modelo": "modelo_9",
        "genero": "masculino",
        "precio": "99",
    },
]

ACCESSORY_ROWS = [
    {
        "Id": 10,
        "nombre_articulo": "talith",
        "genero": "masculino",
        "precio": "17.5",
        "imagen": [{"path": "download/t.jpg", "mimetype": "image/jpeg"}],
    },
    {
        "Id": 11,
        "nombre_articulo": "kipa",
        "genero": "masculino",
        "precio": "5",
    },
    {
        "Id": 12,
        "nombre_articulo": "",
        "genero": "masculino",
        "precio": "1",
    },
]

ADDON_ROWS = [
    {"Id": 1, "nombre": "otro", "imagen": [{"path": "download/x.jpg"}]},
    {"Id": 2, "nombre": "tzitzits_add", "imagen": [{"path": "download/tz.jpg", "mimetype": "image/jpeg"}]},
]


def src(path):
    """Media source the normalizer builds for an attachment path"""
    return media_reference(path, "/api/images")


@pytest.fixture
def garment_rows():
    return copy.deepcopy(GARMENT_ROWS)


@pytest.fixture
def accessory_rows():
    return copy.deepcopy(ACCESSORY_ROWS)


@pytest.fixture
def addon_rows():
    return copy.deepcopy(ADDON_ROWS)


@pytest.fixture
def normalizer():
    return CatalogNormalizer(proxy_path="/api/images")


@pytest.fixture
def products(normalizer, garment_rows, accessory_rows):
    """Normalized sample catalog: two garment editions and two accessories"""
    return normalizer.normalize_tables(garment_rows, accessory_rows)


@pytest.fixture
def engine(products):
    return SelectionEngine(products, custom_edition="Personalizado", fringe_addon_fee=6.0)


class InMemoryCollection:
    """
    Minimal async stand-in for a motor collection.

    Supports the cart queries: lookup by `_id`, `items` filters with
    `$elemMatch` / `$not`, and `$inc`, `$push`, `$pull`, `$setOnInsert`
    updates. Every call yields to the event loop so concurrent requests
    interleave.
    """

    def __init__(self):
        self.documents = {}
        self.name = "carts"

    async def find_one(self, query):
        await asyncio.sleep(0)
        document = self.documents.get(query["_id"])
        return copy.deepcopy(document) if document else None

    async def replace_one(self, query, document, upsert=False):
        await asyncio.sleep(0)
        self.documents[query["_id"]] = {"_id": query["_id"], **copy.deepcopy(document)}

    async def update_one(self, query, update, upsert=False):
        await asyncio.sleep(0)
        document = self.documents.get(query["_id"])
        position = None
        if document is not None:
            matched, position = self._match_items(document.get("items", []), query.get("items"))
        else:
            matched = False

        upserted_id = None
        if not matched:
            if not upsert:
                return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)
            if document is not None:
                raise DuplicateKeyError("E11000 duplicate key error")
            document = {"_id": query["_id"], **copy.deepcopy(update.get("$setOnInsert", {}))}
            self.documents[query["_id"]] = document
            upserted_id = query["_id"]

        items = document.setdefault("items", [])
        modified = 0
        for path, amount in update.get("$inc", {}).items():
            field = path.rsplit(".", 1)[-1]
            items[position][field] += amount
            modified = 1
        for _, value in update.get("$push", {}).items():
            items.append(copy.deepcopy(value))
            modified = 1
        for _, condition in update.get("$pull", {}).items():
            remaining = [item for item in items if not self._item_matches(item, condition)]
            modified = int(len(remaining) != len(items))
            document["items"] = remaining

        return SimpleNamespace(
            matched_count=0 if upserted_id else 1,
            modified_count=modified,
            upserted_id=upserted_id,
        )

    @staticmethod
    def _item_matches(item, condition):
        return all(item.get(key) == value for key, value in condition.items())

    def _match_items(self, items, condition):
        if condition is None:
            return True, None
        if "$not" in condition:
            found, _ = self._match_items(items, condition["$not"])
            return not found, None
        for index, item in enumerate(items):
            if self._item_matches(item, condition["$elemMatch"]):
                return True, index
        return False, None


@pytest.fixture
def cart_collection():
    return InMemoryCollection()


@pytest.fixture
def media_src():
    return src


class FakeClock:
    """Monotonic clock the tests move by hand"""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog_client(garment_rows, accessory_rows, addon_rows):
    client = MagicMock()
    client.fetch_garments = AsyncMock(return_value=garment_rows)
    client.fetch_accessories = AsyncMock(return_value=accessory_rows)
    client.fetch_addons = AsyncMock(return_value=addon_rows)
    client.incomplete_tables = set()
    return client


@pytest.fixture
def catalog_service(catalog_client, normalizer, clock):
    return CatalogService(catalog_client, normalizer=normalizer, revalidate_seconds=3600, clock=clock)
