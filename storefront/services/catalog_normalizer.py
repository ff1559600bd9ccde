"""
Catalog Normalizer

Turns raw garment and accessory rows into grouped products and variants.

The input is an uncontrolled external feed, so normalization degrades
instead of failing: unusable rows are skipped and malformed scalars fall
back to defaults. Nothing in this module raises on bad data.
"""

import time
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote

from storefront.core.config import config
from storefront.core.logger import logger
from storefront.models.catalog import (
    Accessory,
    Garment,
    MediaItem,
    MediaKind,
    Product,
    ProductType,
    Variant,
)
from storefront.models.raw_records import (
    AccessoryRecord,
    Attachment,
    GarmentRecord,
    RawRecord,
    RecordKind,
    parse_raw_record,
)

# (kind, row) pairs, in input order
KindedRow = Tuple[Union[RecordKind, str], Any]


def media_reference(path: str, proxy_path: Optional[str] = None) -> str:
    """Build the path-forwarding URI the media proxy resolves."""
    proxy_path = proxy_path or config.media_proxy_path
    return f"{proxy_path}?path={quote(path, safe='')}"


def _append_unique(target: List[str], values: Iterable[Optional[str]]) -> None:
    for value in values:
        if value and value not in target:
            target.append(value)


def merge_media(media: Iterable[MediaItem]) -> List[MediaItem]:
    """Drop repeated sources (first one wins) and sort by order."""
    seen = set()
    unique = []
    for item in media:
        if item.source in seen:
            continue
        seen.add(item.source)
        unique.append(item)
    return sorted(unique, key=lambda item: item.order)


class CatalogNormalizer:
    """
    Groups raw catalog rows into products.

    Garments are grouped by edition and accessories by name. Every row adds
    one variant to its product; variants describing the same configuration
    are merged in a final pass.
    """

    def __init__(self, proxy_path: Optional[str] = None):
        self.proxy_path = proxy_path or config.media_proxy_path

    def normalize(self, rows: Sequence[KindedRow]) -> List[Product]:
        started = time.perf_counter()
        products: Dict[Tuple[ProductType, str], Product] = {}
        skipped = 0

        for index, (kind, data) in enumerate(rows):
            record = parse_raw_record(kind, data)
            if record is None:
                skipped += 1
                logger.debug(
                    "Skipping unusable catalog record",
                    metadata={"event": "catalog_record_skipped", "kind": str(kind), "index": index},
                )
                continue
            self._upsert(products, record)

        normalized = [self._merge_variants(product) for product in products.values()]

        logger.info(
            f"Normalized {len(normalized)} products from {len(rows)} records",
            metadata={
                "event": "catalog_normalized",
                "records": len(rows),
                "skipped": skipped,
                "products": len(normalized),
                "durationMs": int((time.perf_counter() - started) * 1000),
            },
        )
        return normalized

    def normalize_tables(
        self,
        garment_rows: Sequence[Any],
        accessory_rows: Sequence[Any],
    ) -> List[Product]:
        """Normalize the two source tables, garments first."""
        rows: List[KindedRow] = [(RecordKind.GARMENT, row) for row in garment_rows or []]
        rows.extend((RecordKind.ACCESSORY, row) for row in accessory_rows or [])
        return self.normalize(rows)

    def _upsert(self, products: Dict[Tuple[ProductType, str], Product], record: RawRecord) -> None:
        if isinstance(record, GarmentRecord):
            product_type = ProductType.GARMENT
        else:
            product_type = ProductType.ACCESSORY

        key = (product_type, record.grouping_key)
        product = products.get(key)
        if product is None:
            product = self._new_product(product_type, record)
            products[key] = product

        variant = self._build_variant(record)
        product.variants.append(variant)

        _append_unique(product.genders, [variant.gender])
        _append_unique(product.sizes, variant.available_sizes)
        if isinstance(product, Garment):
            _append_unique(product.editions, [variant.edition])
            _append_unique(product.models, [variant.model])
            _append_unique(product.colors, [variant.color])

    def _new_product(self, product_type: ProductType, record: RawRecord) -> Product:
        fields = {
            "id": f"{product_type.value}-{record.grouping_key}",
            "display_name": record.grouping_key.replace("_", " "),
            "base_price": record.price,
            "description": record.description,
        }
        if product_type == ProductType.GARMENT:
            return Garment(**fields)
        return Accessory(**fields)

    def _build_variant(self, record: RawRecord) -> Variant:
        garment = isinstance(record, GarmentRecord)
        return Variant(
            id=record.record_id,
            edition=record.edition if garment else None,
            model=record.model if garment else None,
            color=record.color if garment else None,
            gender=record.gender,
            price=record.price,
            available_sizes=list(record.sizes),
            media=[self._media_item(attachment) for attachment in record.attachments],
            description=record.description,
        )

    def _media_item(self, attachment: Attachment) -> MediaItem:
        return MediaItem(
            source=media_reference(attachment.path, self.proxy_path),
            order=attachment.position,
            kind=MediaKind.VIDEO if attachment.is_video else MediaKind.IMAGE,
        )

    def _merge_variants(self, product: Product) -> Product:
        merged: Dict[Tuple[str, str, str, str], Variant] = {}
        for variant in product.variants:
            existing = merged.get(variant.identity_key)
            if existing is None:
                merged[variant.identity_key] = variant.model_copy(
                    update={"media": merge_media(variant.media)}
                )
                continue
            sizes = list(existing.available_sizes)
            _append_unique(sizes, variant.available_sizes)
            merged[variant.identity_key] = existing.model_copy(update={
                "media": merge_media([*existing.media, *variant.media]),
                "available_sizes": sizes,
            })
        product.variants = list(merged.values())
        return product


def normalize(rows: Sequence[KindedRow]) -> List[Product]:
    """Normalize (kind, row) pairs with the default settings."""
    return CatalogNormalizer().normalize(rows)
