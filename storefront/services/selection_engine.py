"""
Selection & Filter Engine

Drives the storefront's dependent selection cascade

    gender > product type > edition > model > color

over an already-normalized product list. The engine holds only the five
nullable selection fields; every option list and the displayed media are
derived from (products, selection) on demand.

Rules:
- Setting a level clears every level below it, never above.
- A level can only be set while every level above it is set, and edition,
  model and color only apply to garments. Other mutations are ignored so
  that every mutator stays total.
- Gender and product type are auto-selected when their option set becomes
  a single value. A field the user explicitly cleared is not refilled until
  a higher level changes.
- The custom edition leaves the catalog: no models, no colors, no media.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from storefront.core.config import config
from storefront.core.logger import logger
from storefront.models.catalog import Accessory, Garment, Product, ProductType, Variant
from storefront.models.cart import PriceQuote
from storefront.models.selection import (
    LEVEL_ORDER,
    MediaTile,
    SelectionLevel,
    SelectionState,
    SelectionView,
)

CUSTOM_EDITION_ALIASES = ("custom", "personalizado")

AUTO_SELECT_LEVELS = (SelectionLevel.GENDER, SelectionLevel.PRODUCT_TYPE)

GARMENT_ONLY_LEVELS = (SelectionLevel.EDITION, SelectionLevel.MODEL, SelectionLevel.COLOR)

# Marker for values that cannot be coerced to the level type
_INVALID = object()


def is_custom_edition(value: Optional[str], custom_edition: Optional[str] = None) -> bool:
    """True for the sentinel edition that routes to a bespoke-order inquiry."""
    if not value:
        return False
    candidates = set(CUSTOM_EDITION_ALIASES)
    if custom_edition:
        candidates.add(custom_edition.strip().lower())
    return value.strip().lower() in candidates


def _union(values: Iterable[Optional[str]]) -> List:
    result = []
    for value in values:
        if value and value not in result:
            result.append(value)
    return result


class SelectionEngine:
    """Stateful selection cascade for one browsing session."""

    def __init__(
        self,
        products: Sequence[Product],
        custom_edition: Optional[str] = None,
        fringe_addon_fee: Optional[float] = None,
    ):
        self.products: List[Product] = list(products)
        self.custom_edition = custom_edition if custom_edition is not None else config.custom_edition
        self.fringe_addon_fee = (
            fringe_addon_fee if fringe_addon_fee is not None else config.fringe_addon_fee
        )
        self._genders = _union(g for product in self.products for g in product.genders)
        self.reset()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SelectionState:
        return self._state.model_copy()

    @property
    def gender(self) -> Optional[str]:
        return self._state.gender

    @property
    def product_type(self) -> Optional[ProductType]:
        return self._state.product_type

    @property
    def edition(self) -> Optional[str]:
        return self._state.edition

    @property
    def model(self) -> Optional[str]:
        return self._state.model

    @property
    def color(self) -> Optional[str]:
        return self._state.color

    @property
    def is_custom(self) -> bool:
        return is_custom_edition(self._state.edition, self.custom_edition)

    def reset(self) -> None:
        """Return to an empty selection, as on catalog load."""
        self._state = SelectionState()
        # Last option set seen per auto-select level
        self._observed: Dict[SelectionLevel, Optional[Tuple]] = {}
        self._auto_select()

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def apply_selection(self, level: Union[SelectionLevel, str], value) -> bool:
        """
        Set one level and clear every level below it.

        Returns True when the selection changed. Invalid levels, invalid
        values and mutations that would leave a level set under an unset
        parent are ignored.
        """
        try:
            level = SelectionLevel(level)
        except ValueError:
            logger.debug("Ignoring unknown selection level", metadata={"level": str(level)})
            return False

        value = self._coerce(level, value)
        if value is _INVALID:
            logger.debug(
                "Ignoring invalid selection value",
                metadata={"level": level.value},
            )
            return False

        if value is not None:
            missing = [above.value for above in level.above() if self._state.get(above) is None]
            if missing:
                logger.debug(
                    "Ignoring selection below an unset level",
                    metadata={"level": level.value, "missing": missing},
                )
                return False
            if level in GARMENT_ONLY_LEVELS and self._state.product_type != ProductType.GARMENT:
                logger.debug(
                    "Ignoring garment selection outside the garment catalog",
                    metadata={"level": level.value},
                )
                return False

        if self._state.get(level) == value:
            return False

        setattr(self._state, level.value, value)
        for lower in level.below():
            setattr(self._state, lower.value, None)
            self._observed.pop(lower, None)

        self._auto_select()
        return True

    def set_gender(self, value: Optional[str]) -> bool:
        return self.apply_selection(SelectionLevel.GENDER, value)

    def set_product_type(self, value: Union[ProductType, str, None]) -> bool:
        return self.apply_selection(SelectionLevel.PRODUCT_TYPE, value)

    def set_edition(self, value: Optional[str]) -> bool:
        return self.apply_selection(SelectionLevel.EDITION, value)

    def set_model(self, value: Optional[str]) -> bool:
        return self.apply_selection(SelectionLevel.MODEL, value)

    def set_color(self, value: Optional[str]) -> bool:
        return self.apply_selection(SelectionLevel.COLOR, value)

    def clear(self, level: Union[SelectionLevel, str]) -> bool:
        """Reset one level (and everything below it) to nothing."""
        return self.apply_selection(level, None)

    def apply_request(self, request: SelectionState) -> SelectionState:
        """Apply every set field of a selection tuple, top-down."""
        for level in LEVEL_ORDER:
            value = request.get(level)
            if value is not None and self._state.get(level) != self._coerce(level, value):
                self.apply_selection(level, value)
        return self.state

    @staticmethod
    def _coerce(level: SelectionLevel, value):
        if value is None:
            return None
        if level == SelectionLevel.PRODUCT_TYPE:
            try:
                return ProductType(value)
            except ValueError:
                return _INVALID
        if not isinstance(value, str):
            value = str(value)
        value = value.strip()
        if not value:
            return None
        if level == SelectionLevel.GENDER:
            return value.lower()
        return value

    def _auto_select(self) -> None:
        for level in AUTO_SELECT_LEVELS:
            options = tuple(self._options_for(level))
            previous = self._observed.get(level)
            self._observed[level] = options
            if self._state.get(level) is None and len(options) == 1 and options != previous:
                setattr(self._state, level.value, options[0])

    def _options_for(self, level: SelectionLevel) -> List:
        if level == SelectionLevel.GENDER:
            return self.available_genders
        return self.available_types

    # ------------------------------------------------------------------
    # Derivations
    # ------------------------------------------------------------------

    def _garments_for_gender(self) -> List[Garment]:
        gender = self._state.gender
        return [
            product for product in self.products
            if isinstance(product, Garment) and gender in product.genders
        ]

    def _garment_for_edition(self, edition: str) -> Optional[Garment]:
        for product in self.products:
            if isinstance(product, Garment) and edition in product.editions:
                return product
        return None

    @property
    def available_genders(self) -> List[str]:
        return list(self._genders)

    @property
    def available_types(self) -> List[ProductType]:
        gender = self._state.gender
        if not gender:
            return []
        return _union(product.type for product in self.products if gender in product.genders)

    @property
    def available_editions(self) -> List[str]:
        if self._state.product_type != ProductType.GARMENT:
            return []
        return _union(
            edition
            for product in self._garments_for_gender()
            for edition in product.editions
        )

    @property
    def available_models(self) -> List[str]:
        if self.is_custom:
            return []
        gender = self._state.gender
        edition = self._state.edition

        if not edition:
            variants = (v for product in self._garments_for_gender() for v in product.variants)
            models = {v.model for v in variants if v.gender == gender and v.model}
            return sorted(models)

        product = self._garment_for_edition(edition)
        if product is None:
            return []
        return sorted({
            v.model for v in product.variants
            if v.edition == edition and v.gender == gender and v.model
        })

    @property
    def available_colors(self) -> List[str]:
        # Edition and model narrow only when set, so colors show before a model is chosen
        if self.is_custom:
            return []
        gender = self._state.gender
        edition = self._state.edition
        model = self._state.model

        if edition:
            product = self._garment_for_edition(edition)
            variants = product.variants if product else []
        else:
            variants = [v for product in self._garments_for_gender() for v in product.variants]

        return _union(
            v.color for v in variants
            if (not edition or v.edition == edition)
            and (not model or v.model == model)
            and v.gender == gender
        )

    def displayed_media(self) -> List[Union[MediaTile, Accessory]]:
        """
        Media tiles for garments, or matching products for accessories.

        Garment tiles are deduplicated by source (first wins) and sorted by
        order.
        """
        if self.is_custom:
            return []
        product_type = self._state.product_type
        if product_type == ProductType.ACCESSORY:
            return self.displayed_products()
        if product_type == ProductType.GARMENT:
            return self._garment_tiles()
        return []

    def displayed_products(self) -> List[Accessory]:
        if self._state.product_type != ProductType.ACCESSORY:
            return []
        gender = self._state.gender
        return [
            product for product in self.products
            if isinstance(product, Accessory) and gender in product.genders
        ]

    def _garment_tiles(self) -> List[MediaTile]:
        gender = self._state.gender
        edition = self._state.edition
        model = self._state.model
        color = self._state.color
        filtered = bool(edition or model or color)

        tiles: List[MediaTile] = []
        for product in self._garments_for_gender():
            if edition and edition not in product.editions:
                continue
            for variant in product.variants:
                if variant.gender != gender:
                    continue
                if filtered and not self._variant_matches(variant, edition, model, color):
                    continue
                tiles.extend(self._tiles(product, variant))

        seen = set()
        unique = []
        for tile in tiles:
            if tile.source in seen:
                continue
            seen.add(tile.source)
            unique.append(tile)
        return sorted(unique, key=lambda tile: tile.order)

    @staticmethod
    def _variant_matches(variant: Variant, edition, model, color) -> bool:
        return (
            (not edition or variant.edition == edition)
            and (not model or variant.model == model)
            and (not color or variant.color == color)
        )

    @staticmethod
    def _tiles(product: Product, variant: Variant) -> List[MediaTile]:
        return [
            MediaTile(
                source=media.source,
                order=media.order,
                kind=media.kind,
                product_id=product.id,
                variant_id=variant.id,
                edition=variant.edition,
                model=variant.model,
                color=variant.color,
                price=variant.price,
            )
            for media in variant.media
        ]

    def view(self) -> SelectionView:
        """Snapshot of the selection and everything derived from it."""
        media = self.displayed_media()
        return SelectionView(
            selection=self.state,
            available_genders=self.available_genders,
            available_types=self.available_types,
            available_editions=self.available_editions,
            available_models=self.available_models,
            available_colors=self.available_colors,
            displayed_media=[item for item in media if isinstance(item, MediaTile)],
            displayed_products=self.displayed_products(),
            is_custom=self.is_custom,
        )

    # ------------------------------------------------------------------
    # Add-to-cart resolution
    # ------------------------------------------------------------------

    def find_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def resolve_variant(
        self,
        product_id: str,
        variant_id: Optional[str] = None,
    ) -> Tuple[Optional[Product], Optional[Variant]]:
        """Product and (when a media tile was clicked) the concrete variant."""
        product = self.find_product(product_id)
        if product is None:
            return None, None
        return product, product.find_variant(variant_id)

    def resolve_price(
        self,
        product: Product,
        variant: Optional[Variant] = None,
        with_fringe_addon: bool = False,
    ) -> PriceQuote:
        """
        Unit price at add-to-cart time.

        The resolved variant's price wins over the product's base price; the
        fringe add-on adds a flat fee to garments.
        """
        base_price = variant.price if variant is not None and variant.price else product.base_price
        addon_fee = self.fringe_addon_fee if with_fringe_addon and isinstance(product, Garment) else 0.0
        return PriceQuote(
            product_id=product.id,
            variant_id=variant.id if variant is not None else None,
            base_price=base_price,
            addon_fee=addon_fee,
            unit_price=base_price + addon_fee,
        )

