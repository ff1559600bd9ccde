"""
Catalog Models

Normalized products built from raw catalog records. A product is either a
Garment (grouped by edition, with model and color sub-variants) or an
Accessory (grouped by name). Both carry aggregate facets used for filtering.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class ProductType(str, Enum):
    """Kind of product shown in the store."""
    GARMENT = "garment"
    ACCESSORY = "accessory"


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class MediaItem(BaseModel):
    """A media reference (image or video) with its display order."""
    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Path-forwarding URI of the asset")
    order: int = Field(0, description="Position in the source attachment list")
    kind: MediaKind = MediaKind.IMAGE


class Variant(BaseModel):
    """One concrete purchasable configuration of a product."""
    id: Optional[str] = Field(None, description="Source record id of the first merged record")
    edition: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    gender: str
    price: float = 0.0
    available_sizes: List[str] = Field(default_factory=list)
    media: List[MediaItem] = Field(default_factory=list)
    description: Optional[str] = None

    @property
    def identity_key(self) -> Tuple[str, str, str, str]:
        """Variants with equal keys describe the same configuration."""
        return (
            self.edition or "",
            self.model or "",
            self.color or "",
            self.gender or "",
        )


class ProductBase(BaseModel):
    id: str
    display_name: str
    base_price: float = 0.0
    description: Optional[str] = None
    variants: List[Variant] = Field(default_factory=list)
    genders: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)

    def find_variant(self, variant_id: Optional[str]) -> Optional[Variant]:
        if variant_id is None:
            return None
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None


class Garment(ProductBase):
    """A shirt line keyed by edition."""
    type: Literal[ProductType.GARMENT] = ProductType.GARMENT
    editions: List[str] = Field(default_factory=list)
    models: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)


class Accessory(ProductBase):
    """A non-garment article keyed by name."""
    type: Literal[ProductType.ACCESSORY] = ProductType.ACCESSORY


Product = Annotated[Union[Garment, Accessory], Field(discriminator="type")]


class CatalogSnapshot(BaseModel):
    """Normalized catalog plus the moment it was built."""
    products: List[Product] = Field(default_factory=list)
    product_count: int = 0
    fetched_at: Optional[str] = None
