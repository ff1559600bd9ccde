"""
Selection Models

State and derived view of the storefront filter cascade
(gender > product type > edition > model > color).
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.models.catalog import Accessory, MediaItem, ProductType


class SelectionLevel(str, Enum):
    """Filter levels, declared from the top of the cascade down."""
    GENDER = "gender"
    PRODUCT_TYPE = "product_type"
    EDITION = "edition"
    MODEL = "model"
    COLOR = "color"

    @property
    def depth(self) -> int:
        return LEVEL_ORDER.index(self)

    def below(self) -> List["SelectionLevel"]:
        """Levels strictly below this one."""
        return LEVEL_ORDER[self.depth + 1:]

    def above(self) -> List["SelectionLevel"]:
        """Levels strictly above this one."""
        return LEVEL_ORDER[:self.depth]


LEVEL_ORDER = list(SelectionLevel)


class SelectionState(BaseModel):
    """The five nullable selection fields of one browsing session."""
    gender: Optional[str] = None
    product_type: Optional[ProductType] = None
    edition: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None

    def get(self, level: SelectionLevel):
        return getattr(self, level.value)


class SelectionRequest(SelectionState):
    """Selection tuple sent by a client; applied top-down through the engine."""


class MediaTile(MediaItem):
    """A displayed media item together with the variant it belongs to."""
    product_id: str
    variant_id: Optional[str] = None
    edition: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    price: float = 0.0


class SelectionView(BaseModel):
    """Everything derived from the current selection."""
    selection: SelectionState
    available_genders: List[str] = Field(default_factory=list)
    available_types: List[ProductType] = Field(default_factory=list)
    available_editions: List[str] = Field(default_factory=list)
    available_models: List[str] = Field(default_factory=list)
    available_colors: List[str] = Field(default_factory=list)
    displayed_media: List[MediaTile] = Field(default_factory=list)
    displayed_products: List[Accessory] = Field(default_factory=list)
    is_custom: bool = False
    custom_order_link: Optional[str] = None
