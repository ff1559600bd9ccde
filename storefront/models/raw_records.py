"""
Raw Catalog Record Models

Typed schema for the loosely-structured rows returned by the catalog record
API. Rows come from two tables (garments and accessories) whose field names
follow the spreadsheet columns. Parsing never raises: a row that cannot be
used yields ``None`` so the caller can skip it.
"""

import math
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from storefront.core.config import config

# Leading numeric prefix, the same prefix a lenient float parse would accept
_NUMBER_PREFIX = re.compile(r"\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")


class RecordKind(str, Enum):
    """Which catalog table a record was read from."""
    GARMENT = "garment"
    ACCESSORY = "accessory"


def parse_price(value: Any) -> float:
    """Parse a price cell, returning 0 when no non-negative number can be read."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(1))
    # negative prices are as unusable as NaN or inf
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def parse_sizes(value: Any) -> List[str]:
    """Split a comma separated size list, trimming tokens and dropping empties."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        tokens = [str(token) for token in value if token is not None]
    else:
        tokens = str(value).split(",")
    return [token.strip() for token in tokens if token.strip()]


def _clean_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _attachment_payloads(value: Any) -> List[dict]:
    # position counts every entry, including those skipped for a missing path
    if not isinstance(value, list):
        return []
    attachments = []
    for position, item in enumerate(value):
        if not isinstance(item, Mapping):
            continue
        path = _clean_text(item.get("path"))
        if not path:
            continue
        attachments.append({
            "path": path,
            "mimetype": _clean_text(item.get("mimetype")),
            "position": position,
        })
    return attachments


class Attachment(BaseModel):
    """A media attachment with its position in the record's attachment list."""
    path: str
    mimetype: Optional[str] = None
    position: int = Field(..., ge=0)

    @property
    def is_video(self) -> bool:
        return "video" in (self.mimetype or "").lower()


class _RawRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    record_id: Optional[str] = Field(None, alias="Id")
    gender: str = Field(None, alias="genero", validate_default=True)
    price: float = Field(0.0, alias="precio")
    description: Optional[str] = Field(None, alias="descripcion")
    sizes: List[str] = Field(default_factory=list, alias="tallas")
    attachments: List[Attachment] = Field(default_factory=list, alias="imagen")

    @field_validator("record_id", "description", mode="before")
    @classmethod
    def clean_optional_text(cls, v):
        return _clean_text(v)

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, v):
        text = _clean_text(v)
        return text.lower() if text else config.default_gender.lower()

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v):
        return parse_price(v)

    @field_validator("sizes", mode="before")
    @classmethod
    def split_sizes(cls, v):
        return parse_sizes(v)

    @field_validator("attachments", mode="before")
    @classmethod
    def collect_attachments(cls, v):
        return _attachment_payloads(v)


class GarmentRecord(_RawRecord):
    """A shirt row, grouped by edition."""
    kind: RecordKind = RecordKind.GARMENT
    edition: str = Field(..., alias="edicion", min_length=1)
    model: Optional[str] = Field(None, alias="modelo")
    color: Optional[str] = None

    @field_validator("edition", "model", "color", mode="before")
    @classmethod
    def clean_garment_text(cls, v):
        return _clean_text(v)

    @property
    def grouping_key(self) -> str:
        return self.edition


class AccessoryRecord(_RawRecord):
    """A non-garment article row, grouped by name."""
    kind: RecordKind = RecordKind.ACCESSORY
    name: str = Field(..., alias="nombre_articulo", min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return _clean_text(v)

    @property
    def grouping_key(self) -> str:
        return self.name


class AddonRecord(BaseModel):
    """A row of the add-on table (upsell images)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = Field(None, alias="nombre")
    attachments: List[Attachment] = Field(default_factory=list, alias="imagen")

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return _clean_text(v)

    @field_validator("attachments", mode="before")
    @classmethod
    def collect_attachments(cls, v):
        return _attachment_payloads(v)


RawRecord = Union[GarmentRecord, AccessoryRecord]


def parse_raw_record(kind: Union[RecordKind, str], data: Any) -> Optional[RawRecord]:
    """
    Parse one raw row into its typed record.

    Returns None (skip) for non-mapping rows, rows without a grouping key,
    unknown kinds, or rows that fail validation.
    """
    if not isinstance(data, Mapping):
        return None
    try:
        kind = RecordKind(kind)
    except ValueError:
        return None

    model = GarmentRecord if kind == RecordKind.GARMENT else AccessoryRecord
    payload = {key: value for key, value in data.items() if key != "kind"}
    try:
        return model.model_validate(payload)
    except ValidationError:
        return None


def parse_addon_record(data: Any) -> Optional[AddonRecord]:
    if not isinstance(data, Mapping):
        return None
    try:
        return AddonRecord.model_validate(data)
    except ValidationError:
        return None
