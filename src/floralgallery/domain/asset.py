"""
资产数据模型：链上记录、链下描述文件、画廊条目
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Optional

from floralgallery.core.errors import MetadataError, ValidationError

from .units import to_base_units, to_display_units

AssetIdentifier = int

# file signatures checked when the caller gives no content type
_IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
)


def sniff_image_type(content: bytes) -> Optional[str]:
    for signature, mime in _IMAGE_SIGNATURES:
        if content.startswith(signature):
            return mime
    if len(content) >= 12 and content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return None


@dataclass(frozen=True)
class AssetInfo:
    """``nftInfo`` 查询结果"""
    creator: str
    price: int
    for_sale: bool


@dataclass(frozen=True)
class AssetRecord:
    identifier: AssetIdentifier
    creator: str
    current_owner: str
    price: int
    for_sale: bool

    @classmethod
    def from_info(cls, identifier: AssetIdentifier, owner: str, info: AssetInfo) -> "AssetRecord":
        return cls(identifier, info.creator, owner, info.price, info.for_sale)


@dataclass
class AssetPayload:
    """待上传的图片"""
    content: bytes
    filename: str = "upload"
    content_type: Optional[str] = None

    @property
    def mime_type(self) -> Optional[str]:
        if self.content_type:
            return self.content_type
        return sniff_image_type(self.content)

    def validate(self) -> None:
        if not self.content:
            raise ValidationError("Please select a picture to upload")
        mime = self.mime_type or ""
        if not mime.startswith("image/"):
            raise ValidationError("Please select a valid image file")


@dataclass(frozen=True)
class Descriptor:
    """链下 JSON 描述文件: {name, description, image}"""
    name: str
    description: str
    image: str

    def validate(self) -> None:
        for field_name in ("name", "description", "image"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"Descriptor field '{field_name}' must be a non-empty string")

    def to_json(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description, "image": self.image}

    @classmethod
    def from_json(cls, data: Any) -> "Descriptor":
        if not isinstance(data, dict):
            raise MetadataError(f"Descriptor must be a JSON object, got {type(data).__name__}")
        values = {}
        for key in ("name", "description", "image"):
            value = data.get(key)
            if not isinstance(value, str):
                raise MetadataError(f"Descriptor is missing '{key}'")
            values[key] = value
        return cls(**values)


@dataclass(frozen=True)
class GalleryEntry:
    """画廊展示条目，链上状态与描述文件的合成投影"""
    identifier: AssetIdentifier
    name: str
    description: str
    image_locator: str
    current_owner: str
    creator: str
    price: Decimal
    for_sale: bool

    @property
    def price_base_units(self) -> int:
        return to_base_units(self.price)

    def with_price(self, price: Decimal) -> "GalleryEntry":
        return replace(self, price=price)

    @classmethod
    def assemble(
        cls,
        identifier: AssetIdentifier,
        descriptor: Descriptor,
        owner: str,
        info: AssetInfo,
    ) -> "GalleryEntry":
        return cls.from_record(AssetRecord.from_info(identifier, owner, info), descriptor)

    @classmethod
    def from_record(cls, record: AssetRecord, descriptor: Descriptor) -> "GalleryEntry":
        return cls(
            identifier=record.identifier,
            name=descriptor.name,
            description=descriptor.description,
            image_locator=descriptor.image,
            current_owner=record.current_owner,
            creator=record.creator,
            price=to_display_units(record.price),
            for_sale=record.for_sale,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "name": self.name,
            "description": self.description,
            "image": self.image_locator,
            "owner": self.current_owner,
            "creator": self.creator,
            "price": str(self.price),
            "for_sale": self.for_sale,
        }


@dataclass
class PendingTransaction:
    submitted_hash: str
    kind: str
    sequence_index: Optional[int] = None


@dataclass(frozen=True)
class Confirmation:
    tx_hash: str
    block_number: Optional[int] = None
    identifier: Optional[AssetIdentifier] = None
    extra: Dict[str, Any] = field(default_factory=dict)
