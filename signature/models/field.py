# signature/models/field.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class FieldType(str, Enum):
    """Closed set of placeable form fields."""
    SIGNATURE = "signature"
    TEXT = "text"
    DATE = "date"
    RADIO = "radio"
    IMAGE = "image"

    @classmethod
    def parse(cls, value: Any) -> Optional["FieldType"]:
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class FieldCoordinates:
    """
    Page-relative box in PDF points (1 pt = 1/72 inch), origin bottom-left.
    `page` is 1-based.
    """
    x: float
    y: float
    width: float
    height: float
    page: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldCoordinates":
        return cls(
            x=data["x"],
            y=data["y"],
            width=data["width"],
            height=data["height"],
            page=data["page"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "page": self.page,
        }


def raw_coordinates(raw: Mapping[str, Any]) -> Any:
    """Coordinates of a raw field entry; older clients send `pdfCoordinates`."""
    coords = raw.get("coordinates")
    if coords is None:
        coords = raw.get("pdfCoordinates")
    return coords


@dataclass(frozen=True)
class Field:
    type: FieldType
    coordinates: FieldCoordinates
    value: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Field":
        value = data.get("value")
        return cls(
            type=FieldType(data["type"]),
            coordinates=FieldCoordinates.from_dict(raw_coordinates(data)),
            value=None if value is None else str(value),
        )

    def redacted(self) -> "Field":
        """Copy for the audit ledger: only text fields keep their value."""
        if self.type == FieldType.TEXT:
            return self
        return Field(type=self.type, coordinates=self.coordinates, value=None)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type.value,
            "coordinates": self.coordinates.to_dict(),
        }
        if self.value is not None:
            data["value"] = self.value
        return data
