"""Dataclasses for normalised attraction records and lookup results."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


def _compact(values: dict[str, object]) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}


@dataclass(frozen=True, slots=True)
class MediaReference:
    """Uploaded file as returned by the CMS; ``url`` is relative to the CMS host."""

    url: str
    id: Optional[int] = None
    alternative_text: Optional[str] = None
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    formats: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        payload = _compact(
            {
                "id": self.id,
                "url": self.url,
                "alternativeText": self.alternative_text,
                "caption": self.caption,
                "width": self.width,
                "height": self.height,
            }
        )
        if self.formats:
            payload["formats"] = dict(self.formats)
        return payload


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: Optional[float] = None
    lng: Optional[float] = None

    def to_dict(self) -> dict[str, object]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True, slots=True)
class TextSpan:
    """Inline run of text inside a rich-text block."""

    text: str
    type: str = "text"
    url: Optional[str] = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"type": self.type, "text": self.text}
        if self.url is not None:
            payload["url"] = self.url
        for mark in ("bold", "italic", "underline", "strikethrough", "code"):
            if getattr(self, mark):
                payload[mark] = True
        return payload


@dataclass(frozen=True, slots=True)
class DescriptionBlock:
    type: str
    children: List[TextSpan] = field(default_factory=list)
    level: Optional[int] = None
    format: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.children)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "type": self.type,
            "children": [span.to_dict() for span in self.children],
        }
        if self.level is not None:
            payload["level"] = self.level
        if self.format is not None:
            payload["format"] = self.format
        return payload


@dataclass(frozen=True, slots=True)
class AttractionRecord:
    """Attraction entry flattened from either CMS response shape.

    Numeric fields (``rating``, ``price_sek``, ``group_of_people``) are carried as
    received; date fields stay ISO-8601 strings.
    """

    id: int
    title: str
    slug: str
    location: Optional[str] = None
    duration: Optional[str] = None
    category: Optional[str] = None
    activity: Optional[str] = None
    kids: Optional[str] = None
    short_desc: Optional[str] = None
    rating: Optional[float] = None
    price_sek: Optional[float] = None
    group_of_people: Optional[int] = None
    available_from: Optional[str] = None
    available_to: Optional[str] = None
    updated_at: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    description: Optional[List[DescriptionBlock]] = None
    image_cover: Optional[MediaReference] = None
    image_poster: Optional[MediaReference] = None
    images: Optional[List[MediaReference]] = None

    def to_dict(self) -> dict[str, object]:
        payload = _compact(
            {
                "id": self.id,
                "title": self.title,
                "slug": self.slug,
                "location": self.location,
                "duration": self.duration,
                "category": self.category,
                "activity": self.activity,
                "kids": self.kids,
                "shortDesc": self.short_desc,
                "rating": self.rating,
                "priceSEK": self.price_sek,
                "groupOfPeople": self.group_of_people,
                "availableFrom": self.available_from,
                "availableTo": self.available_to,
                "updatedAt": self.updated_at,
            }
        )
        if self.coordinates is not None:
            payload["coordinates"] = self.coordinates.to_dict()
        if self.description is not None:
            payload["description"] = [block.to_dict() for block in self.description]
        if self.image_cover is not None:
            payload["imageCover"] = self.image_cover.to_dict()
        if self.image_poster is not None:
            payload["imagePoster"] = self.image_poster.to_dict()
        if self.images is not None:
            payload["images"] = [image.to_dict() for image in self.images]
        return payload


@dataclass(frozen=True, slots=True)
class Found:
    record: AttractionRecord


@dataclass(frozen=True, slots=True)
class NotFound:
    """Lookup produced no usable record (missing slug, upstream failure or bad payload)."""


NOT_FOUND = NotFound()

AttractionLookup = Union[Found, NotFound]
