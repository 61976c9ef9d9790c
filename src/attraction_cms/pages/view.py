"""Assemble render-ready page data from a normalised attraction record."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from attraction_cms.attractions import (
    AttractionLookup,
    AttractionRecord,
    Coordinates,
    Found,
    MediaReference,
)


def media_url(base_url: str, url: str) -> str:
    """Join a CMS upload path onto ``base_url``; absolute URLs pass through."""
    if url.startswith(("http://", "https://", "//")):
        return url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


@dataclass(slots=True)
class PageImage:
    url: str
    alt: str
    width: Optional[int] = None
    height: Optional[int] = None

    def to_dict(self) -> dict[str, object]:
        return {"url": self.url, "alt": self.alt, "width": self.width, "height": self.height}


@dataclass(slots=True)
class AttractionPageView:
    """Everything the attraction detail template needs, with absolute media URLs."""

    id: int
    slug: str
    title: str
    short_desc: Optional[str] = None
    cover: Optional[PageImage] = None
    gallery: List[PageImage] = field(default_factory=list)
    facts: List[Tuple[str, str]] = field(default_factory=list)
    paragraphs: List[str] = field(default_factory=list)
    coordinates: Optional[Coordinates] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "short_desc": self.short_desc,
            "cover": self.cover.to_dict() if self.cover else None,
            "gallery": [image.to_dict() for image in self.gallery],
            "facts": [{"label": label, "value": value} for label, value in self.facts],
            "paragraphs": list(self.paragraphs),
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
            "updated_at": self.updated_at,
        }


def _page_image(reference: Optional[MediaReference], *, base_url: str, fallback_alt: str) -> Optional[PageImage]:
    if reference is None or not reference.url:
        return None
    return PageImage(
        url=media_url(base_url, reference.url),
        alt=reference.alternative_text or fallback_alt,
        width=reference.width,
        height=reference.height,
    )


def _availability(record: AttractionRecord) -> Optional[str]:
    if record.available_from and record.available_to:
        return f"{record.available_from} to {record.available_to}"
    if record.available_from:
        return f"from {record.available_from}"
    if record.available_to:
        return f"until {record.available_to}"
    return None


def _facts(record: AttractionRecord) -> List[Tuple[str, str]]:
    # Falsy values (0 rating, empty strings) are left out like on the live page.
    candidates: List[Tuple[str, object]] = [
        ("Rating", record.rating),
        ("Duration", record.duration),
        ("Price", f"{record.price_sek} SEK" if record.price_sek else None),
        ("Location", record.location),
        ("Category", record.category),
        ("Activity", record.activity),
        ("Kids", record.kids),
        ("Group size", record.group_of_people),
        ("Available", _availability(record)),
    ]
    return [(label, str(value)) for label, value in candidates if value]


def build_page_view(record: AttractionRecord, *, media_base_url: str) -> AttractionPageView:
    cover = _page_image(record.image_cover, base_url=media_base_url, fallback_alt=record.title)
    gallery = [
        image
        for image in (
            _page_image(reference, base_url=media_base_url, fallback_alt=record.title)
            for reference in record.images or []
        )
        if image is not None
    ]
    paragraphs = [block.text for block in record.description or [] if block.text.strip()]
    return AttractionPageView(
        id=record.id,
        slug=record.slug,
        title=record.title,
        short_desc=record.short_desc,
        cover=cover,
        gallery=gallery,
        facts=_facts(record),
        paragraphs=paragraphs,
        coordinates=record.coordinates,
        updated_at=record.updated_at,
    )


def render_lookup(lookup: AttractionLookup, *, media_base_url: str) -> Optional[AttractionPageView]:
    """Return the page view for a found record, ``None`` for the not-found page."""
    if isinstance(lookup, Found):
        return build_page_view(lookup.record, media_base_url=media_base_url)
    return None
