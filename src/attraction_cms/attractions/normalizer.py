"""Utilities to transform raw CMS attraction payloads into normalised records.

The CMS has served two layouts over time: entries wrapping their fields under
``attributes`` next to a top-level ``id`` (nested) and entries carrying the
fields directly (flat). Media relations drifted the same way. Every entry is
resolved once into a :class:`ResolvedEntry` and all reads go through it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional

from .models import (
    AttractionRecord,
    Coordinates,
    DescriptionBlock,
    MediaReference,
    TextSpan,
)

Shape = Literal["nested", "flat"]

_SPAN_MARKS = ("bold", "italic", "underline", "strikethrough", "code")


class MalformedEntryError(ValueError):
    """Raised when an entry cannot be turned into an attraction record."""


@dataclass(frozen=True)
class ResolvedEntry:
    """Uniform view over one CMS entry, whichever layout it arrived in."""

    shape: Shape
    id: Any
    fields: Mapping[str, Any]

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)


def resolve_entry(entry: Mapping[str, Any]) -> ResolvedEntry:
    if not isinstance(entry, Mapping):
        raise MalformedEntryError(f"Expected an object entry, got {type(entry).__name__}")
    attributes = entry.get("attributes")
    if attributes is not None:
        if not isinstance(attributes, Mapping):
            raise MalformedEntryError("Entry 'attributes' must be an object")
        entry_id = entry.get("id")
        if entry_id is None:
            entry_id = attributes.get("id")
        return ResolvedEntry(shape="nested", id=entry_id, fields=attributes)
    return ResolvedEntry(shape="flat", id=entry.get("id"), fields=entry)


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _extract_formats(value: Any) -> Dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    formats: Dict[str, str] = {}
    for name, rendition in value.items():
        if isinstance(rendition, Mapping) and rendition.get("url"):
            formats[str(name)] = rendition["url"]
    return formats


def _media_from_fields(fields: Mapping[str, Any], media_id: Any) -> Optional[MediaReference]:
    url = fields.get("url")
    if not url or not isinstance(url, str):
        return None
    return MediaReference(
        id=_to_int(media_id if media_id is not None else fields.get("id")),
        url=url,
        alternative_text=fields.get("alternativeText"),
        caption=fields.get("caption"),
        width=_to_int(fields.get("width")),
        height=_to_int(fields.get("height")),
        formats=_extract_formats(fields.get("formats")),
    )


def _media_from_item(item: Any) -> Optional[MediaReference]:
    """Resolve a single media object, either ``{id, attributes}`` or flat."""
    if not isinstance(item, Mapping):
        return None
    attributes = item.get("attributes")
    if isinstance(attributes, Mapping):
        return _media_from_fields(attributes, item.get("id"))
    return _media_from_fields(item, item.get("id"))


def resolve_media(value: Any) -> Optional[MediaReference]:
    """Resolve a single-media relation into a reference, or ``None`` when unset."""
    if not isinstance(value, Mapping):
        return None
    if "data" in value:
        data = value.get("data")
        if isinstance(data, list):
            data = data[0] if data else None
        return _media_from_item(data)
    return _media_from_item(value)


def resolve_media_list(value: Any) -> Optional[List[MediaReference]]:
    """Resolve a multi-media relation.

    ``None`` when upstream sent no gallery (field absent, ``null`` or
    ``{"data": null}``); an explicit ``{"data": []}`` or ``[]`` is an empty gallery.
    """
    if value is None:
        return None
    if isinstance(value, Mapping):
        if "data" not in value:
            single = _media_from_item(value)
            return [single] if single else []
        items: Any = value.get("data")
        if items is None:
            return None
        if isinstance(items, Mapping):
            items = [items]
    elif isinstance(value, list):
        items = value
    else:
        raise MalformedEntryError(f"Unsupported images value of type {type(value).__name__}")
    references: List[MediaReference] = []
    for item in items:
        reference = _media_from_item(item)
        if reference is not None:
            references.append(reference)
    return references


def parse_coordinates(value: Any) -> Optional[Coordinates]:
    if not isinstance(value, Mapping):
        return None
    # The geodata plugin stores decimal degrees under "DD".
    point = value.get("DD") if isinstance(value.get("DD"), Mapping) else value
    if "lat" not in point and "lng" not in point:
        return None
    return Coordinates(lat=_to_float(point.get("lat")), lng=_to_float(point.get("lng")))


def _collect_spans(children: Iterable[Any]) -> List[TextSpan]:
    spans: List[TextSpan] = []
    for child in children:
        if not isinstance(child, Mapping):
            continue
        child_type = child.get("type") or "text"
        if child_type == "link":
            text = "".join(span.text for span in _collect_spans(child.get("children") or []))
            spans.append(TextSpan(text=text, type="link", url=child.get("url")))
        elif "text" in child:
            spans.append(
                TextSpan(
                    text=str(child.get("text") or ""),
                    type=child_type,
                    **{mark: bool(child.get(mark)) for mark in _SPAN_MARKS},
                )
            )
        elif child.get("children"):
            # list-item and similar containers contribute their inline text in order
            spans.extend(_collect_spans(child["children"]))
    return spans


def parse_description(value: Any) -> Optional[List[DescriptionBlock]]:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return []
        return [DescriptionBlock(type="paragraph", children=[TextSpan(text=stripped)])]
    if not isinstance(value, list):
        raise MalformedEntryError(f"Unsupported description value of type {type(value).__name__}")
    blocks: List[DescriptionBlock] = []
    for block in value:
        if not isinstance(block, Mapping):
            continue
        blocks.append(
            DescriptionBlock(
                type=block.get("type") or "paragraph",
                children=_collect_spans(block.get("children") or []),
                level=_to_int(block.get("level")),
                format=block.get("format"),
            )
        )
    return blocks


def first_entry(payload: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        return None
    data = payload.get("data")
    if not isinstance(data, list) or not data:
        return None
    return data[0]


def build_attraction_record(entry: Mapping[str, Any], *, slug: Optional[str] = None) -> AttractionRecord:
    view = resolve_entry(entry)

    record_id = _to_int(view.id)
    if record_id is None:
        raise MalformedEntryError("Entry has no usable id")
    title = view.get("title")
    if not isinstance(title, str) or not title:
        raise MalformedEntryError(f"Entry {record_id} has no title")
    record_slug = view.get("slug") or slug
    if not record_slug:
        raise MalformedEntryError(f"Entry {record_id} has no slug")

    return AttractionRecord(
        id=record_id,
        title=title,
        slug=record_slug,
        location=view.get("location"),
        duration=view.get("duration"),
        category=view.get("category"),
        activity=view.get("activity"),
        kids=view.get("kids"),
        short_desc=view.get("shortDesc"),
        rating=view.get("rating"),
        price_sek=view.get("priceSEK"),
        group_of_people=view.get("groupOfPeople"),
        available_from=view.get("availableFrom"),
        available_to=view.get("availableTo"),
        updated_at=view.get("updatedAt"),
        coordinates=parse_coordinates(view.get("coordinates")),
        description=parse_description(view.get("description")),
        image_cover=resolve_media(view.get("imageCover")),
        image_poster=resolve_media(view.get("imagePoster")),
        images=resolve_media_list(view.get("images")),
    )


def extract_slugs(payload: Any) -> List[str]:
    if not isinstance(payload, Mapping):
        return []
    data = payload.get("data")
    if not isinstance(data, list):
        return []
    slugs: List[str] = []
    for entry in data:
        try:
            slug = resolve_entry(entry).get("slug")
        except MalformedEntryError:
            continue
        if slug and isinstance(slug, str):
            slugs.append(slug)
    return slugs
