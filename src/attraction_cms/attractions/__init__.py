"""Attraction domain models and normalization helpers."""

from .models import (
    NOT_FOUND,
    AttractionLookup,
    AttractionRecord,
    Coordinates,
    DescriptionBlock,
    Found,
    MediaReference,
    NotFound,
    TextSpan,
)
from .normalizer import (
    MalformedEntryError,
    ResolvedEntry,
    build_attraction_record,
    extract_slugs,
    first_entry,
    resolve_entry,
    resolve_media,
    resolve_media_list,
)

__all__ = [
    "NOT_FOUND",
    "AttractionLookup",
    "AttractionRecord",
    "Coordinates",
    "DescriptionBlock",
    "Found",
    "MalformedEntryError",
    "MediaReference",
    "NotFound",
    "ResolvedEntry",
    "TextSpan",
    "build_attraction_record",
    "extract_slugs",
    "first_entry",
    "resolve_entry",
    "resolve_media",
    "resolve_media_list",
]
