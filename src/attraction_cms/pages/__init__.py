"""Page data assembly for the attraction detail template."""

from .view import AttractionPageView, PageImage, build_page_view, media_url, render_lookup

__all__ = [
    "AttractionPageView",
    "PageImage",
    "build_page_view",
    "media_url",
    "render_lookup",
]
