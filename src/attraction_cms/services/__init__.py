"""Service clients for the headless CMS."""

from .cms_client import CmsClient, fetch_attraction_by_slug, list_known_slugs

__all__ = [
    "CmsClient",
    "fetch_attraction_by_slug",
    "list_known_slugs",
]
