"""Client for the attraction collection of the headless CMS."""
from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Dict, List, Optional

import httpx

from attraction_cms.attractions import (
    NOT_FOUND,
    AttractionLookup,
    Found,
    build_attraction_record,
    extract_slugs,
    first_entry,
)
from attraction_cms.config.settings import Settings

logger = logging.getLogger(__name__)


def attraction_query(slug: str) -> Dict[str, str]:
    return {"filters[slug][$eq]": slug, "populate": "*"}


def slug_query() -> Dict[str, str]:
    return {"fields[0]": "slug"}


class CmsClient(AbstractAsyncContextManager["CmsClient"]):
    """Thin async wrapper around the CMS collection endpoint.

    Public lookups never raise: transport errors, error statuses, undecodable
    bodies and unrecognisable entries come back as ``NOT_FOUND`` (or an empty
    slug list).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        base_url: Optional[str] = None,
        collection: Optional[str] = None,
        revalidate_seconds: Optional[int] = None,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        overrides: Dict[str, Any] = {}
        if base_url is not None:
            overrides["cms_base_url"] = base_url
        if collection is not None:
            overrides["collection"] = collection
        if revalidate_seconds is not None:
            overrides["revalidate_seconds"] = revalidate_seconds
        if timeout is not None:
            overrides["request_timeout_s"] = timeout
        settings = settings or Settings()
        if overrides:
            settings = Settings(**{**settings.model_dump(), **overrides})
        self.settings = settings

        default_headers = settings.request_headers()
        if headers:
            default_headers.update(headers)
        self._client = httpx.AsyncClient(
            timeout=settings.request_timeout_s,
            headers=default_headers,
            follow_redirects=True,
            transport=transport,
        )
        self._endpoint = settings.collection_url()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aexit__(self, exc_type, exc, exc_tb) -> None:
        await self.aclose()

    async def get_collection(self, params: Dict[str, str]) -> Any:
        """GET the collection endpoint and decode the JSON body.

        Raises ``httpx.HTTPError`` for transport failures and error statuses and
        ``ValueError`` for undecodable bodies; deeply nested bodies can also
        surface ``RecursionError`` from the decoder.
        """
        logger.debug("CMS request %s params=%s", self._endpoint, params)
        response = await self._client.get(self._endpoint, params=params)
        response.raise_for_status()
        return response.json()

    async def fetch_attraction_by_slug(self, slug: str) -> AttractionLookup:
        if not slug or not slug.strip():
            logger.warning("Refusing attraction lookup for empty slug")
            return NOT_FOUND
        try:
            payload = await self.get_collection(attraction_query(slug))
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Failed to fetch attraction '%s': HTTP %s",
                slug,
                exc.response.status_code,
            )
            return NOT_FOUND
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch attraction '%s': %s", slug, exc)
            return NOT_FOUND
        except ValueError:
            logger.warning("Attraction response for '%s' is not valid JSON", slug)
            return NOT_FOUND
        except Exception:
            logger.exception("Unexpected failure fetching attraction '%s'", slug)
            return NOT_FOUND

        try:
            entry = first_entry(payload)
            if entry is None:
                logger.info("No attraction found for slug '%s'", slug)
                return NOT_FOUND
            record = build_attraction_record(entry, slug=slug)
        except Exception:
            logger.exception("Unable to normalise attraction payload for '%s'", slug)
            return NOT_FOUND
        return Found(record)

    async def list_known_slugs(self) -> List[str]:
        try:
            payload = await self.get_collection(slug_query())
        except httpx.HTTPError as exc:
            logger.warning("Failed to enumerate attraction slugs: %s", exc)
            return []
        except ValueError:
            logger.warning("Slug listing response is not valid JSON")
            return []
        except Exception:
            logger.exception("Unexpected failure enumerating attraction slugs")
            return []
        try:
            slugs = extract_slugs(payload)
        except Exception:
            logger.exception("Unable to read slugs from CMS payload")
            return []
        logger.debug("Enumerated %d attraction slugs", len(slugs))
        return slugs


async def fetch_attraction_by_slug(slug: str, *, settings: Optional[Settings] = None) -> AttractionLookup:
    async with CmsClient(settings) as client:
        return await client.fetch_attraction_by_slug(slug)


async def list_known_slugs(*, settings: Optional[Settings] = None) -> List[str]:
    async with CmsClient(settings) as client:
        return await client.list_known_slugs()
