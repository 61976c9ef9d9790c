"""Fetch one attraction by slug and print the render-ready page data."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from attraction_cms.attractions import Found
from attraction_cms.config.settings import Settings
from attraction_cms.core.logging import configure_logging
from attraction_cms.pages import render_lookup
from attraction_cms.services import CmsClient


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("slug", help="Attraction slug, e.g. northern-lights")
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Print the normalised record instead of the page view",
    )
    parser.add_argument("--output", type=Path, help="Write JSON to this file instead of stdout")
    parser.add_argument("--base-url", help="Override ATTRACTIONS_CMS_BASE_URL")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, settings: Settings) -> int:
    async with CmsClient(settings, base_url=args.base_url) as client:
        lookup = await client.fetch_attraction_by_slug(args.slug)

    if not isinstance(lookup, Found):
        logging.warning("Attraction '%s' not found", args.slug)
        return 1

    if args.raw:
        body = lookup.record.to_dict()
    else:
        view = render_lookup(lookup, media_base_url=settings.resolved_media_base_url())
        body = view.to_dict() if view else {}

    text = json.dumps(body, indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        logging.info("Wrote attraction '%s' to %s", args.slug, args.output)
    else:
        print(text)
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    settings = Settings()
    configure_logging(settings)
    sys.exit(asyncio.run(run(args, settings)))


if __name__ == "__main__":
    main()
