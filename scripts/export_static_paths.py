"""Write the list of known attraction slugs for static page pre-computation.

An empty list is a valid result: pages then resolve dynamically on request.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional

from attraction_cms.config.settings import Settings
from attraction_cms.core.logging import configure_logging
from attraction_cms.services import list_known_slugs
from attraction_cms.storage import JsonStore


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export attraction slugs as static paths")
    parser.add_argument("--filename", default="static_paths.json", help="Output file name")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, settings: Settings) -> None:
    slugs = await list_known_slugs(settings=settings)
    if not slugs:
        logging.warning("No slugs enumerated; pages will resolve dynamically")
    settings.ensure_directories()
    store = JsonStore(settings.output_dir)
    path = store.write_static_paths(slugs, filename=args.filename)
    logging.info("Exported %d static paths to %s", len(slugs), path)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    settings = Settings()
    configure_logging(settings)
    asyncio.run(run(args, settings))


if __name__ == "__main__":
    main()
