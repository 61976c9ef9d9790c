"""JSON persistence helpers for CLI exports."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


class JsonStore:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def write(
        self,
        data: Iterable[dict[str, object]],
        *,
        filename: str,
        subdir: str | None = None,
    ) -> Path:
        target_dir = self.root / subdir if subdir else self.root
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / filename
        items = list(data)
        serialisable = {
            "generated_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "count": len(items),
            "items": items,
        }
        path.write_text(json.dumps(serialisable, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Wrote %d items to %s", len(items), path)
        return path

    def write_static_paths(self, slugs: Iterable[str], *, filename: str = "static_paths.json") -> Path:
        return self.write(({"slug": slug} for slug in slugs), filename=filename)

