from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = 1


class LevelStore:
    """Remembers the player's current level number in a small JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return DEFAULT_LEVEL
        try:
            obj = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read saved level from %s: %s", self.path, e)
            return DEFAULT_LEVEL

        level = obj.get("level") if isinstance(obj, dict) else None
        if not isinstance(level, int) or isinstance(level, bool) or level < 1:
            logger.warning("Ignoring invalid saved level %r in %s", level, self.path)
            return DEFAULT_LEVEL
        return level

    def save(self, level: int) -> None:
        if level < 1:
            raise ValueError(f"Level must be a positive integer (got {level!r})")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"level": level}), encoding="utf-8")
