"""Snapshot/seed JSON schema, name matching and file I/O."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
import unicodedata
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from hoopdraft.models import CategoryRaw


logger = logging.getLogger(__name__)

_YEARS_PATTERN = re.compile(r"^\s*(\d{4})\s*-\s*(\d{4})\s*$")
_APOSTROPHES = "'‘’ʼ`"
_WHITESPACE = re.compile(r"\s+")


class SeedPlayer(BaseModel):
    """One player-franchise entry as stored in the snapshot file."""

    name: str = Field(..., min_length=1)
    years: str = "Unknown"
    positions: List[str] = Field(default_factory=list)
    career_years: Optional[int] = Field(default=None, ge=1)
    championships: int = Field(default=0, ge=0)
    category_raw: Optional[CategoryRaw] = None

    model_config = ConfigDict(frozen=True)


class SnapshotFile(BaseModel):
    generated_at: Optional[datetime] = None
    franchises: Dict[str, List[SeedPlayer]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def players_for(self, abbr: str) -> List[SeedPlayer]:
        return list(self.franchises.get(abbr.upper(), []))


def normalize_name(value: str) -> str:
    """Case, diacritic, apostrophe and whitespace-insensitive matching key."""

    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    for mark in _APOSTROPHES:
        stripped = stripped.replace(mark, "")
    return _WHITESPACE.sub(" ", stripped).strip().lower()


def parse_years_with_team(label: str) -> int:
    """Count seasons in a ``YYYY-YYYY`` label; anything else counts as one."""

    match = _YEARS_PATTERN.match(label or "")
    if not match:
        return 1
    start, end = int(match.group(1)), int(match.group(2))
    return max(1, end - start + 1)


def find_seed_player(players: Iterable[SeedPlayer], name: str) -> Optional[SeedPlayer]:
    key = normalize_name(name)
    for player in players:
        if normalize_name(player.name) == key:
            return player
    return None


def load_snapshot_file(path: Path) -> SnapshotFile:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    snapshot = SnapshotFile.model_validate(payload)
    logger.debug("Loaded snapshot file %s with %d franchises", path, len(snapshot.franchises))
    return snapshot


def write_snapshot_file(path: Path, snapshot: SnapshotFile) -> Path:
    """Write atomically so a concurrent reader never sees a partial file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = snapshot.model_dump(mode="json", exclude_none=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name, suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
            handle.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.info("Wrote snapshot with %d franchises to %s", len(snapshot.franchises), path)
    return path
