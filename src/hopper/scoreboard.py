# src/hopper/scoreboard.py
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)

DEFAULT_SCORES_PATH = Path.home() / ".sky_hopper" / "scores.json"
DEFAULT_NAME = "Anonymous"
STAR_THRESHOLDS = (15000, 10000, 5000)   # 3, 2, 1 stars


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int


class ScoreStore(Protocol):
    def load(self) -> List[ScoreEntry]: ...
    def save(self, entries: Sequence[ScoreEntry]) -> None: ...


class MemoryScoreStore:
    def __init__(self, entries: Optional[Sequence[ScoreEntry]] = None):
        self._entries = list(entries or [])

    def load(self) -> List[ScoreEntry]:
        return list(self._entries)

    def save(self, entries: Sequence[ScoreEntry]):
        self._entries = list(entries)


class JsonScoreStore:
    """Scores as a JSON list of {"name", "score"} objects on disk."""
    def __init__(self, path: Path | str = DEFAULT_SCORES_PATH):
        self.path = Path(path)

    def load(self) -> List[ScoreEntry]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [ScoreEntry(name=str(item["name"]), score=int(item["score"])) for item in raw]
        except (OSError, ValueError, TypeError, KeyError) as e:
            # a broken score file should not stop the game from starting
            logger.warning("Ignoring unreadable score file %s: %s", self.path, e)
            return []

    def save(self, entries: Sequence[ScoreEntry]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [asdict(e) for e in entries]
        self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def normalize_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    return name or DEFAULT_NAME


def star_rating(score: int) -> int:
    for stars, threshold in zip((3, 2, 1), STAR_THRESHOLDS):
        if score >= threshold:
            return stars
    return 0


def format_entry(entry: ScoreEntry) -> str:
    stars = "★" * star_rating(entry.score)
    return f"{stars} {entry.name} : {entry.score}".strip()


class Scoreboard:
    """Ranked list of finished runs, highest score first."""
    def __init__(self, store: ScoreStore):
        self.store = store
        self._entries = sorted(store.load(), key=lambda e: e.score, reverse=True)

    @property
    def entries(self) -> List[ScoreEntry]:
        return list(self._entries)

    def add(self, name: Optional[str], score: int) -> ScoreEntry:
        entry = ScoreEntry(name=normalize_name(name), score=int(score))
        self._entries.append(entry)
        # stable sort: ties keep insertion order
        self._entries.sort(key=lambda e: e.score, reverse=True)
        self.store.save(self._entries)
        logger.info("Saved score %d for %s (%d entries)", entry.score, entry.name, len(self._entries))
        return entry

    def rank_of(self, entry: ScoreEntry) -> int:
        """1-based position of an entry, by identity."""
        for i, e in enumerate(self._entries):
            if e is entry:
                return i + 1
        raise ValueError(f"{entry!r} is not on this scoreboard")
