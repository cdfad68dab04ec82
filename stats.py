from __future__ import annotations

from dataclasses import dataclass, asdict
import json
import logging
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)

STATS_DIR = Path.home() / ".typing-tutor"
STATS_FILE = STATS_DIR / "stats.json"
DISTRIBUTION_FILE = STATS_DIR / "distribution.json"


@dataclass
class SessionRecord:
    id: str
    started_at: str
    ended_at: str
    duration_s: float
    source: str
    source_meta: dict
    text_len: int
    typed_len: int
    cps: float
    insertion_probability: float
    omission_probability: float
    substitution_probability: float
    correct_probability: float
    mutual_information: float | None
    throughput: float | None


class StatsStore:
    def __init__(self, path: Path = STATS_FILE) -> None:
        self.path = path

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"sessions": []}
        try:
            return json.loads(self.path.read_text())
        except json.JSONDecodeError:
            logger.warning("ignoring unreadable stats file %s", self.path)
            return {"sessions": []}

    def sessions(self) -> list[dict[str, Any]]:
        return self.load().get("sessions", [])

    def append_session(self, record: SessionRecord) -> None:
        data = self.load()
        data.setdefault("sessions", [])
        data["sessions"].append(asdict(record))
        self._save(data)

    def summary(self) -> dict[str, Any]:
        """Session count and averages; sessions with undefined throughput
        are left out of the throughput average."""
        sessions = self.sessions()
        defined = [s["throughput"] for s in sessions if s.get("throughput") is not None]
        total = len(sessions)
        return {
            "total": total,
            "defined": len(defined),
            "avg_throughput": sum(defined) / len(defined) if defined else None,
            "avg_cps": sum(s.get("cps", 0.0) for s in sessions) / total if total else 0.0,
            "avg_correct": (
                sum(s.get("correct_probability", 0.0) for s in sessions) / total if total else 0.0
            ),
        }

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))
