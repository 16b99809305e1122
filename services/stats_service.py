import logging
from typing import Dict, List, Optional
from db import get_connection
from models import DIFFICULTIES, SentRecord
from services.sent_service import SentService

logger = logging.getLogger(__name__)


def count_by_difficulty(difficulties: List[str]) -> Dict[str, int]:
    counts = {d: 0 for d in DIFFICULTIES}
    for difficulty in difficulties:
        if difficulty in counts:
            counts[difficulty] += 1
    return counts


class StatsService:
    def __init__(self, sent_service: Optional[SentService] = None):
        # Sent counts are kept fresh by the sent records subscription
        self._sent_counts: Optional[Dict[str, int]] = None
        self._sent_total: int = 0
        if sent_service is not None:
            sent_service.subscribe(self._on_sent_records_changed)

    def _on_sent_records_changed(self, records: List[SentRecord]):
        self._sent_counts = count_by_difficulty([r.difficulty for r in records])
        self._sent_total = len(records)
        logger.info(f"Sent records changed: {self._sent_total} total")

    def _load_sent_counts(self):
        conn = get_connection()
        try:
            rows = conn.execute("SELECT difficulty FROM sent_records").fetchall()
        finally:
            conn.close()
        self._sent_counts = count_by_difficulty([r[0] for r in rows])
        self._sent_total = len(rows)

    def get_stats(self) -> Dict[str, int]:
        conn = get_connection()
        try:
            rows = conn.execute("SELECT difficulty FROM questions").fetchall()
        finally:
            conn.close()
        totals = count_by_difficulty([r[0] for r in rows])

        if self._sent_counts is None:
            self._load_sent_counts()

        return {
            "total": len(rows),
            "easy": totals["Easy"],
            "medium": totals["Medium"],
            "hard": totals["Hard"],
            "sent": self._sent_total,
            "sent_easy": self._sent_counts["Easy"],
            "sent_medium": self._sent_counts["Medium"],
            "sent_hard": self._sent_counts["Hard"],
        }
