import json
import uuid
import sqlite3
import logging
from dataclasses import asdict
from typing import Callable, List, Optional
from db import get_connection
from models import AISummary, Question, SentRecord, TopicTag, create_sent_record
from llm.summarizer import Summarizer, SummaryError

logger = logging.getLogger(__name__)

RECORD_COLUMNS = ("id, question_id, frontend_question_id, title, title_slug, difficulty, "
                  "topic_tags, sent_date, is_chosen, ai_summary")

SentRecordsListener = Callable[[List[SentRecord]], None]


def row_to_sent_record(row) -> SentRecord:
    tags = [TopicTag(t['name'], t['slug']) for t in json.loads(row[6] or '[]')]
    summary = AISummary(**json.loads(row[9])) if row[9] else None
    return SentRecord(
        id=row[0],
        question_id=row[1],
        frontend_question_id=row[2],
        title=row[3],
        title_slug=row[4],
        difficulty=row[5],
        topic_tags=tags,
        sent_date=row[7],
        is_chosen=bool(row[8]),
        ai_summary=summary,
    )


class SentService:
    def __init__(self, summarizer: Optional[Summarizer] = None):
        self.summarizer = summarizer
        self._listeners: List[SentRecordsListener] = []

    def subscribe(self, listener: SentRecordsListener) -> Callable[[], None]:
        """
        Calls `listener` with all sent records after every mark or unmark.
        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        if not self._listeners:
            return
        records = self._fetch_records()
        for listener in list(self._listeners):
            try:
                listener(records)
            except Exception as e:
                logger.error(f"Sent records listener failed: {e}", exc_info=True)

    def _fetch_records(self, where: str = "", params: tuple = ()) -> List[SentRecord]:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {RECORD_COLUMNS} FROM sent_records {where} ORDER BY sent_date DESC", params)
            rows = cursor.fetchall()
        finally:
            conn.close()
        return [row_to_sent_record(row) for row in rows]

    def _find_record_id(self, question_id: str) -> Optional[str]:
        conn = get_connection()
        try:
            row = conn.execute("SELECT id FROM sent_records WHERE question_id = ?", (question_id,)).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def _insert(self, record: SentRecord) -> Optional[str]:
        """
        Writes the record unless one already exists for the question and returns
        the id stored for that question. The UNIQUE(question_id) constraint makes
        concurrent marks of the same question converge on a single row.
        """
        summary = json.dumps(asdict(record.ai_summary), ensure_ascii=False) if record.ai_summary else None
        tags = json.dumps([asdict(t) for t in record.topic_tags], ensure_ascii=False)
        conn = get_connection()
        try:
            conn.execute(f"""
                INSERT OR IGNORE INTO sent_records ({RECORD_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (uuid.uuid4().hex, record.question_id, record.frontend_question_id, record.title,
                  record.title_slug, record.difficulty, tags, record.sent_date,
                  int(record.is_chosen), summary))
            conn.commit()
            row = conn.execute("SELECT id FROM sent_records WHERE question_id = ?", (record.question_id,)).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    async def _fetch_summary(self, question: Question) -> Optional[AISummary]:
        """Best-effort: a failed summary never blocks marking the question."""
        if self.summarizer is None:
            return None
        try:
            return await self.summarizer.get_summary(question.title, question.difficulty, question.title_slug)
        except SummaryError as e:
            logger.warning(f"Error getting AI summary for '{question.title}': {e}")
            return None
        except Exception as e:
            logger.error(f"AI summary failed for '{question.title}': {e}", exc_info=True)
            return None

    def get_sent_records(self) -> List[SentRecord]:
        """All sent records, newest first. Empty on store errors."""
        try:
            return self._fetch_records()
        except sqlite3.Error as e:
            logger.error(f"Error loading sent records: {e}", exc_info=True)
            return []

    def find_sent_record(self, question_id: str) -> Optional[SentRecord]:
        try:
            records = self._fetch_records("WHERE question_id = ?", (question_id,))
        except sqlite3.Error as e:
            logger.error(f"Error checking if question was sent: {e}", exc_info=True)
            return None
        return records[0] if records else None

    def is_already_sent(self, question_id: str) -> bool:
        return self.find_sent_record(question_id) is not None

    async def mark_sent(self, question: Question) -> Optional[str]:
        """
        Records that the question was sent to the group.
        Returns the record id (the existing one if it was already marked),
        or None if the store failed.
        """
        try:
            existing_id = self._find_record_id(question.id)
            if existing_id:
                logger.info(f"Question '{question.title}' was already marked as sent with ID: {existing_id}")
                return existing_id

            record = create_sent_record(question)
            record.ai_summary = await self._fetch_summary(question)

            record_id = self._insert(record)
            logger.info(f"Question '{question.title}' marked as sent with ID: {record_id}")
        except sqlite3.Error as e:
            logger.error(f"Error marking question as sent: {e}", exc_info=True)
            return None

        self._notify_safely()
        return record_id

    def unmark_sent(self, question_id: str) -> bool:
        """Removes the sent record. False when the question was not marked or the store failed."""
        try:
            conn = get_connection()
            try:
                cursor = conn.execute("DELETE FROM sent_records WHERE question_id = ?", (question_id,))
                conn.commit()
                deleted = cursor.rowcount > 0
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Error unsending question: {e}", exc_info=True)
            return False

        if not deleted:
            logger.info(f"Question with ID {question_id} wasn't marked as sent")
            return False

        logger.info(f"Question with ID {question_id} unmarked as sent")
        self._notify_safely()
        return True

    def _notify_safely(self):
        try:
            self._notify()
        except sqlite3.Error as e:
            logger.error(f"Error refreshing sent records listeners: {e}", exc_info=True)
