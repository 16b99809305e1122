import json
import random
import sqlite3
import logging
from typing import List, Optional, Set
from db import get_connection
from models import Question, TopicTag

logger = logging.getLogger(__name__)

QUESTION_COLUMNS = "id, frontend_question_id, title, title_slug, difficulty, topic_tags"


def row_to_question(row) -> Question:
    tags = [TopicTag(t['name'], t['slug']) for t in json.loads(row[5] or '[]')]
    return Question(row[0], row[1], row[2], row[3], row[4], tags)


class QuestionService:
    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def _fetch(self, where: str = "", params: tuple = ()) -> List[Question]:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {QUESTION_COLUMNS} FROM questions {where} ORDER BY CAST(frontend_question_id AS INTEGER)", params)
            rows = cursor.fetchall()
        finally:
            conn.close()
        return [row_to_question(row) for row in rows]

    def _fetch_sent_question_ids(self) -> Set[str]:
        conn = get_connection()
        try:
            rows = conn.execute("SELECT question_id FROM sent_records").fetchall()
        finally:
            conn.close()
        return {row[0] for row in rows}

    def get_all_questions(self) -> List[Question]:
        return self._fetch()

    def get_questions_by_difficulty(self, difficulty: str) -> List[Question]:
        return self._fetch("WHERE difficulty = ?", (difficulty,))

    def get_question_by_id(self, question_id: str) -> Optional[Question]:
        questions = self._fetch("WHERE id = ?", (question_id,))
        return questions[0] if questions else None

    def get_questions_by_topic_tag(self, tag_name: str) -> List[Question]:
        """Questions carrying a topic tag with this name, compared case-insensitively."""
        wanted = tag_name.lower()
        return [
            q for q in self._fetch()
            if any(tag.name.lower() == wanted for tag in q.topic_tags)
        ]

    def select_unsent(self, difficulty: str) -> Optional[Question]:
        """
        Picks a random question of the given difficulty that has not been sent yet.
        Once every question of that difficulty was sent, picks from all of them,
        so a question comes back whenever the difficulty has any.
        """
        try:
            questions = self.get_questions_by_difficulty(difficulty)
            if not questions:
                logger.info(f"No questions found with difficulty: {difficulty}")
                return None

            sent_ids = self._fetch_sent_question_ids()
            available = [q for q in questions if q.id not in sent_ids]

            if not available:
                logger.info(f"All {difficulty} questions have already been sent. Selecting from all of them.")
                return self.rng.choice(questions)

            return self.rng.choice(available)
        except sqlite3.Error as e:
            logger.error(f"Error getting random question: {e}", exc_info=True)
            return None
