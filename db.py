import sqlite3
import os
import json
import logging
from typing import List

logger = logging.getLogger(__name__)

DB_PATH = os.getenv('DB_PATH', os.path.join(os.path.dirname(__file__), 'data', 'questions.db'))
QUESTIONS_JSON_PATH = os.getenv(
    'QUESTIONS_JSON_PATH',
    os.path.join(os.path.dirname(__file__), 'data', 'free_leetcode_questions.json')
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS questions (
    id                   TEXT PRIMARY KEY,
    frontend_question_id TEXT NOT NULL,
    title                TEXT NOT NULL,
    title_slug           TEXT NOT NULL,
    difficulty           TEXT NOT NULL,
    topic_tags           TEXT DEFAULT '[]'
);
CREATE INDEX IF NOT EXISTS idx_questions_difficulty ON questions (difficulty);

CREATE TABLE IF NOT EXISTS sent_records (
    id                   TEXT PRIMARY KEY,
    question_id          TEXT NOT NULL UNIQUE,
    frontend_question_id TEXT NOT NULL,
    title                TEXT NOT NULL,
    title_slug           TEXT NOT NULL,
    difficulty           TEXT NOT NULL,
    topic_tags           TEXT DEFAULT '[]',
    sent_date            TEXT NOT NULL,
    is_chosen            INTEGER DEFAULT 1,
    ai_summary           TEXT
);
"""

def get_connection():
    # Create the parent directory on first run
    os.makedirs(os.path.dirname(DB_PATH) or '.', exist_ok=True)
    return sqlite3.connect(DB_PATH)

def _question_row(q: dict) -> tuple:
    """Maps one LeetCode fixture entry to a questions row."""
    frontend_id = str(q['frontendQuestionId'])
    tags = [{"name": t['name'], "slug": t['slug']} for t in q.get('topicTags') or []]
    return (
        str(q.get('id') or frontend_id),
        frontend_id,
        q['title'],
        q['titleSlug'],
        q['difficulty'],
        json.dumps(tags, ensure_ascii=False),
    )

def import_questions(questions: List[dict]) -> int:
    """Bulk-inserts questions. Rows whose id already exists are left untouched."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.executemany("""
            INSERT OR IGNORE INTO questions (id, frontend_question_id, title, title_slug, difficulty, topic_tags)
            VALUES (?, ?, ?, ?, ?, ?)
        """, [_question_row(q) for q in questions])
        conn.commit()
        return cursor.rowcount
    finally:
        conn.close()

def seed_questions(json_path: str = None) -> int:
    """Seeds the database from the questions JSON file if the questions table is empty."""
    json_path = json_path or QUESTIONS_JSON_PATH
    conn = get_connection()
    try:
        count = conn.execute("SELECT COUNT(*) FROM questions").fetchone()[0]
    finally:
        conn.close()

    if count > 0:
        return 0

    if not os.path.exists(json_path):
        logger.warning(f"{json_path} not found. No questions seeded.")
        return 0

    with open(json_path, 'r', encoding='utf-8') as f:
        questions = json.load(f)

    imported = import_questions(questions)
    logger.info(f"Seeded {imported} questions from JSON.")
    return imported

def init_db():
    conn = get_connection()
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()

    seed_questions()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    print("Database initialized and questions imported.")
