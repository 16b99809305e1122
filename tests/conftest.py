import pytest

import db
from llm.summarizer import SummaryUnavailableError
from models import AISummary, Question, TopicTag


class FakeSummarizer:
    def __init__(self, summary=None, error=None):
        self.summary = summary or AISummary("Use a hash map of seen values", "O(n)", "O(n)")
        self.error = error
        self.calls = []

    async def get_summary(self, title, difficulty, title_slug):
        self.calls.append((title, difficulty, title_slug))
        if self.error:
            raise self.error
        return self.summary


def make_question(id, difficulty="Easy", title=None, tags=None):
    return Question(
        id=id,
        frontend_question_id=id,
        title=title or f"Question {id}",
        title_slug=f"question-{id}",
        difficulty=difficulty,
        topic_tags=tags if tags is not None else [TopicTag("Array", "array")],
    )


def fixture_entry(question: Question) -> dict:
    return {
        "id": question.id,
        "frontendQuestionId": question.frontend_question_id,
        "title": question.title,
        "titleSlug": question.title_slug,
        "difficulty": question.difficulty,
        "topicTags": [{"name": t.name, "slug": t.slug} for t in question.topic_tags],
    }


@pytest.fixture
def database(tmp_path, monkeypatch):
    """A fresh, empty database with the schema created."""
    monkeypatch.setattr(db, "DB_PATH", str(tmp_path / "questions.db"))
    monkeypatch.setattr(db, "QUESTIONS_JSON_PATH", str(tmp_path / "missing.json"))
    db.init_db()
    return db.DB_PATH


@pytest.fixture
def broken_database(tmp_path, monkeypatch):
    """A database file without any tables, so every query fails."""
    monkeypatch.setattr(db, "DB_PATH", str(tmp_path / "broken.db"))
    return db.DB_PATH


@pytest.fixture
def add_questions(database):
    def _add(*questions):
        db.import_questions([fixture_entry(q) for q in questions])
        return list(questions)
    return _add


@pytest.fixture
def summarizer():
    return FakeSummarizer()


@pytest.fixture
def failing_summarizer():
    return FakeSummarizer(error=SummaryUnavailableError("Failed to generate summary"))
