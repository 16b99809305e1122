from dataclasses import dataclass, field
from typing import List, Optional
from datetime import datetime, timezone

DIFFICULTIES = ("Easy", "Medium", "Hard")

@dataclass
class TopicTag:
    name: str
    slug: str

@dataclass
class Question:
    id: str
    frontend_question_id: str
    title: str
    title_slug: str
    difficulty: str
    topic_tags: List[TopicTag] = field(default_factory=list)

@dataclass
class AISummary:
    solution: str
    time_complexity: str
    space_complexity: str

@dataclass
class SentRecord:
    id: Optional[str]
    question_id: str
    frontend_question_id: str
    title: str
    title_slug: str
    difficulty: str
    topic_tags: List[TopicTag]
    sent_date: str
    is_chosen: bool = True
    ai_summary: Optional[AISummary] = None

@dataclass
class WeekRange:
    start: datetime
    end: datetime

@dataclass
class SessionState:
    """Per-chat state of the admin UI, passed to every action handler."""
    selected_difficulty: str = "Easy"
    current_question: Optional[Question] = None
    question_sent: bool = False
    ai_summary: Optional[AISummary] = None
    retrieval_error: Optional[str] = None


def create_sent_record(question: Question, now: Optional[datetime] = None) -> SentRecord:
    """Snapshots the question so the sent history survives later edits to it."""
    now = now or datetime.now(timezone.utc)
    return SentRecord(
        id=None,
        question_id=question.id,
        frontend_question_id=question.frontend_question_id,
        title=question.title,
        title_slug=question.title_slug,
        difficulty=question.difficulty,
        topic_tags=[TopicTag(t.name, t.slug) for t in question.topic_tags],
        sent_date=now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        is_chosen=True,
    )
