from datetime import datetime
from typing import List, Optional
from models import AISummary, Question, SentRecord

HEBREW_MONTHS = [
    'ינואר', 'פברואר', 'מרץ', 'אפריל', 'מאי', 'יוני',
    'יולי', 'אוגוסט', 'ספטמבר', 'אוקטובר', 'נובמבר', 'דצמבר'
]

NO_QUESTIONS_THIS_WEEK = 'אין שאלות לשבוע זה'

SECTIONS = [
    ('Easy', '📗'),
    ('Medium', '📙'),
    ('Hard', '📕'),
]


def problem_url(title_slug: str) -> str:
    return f"https://leetcode.com/problems/{title_slug}"


def format_question_message(question: Question, ai_summary: Optional[AISummary] = None) -> str:
    """The 'question of the day' text the admin copies into the group."""
    topics = ', '.join(tag.name for tag in question.topic_tags)
    topics_line = f"\n🏷️ נושאים: {topics}\n" if topics else ''

    message = f"🧠 שאלת היום #{question.frontend_question_id}:\n" \
              f"{question.title}\n\n" \
              f"⚡ קושי: {question.difficulty}\n" \
              f"{topics_line}\n" \
              f"🔗 קישור:\n" \
              f"{problem_url(question.title_slug)}\n"

    if ai_summary:
        message += f"\n💡 רמז: {ai_summary.solution}\n" \
                   f"⏱️ זמן: {ai_summary.time_complexity}\n" \
                   f"💾 מקום: {ai_summary.space_complexity}\n"

    message += "\n🚀 הרבה בהצלחה! 💪\n"
    return message


def format_date_range(start: datetime, end: datetime) -> str:
    # e.g. "22-26 דצמבר", or "29 דצמבר - 2 ינואר" across months
    month = HEBREW_MONTHS[end.month - 1]
    if start.month == end.month:
        return f"{start.day}-{end.day} {month}"
    return f"{start.day} {HEBREW_MONTHS[start.month - 1]} - {end.day} {month}"


def _format_record(record: SentRecord) -> str:
    topics = ', '.join(tag.name for tag in record.topic_tags)
    topics_part = f" ({topics})" if topics else ''
    return f"• #{record.frontend_question_id} {record.title}{topics_part}"


def format_weekly_message(records: List[SentRecord], start: datetime, end: datetime) -> str:
    """Renders already filtered and ordered records as the weekly summary text."""
    if not records:
        return NO_QUESTIONS_THIS_WEEK

    sections = ''
    for difficulty, emoji in SECTIONS:
        matching = [r for r in records if r.difficulty == difficulty]
        if matching:
            lines = '\n'.join(_format_record(r) for r in matching)
            sections += f"{emoji} {difficulty}:\n{lines}\n"

    return f"📊 סיכום שבועי - שאלות LeetCode\n\n" \
           f"🗓️ שבוע {format_date_range(start, end)}\n\n" \
           f"{sections}\n" \
           f"סה\"כ: {len(records)} שאלות השבוע\n\n" \
           f"🚀 שבוע מעולה! 💪\n"
