from conftest import make_question
from messages import format_question_message
from models import AISummary, TopicTag


def test_question_message_has_link_difficulty_and_topics():
    question = make_question("1", title="Two Sum",
                             tags=[TopicTag("Array", "array"), TopicTag("Hash Table", "hash-table")])
    question.title_slug = "two-sum"

    message = format_question_message(question)

    assert message.startswith("🧠 שאלת היום #1:\nTwo Sum\n")
    assert "⚡ קושי: Easy" in message
    assert "🏷️ נושאים: Array, Hash Table" in message
    assert "https://leetcode.com/problems/two-sum\n" in message
    assert "רמז" not in message


def test_question_message_without_topics_has_no_topics_line():
    message = format_question_message(make_question("1", tags=[]))

    assert "נושאים" not in message


def test_question_message_includes_hint_block():
    summary = AISummary("Scan once keeping a map of complements", "O(n)", "O(n)")

    message = format_question_message(make_question("1"), summary)

    assert "💡 רמז: Scan once keeping a map of complements" in message
    assert "⏱️ זמן: O(n)" in message
    assert "💾 מקום: O(n)" in message
    assert message.rstrip().endswith("🚀 הרבה בהצלחה! 💪")
