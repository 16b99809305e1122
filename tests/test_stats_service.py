import pytest

from conftest import make_question
from services.sent_service import SentService
from services.stats_service import StatsService


@pytest.mark.asyncio
async def test_stats_follow_mark_and_unmark(add_questions):
    questions = add_questions(
        make_question("1", "Easy"), make_question("2", "Easy"),
        make_question("3", "Medium"), make_question("4", "Hard"),
    )
    sent_service = SentService()
    stats_service = StatsService(sent_service)

    assert stats_service.get_stats() == {
        "total": 4, "easy": 2, "medium": 1, "hard": 1,
        "sent": 0, "sent_easy": 0, "sent_medium": 0, "sent_hard": 0,
    }

    await sent_service.mark_sent(questions[0])
    await sent_service.mark_sent(questions[3])
    stats = stats_service.get_stats()
    assert (stats["sent"], stats["sent_easy"], stats["sent_hard"]) == (2, 1, 1)

    sent_service.unmark_sent("1")
    stats = stats_service.get_stats()
    assert (stats["sent"], stats["sent_easy"], stats["sent_hard"]) == (1, 0, 1)


@pytest.mark.asyncio
async def test_stats_without_subscription_read_the_store(add_questions):
    (question,) = add_questions(make_question("1", "Medium"))
    await SentService().mark_sent(question)

    stats = StatsService().get_stats()

    assert stats["sent"] == 1
    assert stats["sent_medium"] == 1
