import random
import pytest

from conftest import make_question
from models import TopicTag
from services.question_service import QuestionService
from services.sent_service import SentService


@pytest.fixture
def service():
    return QuestionService(rng=random.Random(7))


@pytest.mark.asyncio
async def test_select_unsent_skips_sent_questions(service, add_questions):
    q1, _, q3 = add_questions(make_question("1"), make_question("2"), make_question("3"))
    await SentService().mark_sent(q1)
    await SentService().mark_sent(q3)

    for _ in range(10):
        assert service.select_unsent("Easy").id == "2"


def test_select_unsent_only_returns_requested_difficulty(service, add_questions):
    add_questions(make_question("1", "Easy"), make_question("2", "Hard"), make_question("3", "Hard"))

    for _ in range(10):
        assert service.select_unsent("Hard").difficulty == "Hard"


@pytest.mark.asyncio
async def test_select_unsent_falls_back_to_sent_questions_when_exhausted(service, add_questions):
    (question,) = add_questions(make_question("1", "Easy"))
    await SentService().mark_sent(question)

    selected = service.select_unsent("Easy")

    assert selected is not None
    assert selected.id == "1"


@pytest.mark.asyncio
async def test_select_unsent_fallback_picks_from_whole_difficulty(service, add_questions):
    questions = add_questions(make_question("1"), make_question("2"), make_question("3"))
    for q in questions:
        await SentService().mark_sent(q)

    picked = {service.select_unsent("Easy").id for _ in range(30)}

    assert picked <= {"1", "2", "3"}
    assert len(picked) > 1


def test_select_unsent_returns_none_for_empty_difficulty(service, add_questions):
    add_questions(make_question("1", "Easy"))

    assert service.select_unsent("Medium") is None


def test_select_unsent_returns_none_on_store_error(service, broken_database):
    assert service.select_unsent("Easy") is None


def test_get_question_by_id_round_trips_topic_tags(service, add_questions):
    tags = [TopicTag("Dynamic Programming", "dynamic-programming"), TopicTag("Math", "math")]
    add_questions(make_question("70", "Easy", title="Climbing Stairs", tags=tags))

    question = service.get_question_by_id("70")

    assert question.title == "Climbing Stairs"
    assert question.topic_tags == tags
    assert service.get_question_by_id("missing") is None


def test_get_questions_by_topic_tag_is_case_insensitive(service, add_questions):
    add_questions(
        make_question("1", tags=[TopicTag("Hash Table", "hash-table")]),
        make_question("2", tags=[TopicTag("Stack", "stack")]),
    )

    assert [q.id for q in service.get_questions_by_topic_tag("hash table")] == ["1"]


def test_get_all_questions_sorted_by_frontend_id(service, add_questions):
    add_questions(make_question("10"), make_question("2", "Hard"), make_question("1", "Medium"))

    assert [q.id for q in service.get_all_questions()] == ["1", "2", "10"]
