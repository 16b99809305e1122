import logging
from models import SessionState
from services.question_service import QuestionService
from services.sent_service import SentService

logger = logging.getLogger(__name__)


async def get_random_question(state: SessionState, question_service: QuestionService,
                              sent_service: SentService) -> SessionState:
    """Selects an unsent question for the chosen difficulty and marks it as sent right away."""
    state.retrieval_error = None
    state.current_question = None
    state.question_sent = False
    state.ai_summary = None

    question = question_service.select_unsent(state.selected_difficulty)
    if not question:
        state.retrieval_error = f"No more unsent {state.selected_difficulty} questions available!"
        return state

    state.current_question = question

    record_id = await sent_service.mark_sent(question)
    if record_id:
        logger.info(f"Question '{question.title}' auto-marked as sent")
        state.question_sent = True
    else:
        # Marking failed; show whatever the store says
        state.question_sent = sent_service.is_already_sent(question.id)

    record = sent_service.find_sent_record(question.id)
    state.ai_summary = record.ai_summary if record else None
    return state


async def toggle_sent_status(state: SessionState, sent_service: SentService) -> bool:
    """
    Flips the sent flag of the current question.
    Returns False, leaving the state unchanged, when there is no question or the store call failed.
    """
    question = state.current_question
    if not question:
        return False

    if state.question_sent:
        if not sent_service.unmark_sent(question.id):
            logger.error("Failed to unsend question. It may have already been unsent.")
            return False
        state.question_sent = False
        state.ai_summary = None
        return True

    record_id = await sent_service.mark_sent(question)
    if not record_id:
        logger.error("Failed to mark question as sent")
        return False

    state.question_sent = True
    record = sent_service.find_sent_record(question.id)
    state.ai_summary = record.ai_summary if record else None
    return True
