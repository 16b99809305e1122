import os
import logging
from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup, BotCommand
from telegram.ext import ApplicationBuilder, CommandHandler, ContextTypes, CallbackQueryHandler

from actions import get_random_question, toggle_sent_status
from messages import format_question_message
from models import DIFFICULTIES, SessionState
from services.question_service import QuestionService
from services.sent_service import SentService
from services.stats_service import StatsService
from services.weekly_service import WeeklyService
from llm.summarizer import Summarizer, SummaryConfigError

logger = logging.getLogger(__name__)

# Initialized in create_app once the environment is loaded
question_service = QuestionService()
sent_service = None
stats_service = None
weekly_service = None

SENT_LIST_LIMIT = 10


def get_state(context: ContextTypes.DEFAULT_TYPE) -> SessionState:
    return context.chat_data.setdefault('state', SessionState())


def difficulty_keyboard(selected: str) -> InlineKeyboardMarkup:
    buttons = [
        InlineKeyboardButton(f"{'✅' if d == selected else '⬜'} {d}", callback_data=f'pick_{d}')
        for d in DIFFICULTIES
    ]
    return InlineKeyboardMarkup([buttons])


def question_keyboard(state: SessionState) -> InlineKeyboardMarkup:
    toggle_text = "↩️ Unmark as sent" if state.question_sent else "📤 Mark as sent"
    keyboard = [
        [InlineKeyboardButton(toggle_text, callback_data='toggle_sent')],
        [InlineKeyboardButton(f"🎲 Another {state.selected_difficulty}", callback_data=f'pick_{state.selected_difficulty}')],
    ]
    return InlineKeyboardMarkup(keyboard)


def render_question(state: SessionState) -> str:
    status = "✅ Marked as sent" if state.question_sent else "⬜ Not sent"
    return f"{format_question_message(state.current_question, state.ai_summary)}\n" \
           f"──────────────────\n" \
           f"{status}"


async def post_init(application):
    """Sets the bot commands in the menu."""
    commands = [
        BotCommand("start", "Pick a difficulty"),
        BotCommand("pick", "Get a random unsent question"),
        BotCommand("weekly", "Weekly summary (Sunday-Thursday)"),
        BotCommand("stats", "Sent questions per difficulty"),
        BotCommand("sent", "Recently sent questions"),
        BotCommand("help", "Get help"),
    ]
    await application.bot.set_my_commands(commands)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    state = get_state(context)
    welcome_text = (
        "🧠 **LeetCode Question Retriever**\n\n"
        "I pick a random question that was not sent to the group yet, "
        "mark it as sent and prepare a message you can copy.\n\n"
        "**Choose a difficulty:**"
    )
    await update.message.reply_text(
        welcome_text,
        reply_markup=difficulty_keyboard(state.selected_difficulty),
        parse_mode='Markdown'
    )


async def send_random_question(update: Update, context: ContextTypes.DEFAULT_TYPE):
    state = get_state(context)
    chat_id = update.effective_chat.id

    await context.bot.send_chat_action(chat_id=chat_id, action="typing")
    await get_random_question(state, question_service, sent_service)

    if state.retrieval_error:
        await context.bot.send_message(chat_id=chat_id, text=f"⚠️ {state.retrieval_error}")
        return

    await context.bot.send_message(
        chat_id=chat_id,
        text=render_question(state),
        reply_markup=question_keyboard(state)
    )


async def pick_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    state = get_state(context)
    if context.args:
        requested = context.args[0].strip().capitalize()
        if requested not in DIFFICULTIES:
            await update.message.reply_text(f"❌ Unknown difficulty. Use one of: {', '.join(DIFFICULTIES)}.")
            return
        state.selected_difficulty = requested

    await send_random_question(update, context)


async def pick_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()

    difficulty = query.data.split('_', 1)[1]
    if difficulty not in DIFFICULTIES:
        return
    get_state(context).selected_difficulty = difficulty

    await send_random_question(update, context)


async def toggle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    state = get_state(context)

    if not state.current_question:
        await query.answer("No question selected. Use /pick first.")
        return

    if await toggle_sent_status(state, sent_service):
        await query.answer("Updated")
        await query.edit_message_text(render_question(state), reply_markup=question_keyboard(state))
    else:
        await query.answer("Could not update the sent status. Please try again.", show_alert=True)


async def weekly_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    summary = weekly_service.get_week_summary()
    await update.message.reply_text(summary)


async def stats_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    stats = stats_service.get_stats()

    def line(label, sent, total):
        pct = (sent / total * 100) if total > 0 else 0
        return f"{label}: {sent} / {total} ({pct:.0f}%) - {total - sent} remaining"

    total_pct = (stats['sent'] / stats['total'] * 100) if stats['total'] > 0 else 0
    text = (
        f"📊 Question Statistics\n\n"
        f"📗 {line('Easy', stats['sent_easy'], stats['easy'])}\n"
        f"📙 {line('Medium', stats['sent_medium'], stats['medium'])}\n"
        f"📕 {line('Hard', stats['sent_hard'], stats['hard'])}\n"
        f"──────────────────\n"
        f"Total Sent: {stats['sent']} / {stats['total']} ({total_pct:.1f}%)"
    )
    await update.message.reply_text(text)


async def sent_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    records = sent_service.get_sent_records()[:SENT_LIST_LIMIT]
    if not records:
        await update.message.reply_text("No questions have been sent yet.")
        return

    lines = [
        f"{r.sent_date[:10]} [{r.difficulty}] #{r.frontend_question_id} {r.title}"
        for r in records
    ]
    await update.message.reply_text("📤 Recently sent:\n\n" + "\n".join(lines))


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    text = (
        "/start - Choose a difficulty\n"
        "/pick [easy|medium|hard] - Get a random unsent question\n"
        "/weekly - Sunday-Thursday summary to share\n"
        "/stats - Sent questions per difficulty\n"
        "/sent - Recently sent questions"
    )
    await update.message.reply_text(text)


def create_app():
    global sent_service, stats_service, weekly_service
    token = os.getenv("TELEGRAM_BOT_TOKEN")
    if not token:
        raise ValueError("TELEGRAM_BOT_TOKEN not found in environment variables.")

    try:
        summarizer = Summarizer()
    except SummaryConfigError as e:
        logger.warning(f"{e} Questions will be marked without AI summaries.")
        summarizer = None

    sent_service = SentService(summarizer)
    stats_service = StatsService(sent_service)
    weekly_service = WeeklyService(sent_service)

    app = ApplicationBuilder().token(token).post_init(post_init).build()

    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("pick", pick_command))
    app.add_handler(CommandHandler("weekly", weekly_command))
    app.add_handler(CommandHandler("stats", stats_command))
    app.add_handler(CommandHandler("sent", sent_command))
    app.add_handler(CommandHandler("help", help_command))

    app.add_handler(CallbackQueryHandler(pick_callback, pattern='^pick_'))
    app.add_handler(CallbackQueryHandler(toggle_callback, pattern='^toggle_sent$'))

    return app
