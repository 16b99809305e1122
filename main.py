import os
from dotenv import load_dotenv
# Load environment variables before any other imports
load_dotenv()

import logging
from db import init_db
from telegram_bot import create_app

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
logger = logging.getLogger(__name__)

def main():
    # 1. Initialize DB (imports the question fixture on first run)
    logger.info("Initializing Database...")
    init_db()

    # 2. Create Bot Application
    logger.info("Creating Bot Application...")
    application = create_app()

    # 3. Run Bot
    logger.info("Bot is polling...")
    application.run_polling()

if __name__ == "__main__":
    # Ensure env vars are set
    if not os.getenv("TELEGRAM_BOT_TOKEN"):
        logger.error("TELEGRAM_BOT_TOKEN is not set.")
    else:
        if not os.getenv("OPENROUTER_API_KEY"):
            logger.warning("OPENROUTER_API_KEY is not set. AI summaries are disabled.")
        main()
