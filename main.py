# main.py
import logging
from telegram import Update
from telegram.ext import Application, CommandHandler, MessageHandler, filters

import config
from registry import build_registry
from handlers_general import start, error_handler
from handlers_verify import verify_text, verify_qr_image, blacklist_check, list_foundations, show_logs

# === Setup Logging ===
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, config.LOG_LEVEL, logging.INFO)
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("telegram.ext").setLevel(logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    """Set up and run the bot."""

    # 1. Registry (sqlite or in-memory, from config)
    registry = build_registry()

    # 2. Build the Application
    application = Application.builder().token(config.get_bot_token()).build()
    application.bot_data["registry"] = registry

    # 3. Commands
    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("help", start))
    application.add_handler(CommandHandler("foundations", list_foundations))
    application.add_handler(CommandHandler("blacklist", blacklist_check))
    application.add_handler(CommandHandler("logs", show_logs))

    # 4. Verification: QR photos and typed identifiers
    application.add_handler(MessageHandler(filters.PHOTO, verify_qr_image))
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, verify_text))

    application.add_error_handler(error_handler)

    # 5. Run the bot
    logger.info("Bot is running...")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
