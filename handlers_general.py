# handlers_general.py
import logging
from telegram import Update
from telegram.ext import ContextTypes
from telegram.constants import ParseMode

from config import ADMIN_USER_IDS

logger = logging.getLogger(__name__)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user = update.effective_user
    user_id = user.id if user else None

    text = (
        "Welcome to TruadBoon 🙏\n\n"
        "Check a donation account before you transfer.\n\n"
        "📷 *Send a photo of a PromptPay QR code*, or\n"
        "⌨️ *type the account / PromptPay number* (bank account, mobile, tax ID, "
        "donation box or organization reference).\n\n"
        "You will get one of:\n"
        "✅ Safe - verified foundation\n"
        "⚠️ Warning - not in our database, check other sources\n"
        "🚨 Danger - reported as fraud, do not transfer\n\n"
        "Other commands:\n"
        "/foundations - list verified foundations\n"
        "/blacklist <number> - check the fraud blacklist"
    )

    if user_id in ADMIN_USER_IDS:
        logger.info(f"Admin (ID: {user_id}) started the bot.")
        text += "\n/logs [days] [status] - recent verification logs"
    else:
        logger.info(f"{user_id} started the bot.")

    await update.message.reply_text(text, parse_mode=ParseMode.MARKDOWN)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Unhandled error while processing update", exc_info=context.error)

    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text(
            "❌ Something went wrong. Please try again in a moment."
        )
