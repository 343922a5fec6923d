# bot_utils.py
import logging
from telegram import InlineKeyboardMarkup, Message
from telegram.ext import ContextTypes
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError
from telegram.helpers import escape_markdown
from typing import Union

from constants import IDENTIFIER_LABELS
from validation import format_identifier

logger = logging.getLogger(__name__)

STATUS_HEADERS = {
    "safe": "✅ *SAFE* - Verified foundation",
    "warning": "⚠️ *WARNING* - Not in our database",
    "danger": "🚨 *DANGER* - Reported as fraud",
}


async def _safe_edit_message(
    context: ContextTypes.DEFAULT_TYPE,
    chat_id: int,
    message_id: int,
    text: str,
    reply_markup: InlineKeyboardMarkup = None,
    parse_mode: str = ParseMode.MARKDOWN
) -> Union[Message, bool]:
    """
    Try to edit a message. If it fails (e.g. message unchanged),
    catch the error and only log a warning.
    """
    try:
        return await context.bot.edit_message_text(
            chat_id=chat_id,
            message_id=message_id,
            text=text,
            reply_markup=reply_markup,
            parse_mode=parse_mode
        )
    except BadRequest as e:
        if "Message is not modified" in str(e):
            logger.warning("Failed to edit message: message not modified.")
        elif "Message to edit not found" in str(e):
            logger.warning(f"Failed to edit message (ID: {message_id}): message not found.")
        else:
            logger.error(f"BadRequest while editing message: {e}")
    except TelegramError as e:
        logger.error(f"Telegram error while editing message: {e}")

    return False


def _md(value) -> str:
    return escape_markdown(str(value), version=1)


def _code(value) -> str:
    # Markdown v1 has no escape inside a code span, so backticks are dropped
    return "`" + str(value).replace("`", "") + "`"


def format_verification_message(result, qr_name: str = None) -> str:
    """Build the chat reply for one VerificationResult."""
    data = result.to_dict()
    identifier_type = data.get("identifier_type") or "account"

    text = STATUS_HEADERS[data["status"]] + "\n\n"
    text += f"*Account Name:* {_md(data['account_name'])}\n"
    text += f"*{IDENTIFIER_LABELS.get(identifier_type, 'Identifier')}:* {_code(format_identifier(data['account_number'], identifier_type))}\n"
    text += f"*Bank:* {_md(data['bank'])}\n"
    if qr_name and qr_name != data["account_name"]:
        text += f"*Name in QR:* {_md(qr_name)}\n"
    text += f"\n{_md(data['message'])}"
    return text


def format_error_message(error_response: dict) -> str:
    if error_response.get("status_code") == 400:
        return f"❌ {_md(error_response['error'])}. Please send a bank account, PromptPay number or QR code."
    return "❌ Verification is unavailable right now. Please try again in a moment."
