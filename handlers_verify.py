# handlers_verify.py
import logging
from telegram import Update
from telegram.ext import ContextTypes
from telegram.constants import ParseMode
from telegram.helpers import escape_markdown

import config
from bot_utils import _code, _safe_edit_message, format_verification_message, format_error_message
from constants import RETRY_SCAN_MESSAGE
from errors import VerifierError, format_error_response
from promptpay_parser import IdentifierType, extract_identifier, parse_promptpay
from qr_utils import decode_qr_image
from validation import get_bank_display_name, normalize_account_number
from verification import verify_account

logger = logging.getLogger(__name__)

CHECKING_TEXT = "🔍 Checking against verified foundations and the fraud blacklist..."


async def _run_verification(update: Update, context: ContextTypes.DEFAULT_TYPE, identifier: str,
                            account_name: str = None, bank: str = None, identifier_type: str = None):
    """Send a progress message, verify, then edit the progress message into the verdict."""
    registry = context.bot_data["registry"]
    user_id = str(update.effective_user.id) if update.effective_user else None

    progress = await update.message.reply_text(CHECKING_TEXT)

    try:
        result = await verify_account(
            registry,
            identifier,
            account_name=account_name,
            bank=bank,
            user_id=user_id,
            identifier_type=identifier_type,
        )
        text = format_verification_message(result, qr_name=account_name)
    except VerifierError as e:
        error_response = format_error_response(e)
        logger.warning(f"Verification rejected for {user_id}: {error_response}")
        text = format_error_message(error_response)

    edited = await _safe_edit_message(
        context,
        chat_id=progress.chat_id,
        message_id=progress.message_id,
        text=text,
        parse_mode=ParseMode.MARKDOWN
    )
    if not edited:
        await update.message.reply_text(text, parse_mode=ParseMode.MARKDOWN)


async def verify_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Manual input: any text message is treated as an account / PromptPay identifier."""
    term = (update.message.text or "").strip()
    logger.info(f"Manual verification request: '{term}'")
    await _run_verification(update, context, term)


async def verify_qr_image(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Photo of a PromptPay QR: decode, classify, verify."""
    photo = update.message.photo[-1]
    file = await photo.get_file()
    image_bytes = await file.download_as_bytearray()

    qr_payload = decode_qr_image(bytes(image_bytes))
    if not qr_payload:
        await update.message.reply_text(
            "❌ The QR code could not be read. Please make sure the image is clear."
        )
        return

    record = parse_promptpay(qr_payload)
    identifier = extract_identifier(record)
    logger.info(f"QR classified as {identifier.type.value}: {identifier.value} (partial={record.is_partial})")

    if not identifier.found:
        await update.message.reply_text(RETRY_SCAN_MESSAGE)
        return

    bank = "PROMPTPAY" if identifier.type != IdentifierType.ACCOUNT else None
    await _run_verification(
        update,
        context,
        identifier.value,
        account_name=record.name,
        bank=bank,
        identifier_type=identifier.type,
    )


async def blacklist_check(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/blacklist <account>: blacklist lookup only, no audit log entry."""
    if not context.args:
        await update.message.reply_text("Usage: /blacklist <account or PromptPay number>")
        return

    account_number = "".join(context.args)
    if not normalize_account_number(account_number):
        await update.message.reply_text("❌ Please provide an account number.")
        return

    registry = context.bot_data["registry"]
    entry = await registry.find_blacklisted(normalize_account_number(account_number))

    if entry:
        text = (
            "🚨 *This account is blacklisted*\n\n"
            f"*Account:* {_code(entry.account_number)}\n"
            f"*Bank:* {escape_markdown(get_bank_display_name(entry.bank))}\n"
            f"*Reason:* {escape_markdown(entry.reason or '-')}"
        )
    else:
        text = f"No blacklist record for {_code(account_number)}."
    await update.message.reply_text(text, parse_mode=ParseMode.MARKDOWN)


async def list_foundations(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    registry = context.bot_data["registry"]
    foundations = await registry.list_foundations()

    if not foundations:
        await update.message.reply_text("No verified foundations registered yet.")
        return

    text = "🏛️ *Verified foundations*\n\n"
    for foundation in foundations:
        text += (
            f"• *{escape_markdown(foundation.name)}*\n"
            f"  {_code(foundation.account_number)} - {escape_markdown(get_bank_display_name(foundation.bank))}"
        )
        if foundation.category:
            text += f" ({escape_markdown(foundation.category)})"
        text += "\n"
    await update.message.reply_text(text, parse_mode=ParseMode.MARKDOWN)


async def show_logs(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/logs [days] [SAFE|WARNING|DANGER] - admins only."""
    user_id = update.effective_user.id
    if user_id not in config.ADMIN_USER_IDS:
        logger.warning(f"Non-admin {user_id} tried to read verification logs")
        await update.message.reply_text("⛔ This command is for admins only.")
        return

    days = config.LOG_RETENTION_DAYS
    status = None
    for arg in context.args or []:
        if arg.isdigit():
            days = min(int(arg), config.LOGS_MAX_DAYS)
        elif arg.upper() in ("SAFE", "WARNING", "DANGER"):
            status = arg.upper()

    registry = context.bot_data["registry"]
    logs = await registry.get_logs(days=days, status=status)

    header = f"📋 *Verification logs* (last {days} days{', ' + status if status else ''}): {len(logs)}\n\n"
    lines = [
        f"`{log.created_at:%Y-%m-%d %H:%M}` {log.status} {_code(log.account_number)} ({log.source})"
        for log in logs[:config.LOGS_PAGE_SIZE]
    ]
    if len(logs) > config.LOGS_PAGE_SIZE:
        lines.append(f"... and {len(logs) - config.LOGS_PAGE_SIZE} more")
    await update.message.reply_text(header + ("\n".join(lines) or "No entries."), parse_mode=ParseMode.MARKDOWN)
