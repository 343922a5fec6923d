# verification.py
"""
Account verification against the foundation registry and the fraud blacklist.

Outcome precedence: blacklist match (danger) > verified foundation (safe)
> anything else (warning). Every resolved request writes one audit log entry;
a failed write is logged and never changes the result.
"""

import asyncio
import logging
import re
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Optional

import config
from constants import ACCOUNT_NAME_BLACKLISTED, ACCOUNT_NAME_NOT_FOUND, VERIFICATION_MESSAGES
from errors import RegistryError, ValidationError
from registry import AuditLogEntry, BlacklistEntry, Foundation, Registry
from validation import get_bank_display_name, normalize_account_number

logger = logging.getLogger(__name__)


class VerificationStatus(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


class MatchedType(str, Enum):
    FOUNDATION = "FOUNDATION"
    BLACKLIST = "BLACKLIST"
    NONE = "NONE"


@dataclass(frozen=True)
class VerificationResult:
    status: VerificationStatus
    account_name: str
    account_number: str
    bank: str
    message: str
    matched_type: MatchedType
    identifier_type: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        data["matched_type"] = self.matched_type.value
        return data


def _build_danger_response(entry: BlacklistEntry) -> VerificationResult:
    return VerificationResult(
        status=VerificationStatus.DANGER,
        account_name=entry.account_name or ACCOUNT_NAME_BLACKLISTED,
        account_number=entry.account_number,
        bank=get_bank_display_name(entry.bank),
        message=entry.reason or VERIFICATION_MESSAGES["DANGER"],
        matched_type=MatchedType.BLACKLIST,
    )


def _build_safe_response(foundation: Foundation) -> VerificationResult:
    return VerificationResult(
        status=VerificationStatus.SAFE,
        account_name=foundation.account_name or foundation.name,
        account_number=foundation.account_number,
        bank=get_bank_display_name(foundation.bank),
        message=VERIFICATION_MESSAGES["SAFE"],
        matched_type=MatchedType.FOUNDATION,
    )


def _build_warning_response(account_number: str, account_name: str = None, bank: str = None) -> VerificationResult:
    return VerificationResult(
        status=VerificationStatus.WARNING,
        account_name=account_name or ACCOUNT_NAME_NOT_FOUND,
        account_number=account_number,
        bank=get_bank_display_name(bank),
        message=VERIFICATION_MESSAGES["WARNING"],
        matched_type=MatchedType.NONE,
    )


async def _query(what: str, coro, timeout: float):
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(f"{what} lookup timed out after {timeout}s")
        raise RegistryError(f"{what} lookup timed out") from e
    except RegistryError:
        raise
    except Exception as e:
        logger.error(f"Database error during {what} lookup: {e}")
        raise RegistryError(f"Failed to query {what} database") from e


async def _log_verification(registry: Registry, result: VerificationResult, source: str,
                            user_id: Optional[str], timeout: float):
    entry = AuditLogEntry(
        account_number=result.account_number,
        account_name=result.account_name,
        bank=result.bank,
        status=result.status.name,
        source=source,
        user_id=user_id,
    )
    try:
        await asyncio.wait_for(registry.append_log(entry), timeout=timeout)
    except Exception as e:
        # Logging must never break the verification flow
        logger.error(f"Failed to log verification for {result.account_number}: {e!r}")


async def verify_account(
    registry: Registry,
    account_number: str,
    account_name: str = None,
    bank: str = None,
    source: str = None,
    user_id: Optional[str] = None,
    identifier_type: Optional[str] = None,
    timeout: float = None,
) -> VerificationResult:
    """
    Verify one identifier.

    Raises ValidationError for an empty identifier (or a digit-less one that
    is not a QR text reference) and RegistryError when either lookup fails
    or times out.
    """
    source = source or config.AUDIT_SOURCE
    timeout = config.REGISTRY_TIMEOUT_SECONDS if timeout is None else timeout
    logger.info(f"Starting account verification: account={account_number}, bank={bank}, type={identifier_type}")

    normalized = normalize_account_number(account_number)
    if not normalized:
        raise ValidationError("Account number must not be empty", details={"account_number": account_number})
    if identifier_type != "reference" and not re.search(r"[0-9]", normalized):
        raise ValidationError("Account number must include digits", details={"account_number": account_number})

    # Both lookups run to completion before either failure is raised
    outcomes = await asyncio.gather(
        _query("blacklist", registry.find_blacklisted(normalized), timeout),
        _query("foundation", registry.find_foundation(normalized), timeout),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    blacklist_match, foundation_match = outcomes

    if blacklist_match:
        result = _build_danger_response(blacklist_match)
    elif foundation_match and foundation_match.verified:
        result = _build_safe_response(foundation_match)
    else:
        result = _build_warning_response(account_number, account_name, bank)

    if identifier_type:
        result = replace(result, identifier_type=getattr(identifier_type, "value", identifier_type))

    await _log_verification(registry, result, source, user_id, timeout)

    logger.info(f"Account verification completed: status={result.status.value}, matched={result.matched_type.value}")
    return result
