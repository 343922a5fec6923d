# promptpay_parser.py
"""
Thai PromptPay QR decoder.

PromptPay QR structure (EMV merchant-presented profile):
- Tag 00: Payload Format Indicator (01)
- Tag 01: Point of Initiation Method (11=static, 12=dynamic)
- Tag 26 / 30: Merchant Account Information
    - 00: Globally Unique Identifier (PromptPay = A000000677010111)
    - 01: Proxy Type (01=Mobile, 02=Tax ID, 03=E-wallet, 04=ORN, 09=REF.1)
    - 02: Proxy Value
- Tag 53: Transaction Currency (764 = THB)
- Tag 54: Transaction Amount
- Tag 58: Country Code (TH)
- Tag 59: Merchant Name
- Tag 62: Additional Data Field Template
- Tag 63: CRC

Decoding never raises on bad input. A payload that yields nothing usable
comes back as ExtractedIdentifier(value=None, type=UNKNOWN).
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from constants import PROMPTPAY_GUID_PREFIX, THB_NUMERIC_CURRENCY
from tlv_scanner import scan_tlv, verify_crc

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")
_ANY_DIGIT = re.compile(r"[0-9]")

MAX_ACCOUNT_DIGITS = 16


class ProxyType(str, Enum):
    MOBILE = "mobile"
    TAXID = "taxid"
    EWALLET = "ewallet"
    ORGANIZATIONREF = "organizationref"
    REFERENCE = "reference"
    UNKNOWN = "unknown"


class IdentifierType(str, Enum):
    REFERENCE = "reference"
    DONATIONBOX = "donationbox"
    ORGANIZATIONREF = "organizationref"
    MOBILE = "mobile"
    TAXID = "taxid"
    ACCOUNT = "account"
    UNKNOWN = "unknown"


PROXY_TYPE_CODES = {
    "01": ProxyType.MOBILE,
    "02": ProxyType.TAXID,
    "03": ProxyType.EWALLET,
    "04": ProxyType.ORGANIZATIONREF,
    "09": ProxyType.REFERENCE,
}

MERCHANT_INFO_TAGS = ("26", "30")


@dataclass(frozen=True)
class PromptPayRecord:
    raw: str
    proxy_type: Optional[ProxyType] = None
    proxy_type_code: Optional[str] = None
    phone_number: Optional[str] = None
    tax_id: Optional[str] = None
    account_number: Optional[str] = None
    organization_reference: Optional[str] = None
    donation_box_account: Optional[str] = None
    reference_number: Optional[str] = None
    name: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    country: Optional[str] = None
    # None = payload has no CRC field
    crc_valid: Optional[bool] = None
    dropped_bytes: int = 0

    @property
    def is_partial(self) -> bool:
        return self.dropped_bytes > 0


@dataclass(frozen=True)
class ExtractedIdentifier:
    value: Optional[str]
    type: IdentifierType

    @property
    def found(self) -> bool:
        return self.value is not None


def digits_only(value: str) -> str:
    return _NON_DIGITS.sub("", value)


def get_proxy_type(code: str) -> ProxyType:
    return PROXY_TYPE_CODES.get(code, ProxyType.UNKNOWN)


def assign_proxy_value(value: str, proxy_type: Optional[ProxyType], proxy_type_code: Optional[str], result: dict) -> str:
    """
    Put a merchant-info proxy value into exactly one identifier slot of `result`.

    The declared proxy type is not trusted on its own: digit count wins over
    the declared type for the long-form identifiers, because real-world QR
    codes often carry the wrong proxy type code. Returns the slot name set.
    """
    digits = digits_only(value)
    digit_count = len(digits)

    # REF.1 text reference, kept verbatim
    if proxy_type == ProxyType.REFERENCE or proxy_type_code == "09":
        slot, slot_value = "reference_number", value
    elif digit_count == 16:
        slot, slot_value = "donation_box_account", value
    elif digit_count == 17:
        slot, slot_value = "organization_reference", value
    elif digit_count == 13:
        slot, slot_value = "tax_id", value
    elif digit_count == 10 and digits.startswith("0"):
        slot, slot_value = "phone_number", value
    elif proxy_type == ProxyType.MOBILE:
        slot, slot_value = "phone_number", value
    elif proxy_type == ProxyType.TAXID:
        slot, slot_value = "tax_id", value
    elif proxy_type == ProxyType.EWALLET:
        slot, slot_value = "account_number", value
    elif proxy_type == ProxyType.ORGANIZATIONREF:
        slot, slot_value = "organization_reference", value
    elif not _ANY_DIGIT.search(value) and value:
        slot, slot_value = "reference_number", value
    else:
        slot, slot_value = "account_number", digits[:MAX_ACCOUNT_DIGITS]

    result[slot] = slot_value
    logger.debug(
        f"[PromptPay] proxy value '{value}' ({digit_count} digits, type={proxy_type}, code={proxy_type_code}) -> {slot}"
    )
    return slot


def _parse_merchant_info(data: str, result: dict):
    """Sub-scan of tag 26/30. Proxy type code applies to later 02 fields of the same template."""
    proxy_type = None
    proxy_type_code = None

    for tlv in scan_tlv(data).fields:
        if tlv.tag == "00":
            if tlv.value.startswith(PROMPTPAY_GUID_PREFIX):
                logger.debug(f"[PromptPay] PromptPay GUID confirmed: {tlv.value}")
            else:
                logger.debug(f"[PromptPay] Non-PromptPay GUID: {tlv.value}")

        elif tlv.tag == "01":
            proxy_type_code = tlv.value
            if len(proxy_type_code) > 2:
                logger.warning(f"[PromptPay] Proxy type code malformed (too long): '{tlv.value}', using first 2 chars")
                proxy_type_code = proxy_type_code[:2]
            proxy_type = get_proxy_type(proxy_type_code)
            result["proxy_type_code"] = proxy_type_code
            result["proxy_type"] = proxy_type

        elif tlv.tag == "02":
            assign_proxy_value(tlv.value, proxy_type, proxy_type_code, result)


def _parse_additional_data(data: str):
    # Bill number (07) / mobile number (08) are not used for verification
    for tlv in scan_tlv(data).fields:
        logger.debug(f"[PromptPay] Additional data sub-tag {tlv.tag}: '{tlv.value}'")


def _parse_amount(value: str) -> Optional[Decimal]:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        logger.warning(f"[PromptPay] Ignoring non-numeric amount '{value}'")
        return None
    if not amount.is_finite():
        logger.warning(f"[PromptPay] Ignoring non-finite amount '{value}'")
        return None
    return amount


def parse_promptpay(payload: str) -> PromptPayRecord:
    """Decode a raw PromptPay EMV-QR payload (usually starting with '000201') into a record."""
    result = {"raw": payload}
    logger.debug(f"[PromptPay] Parsing payload ({len(payload)} chars): {payload}")

    scan = scan_tlv(payload)
    for tlv in scan.fields:
        if tlv.tag in MERCHANT_INFO_TAGS:
            _parse_merchant_info(tlv.value, result)
        elif tlv.tag == "54":
            amount = _parse_amount(tlv.value)
            if amount is not None:
                result["amount"] = amount
        elif tlv.tag == "53":
            result["currency"] = "THB" if tlv.value == THB_NUMERIC_CURRENCY else tlv.value
        elif tlv.tag == "58":
            result["country"] = tlv.value
        elif tlv.tag == "59":
            result["name"] = tlv.value
        elif tlv.tag == "62":
            _parse_additional_data(tlv.value)

    result["dropped_bytes"] = scan.dropped
    result["crc_valid"] = verify_crc(payload)
    if result["crc_valid"] is False:
        logger.warning("[PromptPay] CRC mismatch, continuing with decoded fields")

    return PromptPayRecord(**result)


def extract_identifier(record: PromptPayRecord) -> ExtractedIdentifier:
    """
    Pick the single identifier to verify, in priority order:
    1. REF.1 reference (any text)
    2. Donation box account (16 digits)
    3. Organization reference (17 digits)
    4. Mobile (10 digits starting with 0)
    5. Tax ID (13 digits)
    6. Account number (10+ digits)
    Slots that fail their digit check are skipped.
    """
    if record.reference_number:
        return ExtractedIdentifier(record.reference_number, IdentifierType.REFERENCE)

    checks = (
        (record.donation_box_account, IdentifierType.DONATIONBOX, lambda d: len(d) == 16),
        (record.organization_reference, IdentifierType.ORGANIZATIONREF, lambda d: len(d) == 17),
        (record.phone_number, IdentifierType.MOBILE, lambda d: len(d) == 10 and d.startswith("0")),
        (record.tax_id, IdentifierType.TAXID, lambda d: len(d) == 13),
        (record.account_number, IdentifierType.ACCOUNT, lambda d: len(d) >= 10),
    )
    for slot_value, identifier_type, accept in checks:
        if not slot_value:
            continue
        cleaned = digits_only(slot_value)
        if accept(cleaned):
            return ExtractedIdentifier(cleaned, identifier_type)

    if record.name:
        logger.warning(f"[PromptPay] No valid account data found, merchant name present: {record.name}")
    else:
        logger.warning("[PromptPay] No account data found in QR code")
    return ExtractedIdentifier(None, IdentifierType.UNKNOWN)


def decode_and_classify(payload: str) -> ExtractedIdentifier:
    return extract_identifier(parse_promptpay(payload))


def extract_name(payload: str) -> Optional[str]:
    """Receiver display name (tag 59), if any."""
    return parse_promptpay(payload).name or None
