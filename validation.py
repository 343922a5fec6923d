# validation.py
"""Format checks and display formatting for Thai identifiers."""

import re

from constants import BANK_NAMES, BANK_UNSPECIFIED

_NON_DIGITS = re.compile(r"[^0-9]")
_NON_ALNUM = re.compile(r"[^0-9a-z]", re.IGNORECASE)


def normalize_account_number(value: str) -> str:
    """Keep letters and digits only, lower-cased. Used as the registry key."""
    return _NON_ALNUM.sub("", value or "").lower()


def is_valid_thai_mobile(mobile: str) -> bool:
    cleaned = _NON_DIGITS.sub("", mobile)
    return re.fullmatch(r"0[0-9]{9}", cleaned) is not None


def is_valid_thai_national_id(national_id: str) -> bool:
    """13 digits with the mod-11 check digit."""
    cleaned = _NON_DIGITS.sub("", national_id)
    if len(cleaned) != 13:
        return False

    total = sum(int(cleaned[i]) * (13 - i) for i in range(12))
    check = (11 - total % 11) % 10
    return check == int(cleaned[12])


def is_valid_account_number(account_number: str) -> bool:
    # Most Thai bank accounts are 10 digits, PromptPay IDs up to 13
    cleaned = _NON_DIGITS.sub("", account_number)
    return 10 <= len(cleaned) <= 13


def format_thai_mobile(mobile: str) -> str:
    """0812345678 -> 081-234-5678"""
    cleaned = _NON_DIGITS.sub("", mobile)
    if len(cleaned) != 10:
        return mobile
    return f"{cleaned[:3]}-{cleaned[3:6]}-{cleaned[6:]}"


def format_account_number(account_number: str) -> str:
    """1234567890 -> 123-456-7890, 13 digits keep the tail: 123-456-7890123."""
    cleaned = _NON_DIGITS.sub("", account_number)
    if len(cleaned) in (10, 13):
        return f"{cleaned[:3]}-{cleaned[3:6]}-{cleaned[6:]}"
    return account_number


def format_tax_id(tax_id: str) -> str:
    """1234567890123 -> 1-2345-67890-12-3"""
    cleaned = _NON_DIGITS.sub("", tax_id)
    if len(cleaned) != 13:
        return tax_id
    return f"{cleaned[0]}-{cleaned[1:5]}-{cleaned[5:10]}-{cleaned[10:12]}-{cleaned[12]}"


def format_identifier(value: str, identifier_type: str) -> str:
    """Pretty-print an extracted identifier for display."""
    if not value:
        return ""
    if identifier_type == "mobile":
        return format_thai_mobile(value)
    if identifier_type == "taxid":
        return format_tax_id(value)
    if identifier_type == "account":
        return format_account_number(value)
    return value


def get_bank_display_name(bank: str = None) -> str:
    if not bank:
        return BANK_UNSPECIFIED
    return BANK_NAMES.get(bank.upper(), bank)
