from validation import (
    format_account_number,
    format_identifier,
    format_tax_id,
    format_thai_mobile,
    get_bank_display_name,
    is_valid_account_number,
    is_valid_thai_mobile,
    is_valid_thai_national_id,
    normalize_account_number,
)


def test_normalize_account_number():
    assert normalize_account_number("045-3-04637-0") == "0453046370"
    assert normalize_account_number(" DiaBet QR ") == "diabetqr"
    assert normalize_account_number("---") == ""
    assert normalize_account_number(None) == ""


def test_thai_mobile():
    assert is_valid_thai_mobile("081-234-5678")
    assert not is_valid_thai_mobile("181-234-5678")
    assert not is_valid_thai_mobile("08123456")


def test_thai_national_id_checksum():
    assert is_valid_thai_national_id("1-2345-67890-12-1")
    assert not is_valid_thai_national_id("1234567890123")
    assert not is_valid_thai_national_id("12345")


def test_account_number_length():
    assert is_valid_account_number("123-4-56789-0")
    assert is_valid_account_number("1234567890123")
    assert not is_valid_account_number("123456789")


def test_formatting():
    assert format_thai_mobile("0812345678") == "081-234-5678"
    assert format_thai_mobile("12345") == "12345"
    assert format_account_number("1234567890") == "123-456-7890"
    assert format_account_number("123-4-56789-0") == "123-456-7890"
    assert format_account_number("1234567890123") == "123-456-7890123"
    assert format_account_number("12345678901234") == "12345678901234"
    assert format_tax_id("1234567890121") == "1-2345-67890-12-1"


def test_format_identifier_by_type():
    assert format_identifier("0812345678", "mobile") == "081-234-5678"
    assert format_identifier("1234567890121", "taxid") == "1-2345-67890-12-1"
    assert format_identifier("DIABETQR", "reference") == "DIABETQR"
    assert format_identifier("0453046370", "account") == "045-304-6370"
    assert format_identifier(None, "account") == ""


def test_bank_display_name():
    assert get_bank_display_name("SCB") == "ธนาคารไทยพาณิชย์"
    assert get_bank_display_name("promptpay") == "พร้อมเพย์"
    assert get_bank_display_name("Kasikorn Bank (KBank)") == "Kasikorn Bank (KBank)"
    assert get_bank_display_name(None) == "ไม่ระบุ"
