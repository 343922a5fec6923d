from bot_utils import _code, format_error_message, format_verification_message
from errors import RegistryError, ValidationError, format_error_response
from verification import MatchedType, VerificationResult, VerificationStatus


def _result(**overrides):
    fields = dict(
        status=VerificationStatus.WARNING,
        account_name="SOME_SHOP",
        account_number="0812345678",
        bank="พร้อมเพย์",
        message="check first",
        matched_type=MatchedType.NONE,
        identifier_type="mobile",
    )
    fields.update(overrides)
    return VerificationResult(**fields)


def test_verification_message_formats_identifier_and_escapes_markdown():
    text = format_verification_message(_result())

    assert text.startswith("⚠️ *WARNING*")
    assert "`081-234-5678`" in text
    assert "SOME\\_SHOP" in text
    assert "PromptPay Mobile" in text


def test_verification_message_shows_qr_name_when_different():
    text = format_verification_message(
        _result(status=VerificationStatus.SAFE, account_name="Mirror Foundation"),
        qr_name="MIRROR FDN",
    )

    assert "*Name in QR:* MIRROR FDN" in text


def test_error_messages():
    assert "Please send" in format_error_message(format_error_response(ValidationError("Account number must include digits")))
    assert "unavailable" in format_error_message(format_error_response(RegistryError("blacklist lookup timed out")))


def test_format_error_response_for_plain_exception():
    response = format_error_response(RuntimeError("boom"))

    assert response == {"error": "boom", "code": None, "details": None, "status_code": 500}


def test_backticks_in_identifier_cannot_break_the_code_span():
    text = format_verification_message(_result(account_number="12`345", identifier_type="account"))

    assert "`12345`" in text
    assert text.count("`") % 2 == 0


def test_code_span_strips_backticks():
    assert _code("12`345") == "`12345`"
    assert _code("0812345678") == "`0812345678`"
