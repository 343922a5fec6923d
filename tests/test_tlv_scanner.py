import types

import pytest

from tlv_scanner import TlvField, calculate_crc, iter_tlv, scan_tlv, verify_crc
from tests.payloads import promptpay_payload, tlv


def test_scans_fields_in_order():
    data = tlv("00", "01") + tlv("01", "11") + tlv("59", "DONATE")

    scan = scan_tlv(data)

    assert scan.fields == [
        TlvField("00", 2, "01"),
        TlvField("01", 2, "11"),
        TlvField("59", 6, "DONATE"),
    ]
    assert scan.consumed == len(data)
    assert scan.dropped == 0
    assert scan.is_partial is False


def test_iter_tlv_is_lazy():
    fields = iter_tlv(tlv("00", "01") + "XX")

    assert isinstance(fields, types.GeneratorType)
    assert next(fields) == TlvField("00", 2, "01")


def test_invalid_length_stops_scan_and_keeps_decoded_fields():
    data = tlv("00", "01") + "26ZZgarbage"

    scan = scan_tlv(data)

    assert [f.tag for f in scan.fields] == ["00"]
    assert scan.dropped == len("26ZZgarbage")
    assert scan.is_partial


def test_negative_length_is_not_a_length():
    scan = scan_tlv("00-1abc")

    assert scan.fields == []
    assert scan.dropped == 7


@pytest.mark.parametrize("data", ["00 5abcde", "001aabcde"])
def test_lenient_looking_length_ends_the_scan(data):
    scan = scan_tlv(data)

    assert scan.fields == []
    assert scan.dropped == len(data)


def test_short_tail_is_dropped():
    scan = scan_tlv(tlv("00", "01") + "63")

    assert len(scan.fields) == 1
    assert scan.dropped == 2


def test_value_shorter_than_declared_length_is_accepted():
    scan = scan_tlv("0010abc")

    assert scan.fields == [TlvField("00", 10, "abc")]
    assert scan.dropped == 0


def test_zero_length_field():
    scan = scan_tlv("0000" + tlv("01", "11"))

    assert scan.fields == [TlvField("00", 0, ""), TlvField("01", 2, "11")]


def test_scan_from_offset():
    data = "XXXX" + tlv("59", "NAME")

    scan = scan_tlv(data, offset=4)

    assert scan.fields == [TlvField("59", 4, "NAME")]
    assert scan.consumed == len(data) - 4


def test_headers_never_exceed_input_length():
    payloads = [
        promptpay_payload("02", "1234567890123"),
        promptpay_payload("01", "0812345678") + "9",
        "000201" + "26ab",
        "",
    ]
    for payload in payloads:
        scan = scan_tlv(payload)
        assert len(scan.fields) * 4 <= len(payload)
        assert scan.consumed + scan.dropped == len(payload)


def test_crc_check_value():
    # CRC-16/CCITT-FALSE standard check value
    assert calculate_crc("123456789") == "29B1"


def test_verify_crc():
    body = promptpay_payload("01", "0812345678") + "6304"
    payload = body + calculate_crc(body)

    assert verify_crc(payload) is True
    assert verify_crc(payload[:-4] + "0000") is False
    assert verify_crc(promptpay_payload("01", "0812345678")) is None
