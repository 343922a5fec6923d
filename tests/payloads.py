def tlv(tag: str, value: str) -> str:
    """Encode one EMV field."""
    return f"{tag}{len(value):02d}{value}"


def promptpay_payload(proxy_code: str, proxy_value: str, merchant_tag: str = "26", extra: str = "") -> str:
    merchant_info = tlv("00", "A000000677010111") + tlv("01", proxy_code) + tlv("02", proxy_value)
    return (
        tlv("00", "01")
        + tlv("01", "11")
        + tlv(merchant_tag, merchant_info)
        + tlv("53", "764")
        + tlv("58", "TH")
        + extra
    )
