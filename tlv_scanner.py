# tlv_scanner.py
"""
Generic EMV-QR Tag-Length-Value walker.

Each field is Tag(2 chars) + Length(2 decimal digits) + Value(Length chars).
No domain knowledge lives here; the same scanner walks the top level payload
and every nested template (merchant account info, additional data).
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List

logger = logging.getLogger(__name__)

HEADER_LEN = 4


@dataclass(frozen=True)
class TlvField:
    tag: str
    length: int
    value: str


@dataclass(frozen=True)
class TlvScan:
    """Result of one full scan. `dropped` > 0 means the tail was malformed."""
    fields: List[TlvField] = field(default_factory=list)
    consumed: int = 0
    dropped: int = 0

    @property
    def is_partial(self) -> bool:
        return self.dropped > 0


def _parse_length(raw: str):
    # Stricter than a parseInt-style read: " 5" or "1a" ends the scan
    # instead of being taken as 5 or 1
    if len(raw) != 2 or not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw, 10)


def iter_tlv(data: str, offset: int = 0) -> Iterator[TlvField]:
    """
    Lazily yield fields from `data` starting at `offset`.
    Stops silently at the first header whose length is not a decimal number.
    """
    i = offset
    while i + HEADER_LEN <= len(data):
        tag = data[i:i + 2]
        length = _parse_length(data[i + 2:i + 4])
        if length is None:
            logger.debug(f"[TLV] Invalid length '{data[i + 2:i + 4]}' at index {i}, stopping scan")
            return
        value = data[i + HEADER_LEN:i + HEADER_LEN + length]
        yield TlvField(tag=tag, length=length, value=value)
        i += HEADER_LEN + length


def scan_tlv(data: str, offset: int = 0) -> TlvScan:
    """Scan everything and report how many characters were left undecoded."""
    fields = []
    position = offset
    for tlv in iter_tlv(data, offset):
        fields.append(tlv)
        position += HEADER_LEN + tlv.length

    consumed = min(position, len(data)) - offset
    dropped = max(len(data) - offset - consumed, 0)
    if dropped:
        logger.warning(f"[TLV] Partial decode: {dropped} trailing characters dropped after {len(fields)} fields")
    return TlvScan(fields=fields, consumed=consumed, dropped=dropped)


def calculate_crc(data_string: str) -> str:
    """Calculates the CRC-16/CCITT-FALSE (0xFFFF, 0x1021) for EMV QR."""
    crc = 0xFFFF
    polynomial = 0x1021
    for byte in data_string.encode('utf-8'):
        crc ^= (byte << 8)
        for _ in range(8):
            if crc & 0x8000:
                crc = (crc << 1) ^ polynomial
            else:
                crc = crc << 1
            crc &= 0xFFFF
    return f"{crc:04X}"


def verify_crc(payload: str):
    """
    Check the trailing tag 63 checksum.
    Returns None when the payload carries no CRC field at the expected position.
    """
    if len(payload) < 8 or payload[-8:-4] != "6304":
        return None
    return calculate_crc(payload[:-4]) == payload[-4:].upper()
