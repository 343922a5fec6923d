from PIL import Image
from pyzbar.pyzbar import decode, ZBarSymbol
import io
import logging
from typing import Optional

logger = logging.getLogger(__name__)

EMV_PAYLOAD_PREFIX = "000201"


def decode_qr_image(image_bytes: bytes) -> Optional[str]:
    """
    Read the QR payload text from a photo.
    When several QR codes are in the picture, prefer the EMV one.
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))
        decoded = decode(image, symbols=[ZBarSymbol.QRCODE])

        if not decoded:
            return None

        payloads = [symbol.data.decode("utf-8", errors="replace") for symbol in decoded]
        for payload in payloads:
            if payload.startswith(EMV_PAYLOAD_PREFIX):
                return payload

        logger.info(f"No EMV payload among {len(payloads)} QR codes, using the first one")
        return payloads[0]

    except Exception as e:
        logger.error(f"QR decode failed: {e}")
        return None
