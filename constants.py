# constants.py
"""Display strings, bank names and PromptPay constants shared across modules."""

PROMPTPAY_GUID_PREFIX = "A0000006770101"
THB_NUMERIC_CURRENCY = "764"

# Thai display names keyed by bank code
BANK_NAMES = {
    "PROMPTPAY": "พร้อมเพย์",
    "KBANK": "ธนาคารกสิกรไทย",
    "SCB": "ธนาคารไทยพาณิชย์",
    "BBL": "ธนาคารกรุงเทพ",
    "KTB": "ธนาคารกรุงไทย",
    "BAY": "ธนาคารกรุงศรีอยุธยา",
    "TMB": "ธนาคารทหารไทยธนชาต",
    "CIMB": "ธนาคารซีไอเอ็มบีไทย",
    "TISCO": "ธนาคารทิสโก้",
    "UOB": "ธนาคารยูโอบี",
    "GSB": "ธนาคารออมสิน",
    "BAAC": "ธนาคารเพื่อการเกษตรและสหกรณ์การเกษตร",
    "OTHER": "อื่นๆ",
}

BANK_UNSPECIFIED = "ไม่ระบุ"
ACCOUNT_NAME_NOT_FOUND = "ไม่พบข้อมูล"
ACCOUNT_NAME_BLACKLISTED = "บัญชีถูกรายงานว่าเป็นมิจฉาชีพ"

VERIFICATION_MESSAGES = {
    "SAFE": "บัญชีนี้เป็นมูลนิธิที่ได้รับการรับรอง ปลอดภัย 100% สามารถบริจาคได้อย่างมั่นใจ",
    "WARNING": "ไม่พบข้อมูลบัญชีนี้ในระบบ กรุณาตรวจสอบอีกครั้งหรือติดต่อมูลนิธิโดยตรง",
    "DANGER": "บัญชีนี้อยู่ในรายชื่อมิจฉาชีพ ห้ามโอนเงิน!",
}

# Shown when a QR payload yields no usable identifier
RETRY_SCAN_MESSAGE = (
    "❌ Could not find a donation account in this QR code.\n"
    "Please send a clearer photo of the QR code, or type the account number instead."
)

IDENTIFIER_LABELS = {
    "reference": "Reference (REF.1)",
    "donationbox": "Donation Box Account",
    "organizationref": "Organization Reference (ORN)",
    "mobile": "PromptPay Mobile",
    "taxid": "Tax ID / National ID",
    "account": "Bank Account",
    "unknown": "Unknown",
}
