"""
领取码生成
固定长度、去除易混淆字符（0/O、1/I）的大写字母数字码
"""

import secrets

CLAIM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
DEFAULT_CLAIM_CODE_LENGTH = 7


def generate_claim_code(length: int = DEFAULT_CLAIM_CODE_LENGTH) -> str:
    return "".join(secrets.choice(CLAIM_CODE_ALPHABET) for _ in range(length))


def normalize_claim_code(code: str) -> str:
    """员工手工输入时统一为大写并去除空白"""
    return "".join(code.split()).upper()
