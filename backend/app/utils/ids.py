"""漫画ID生成"""
import secrets
import string
import time

_ID_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def generate_comic_id() -> str:
    """comic_<毫秒时间戳>_<9位base36随机串>，低碰撞概率，非加密用途"""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"comic_{int(time.time() * 1000)}_{suffix}"
