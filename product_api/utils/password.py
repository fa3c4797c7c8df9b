"""bcrypt 비밀번호 해시.

Only the hash is stored in users.password_hash; plain passwords never reach
the database or a response.
"""

import bcrypt


def hash_password(password: str) -> str:
    """새 salt로 해시합니다 — Hash with a fresh salt (~60 char string)."""
    salt: bytes = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """로그인 비밀번호가 저장된 해시와 일치하는지 확인합니다.

    A stored value that is not a bcrypt hash counts as a mismatch, so login
    still answers with the generic 401.
    """
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False
