from __future__ import annotations

import base64
import hashlib
import hmac

from passlib.context import CryptContext

from crm.core.config import PASSWORD_HASH_SCHEME

SHA256_SCHEME = "sha256"
PASSLIB_PREFIX = "$"

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def _sha256_digest(password: str) -> str:
    digest = hashlib.sha256((password or "").encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def hash_password(password: str, scheme: str | None = None) -> str:
    """Hash a password for storage.

    The default ``sha256`` scheme produces the unsalted base64 SHA-256 digest
    that existing user rows are stored with. ``pbkdf2_sha256`` produces a
    salted passlib hash instead; ``verify_password`` accepts both formats.
    """
    scheme = (scheme or PASSWORD_HASH_SCHEME).strip().lower()
    if scheme == SHA256_SCHEME:
        return _sha256_digest(password)
    return _pwd_context.hash(password or "")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False

    if password_hash.startswith(PASSLIB_PREFIX):
        try:
            return _pwd_context.verify(password or "", password_hash)
        except (ValueError, TypeError):
            return False

    expected = password_hash.strip().encode("utf-8")
    return hmac.compare_digest(_sha256_digest(password).encode("ascii"), expected)
