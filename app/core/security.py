"""Password hashing and session cookie signing (session-based auth)."""
import base64
import hmac
import hashlib
import time

from passlib.context import CryptContext

from app.core.config import Settings

# bcrypt keeps salt and digest in one "$2b$<cost>$<salt><digest>" string
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt hard limit (UTF-8 bytes)
MAX_PASSWORD_BYTES = 72


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# Session token: base64(user_id:timestamp).hmac
def _signature(payload: bytes, secret_key: str) -> str:
    return hmac.new(secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def create_session_token(user_id: int, settings: Settings) -> str:
    """Create a signed session token for the user (for auth cookie)."""
    ts = int(time.time())
    payload = f"{user_id}:{ts}".encode("utf-8")
    encoded = base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")
    return encoded + "." + _signature(payload, settings.secret_key)


def verify_session_token(token: str | None, settings: Settings) -> int | None:
    """Verify signed token and return user_id if valid; None otherwise."""
    if not token or "." not in token:
        return None
    try:
        encoded, sig = token.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not hmac.compare_digest(_signature(payload, settings.secret_key), sig):
            return None
        parts = payload.decode("utf-8").split(":", 1)
        user_id = int(parts[0])
        ts = int(parts[1])
        if abs(time.time() - ts) > settings.auth_cookie_max_age:
            return None
        return user_id
    except (ValueError, IndexError):
        return None
