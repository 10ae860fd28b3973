"""JWT access token creation and decoding.

Tokens are issued by the dashboard's auth service with the same secret.
Claims read here:
  - sub:          user ID
  - role:         user role string
  - permissions:  list of effective permission strings (optional; the
                  role defaults apply when absent)
  - type:         "access"
  - exp:          expiry timestamp

`create_access_token` exists for the test-suite.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from church_onboarding.config import settings

ALGORITHM = settings.jwt_algorithm


def create_access_token(
    user_id: str,
    role: str,
    permissions: list[str] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {
        "sub": user_id,
        "role": role,
        "type": "access",
        "exp": expire,
    }
    if permissions is not None:
        payload["permissions"] = permissions
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT. Returns empty dict on failure."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return {}
