"""JWT helpers for resolving caller identity.

WHAT:
    Decodes (and, for tooling and tests, issues) HS256 bearer tokens.

WHY:
    The analytics API does not authenticate users itself. It only reads the
    claims of an already-issued token so the semantic layer can inject
    tenant/user security filters. Verification uses the shared JWT_SECRET.

REFERENCES:
    - reporting/deps.py: get_caller_identity
    - reporting/semantic/identity.py: Claim preference order
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

DEFAULT_ALGORITHM = "HS256"

logger = logging.getLogger(__name__)


def create_access_token(
    claims: Dict[str, Any],
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
    expires_minutes: Optional[int] = 60,
) -> str:
    """Create a signed JWT carrying ``claims``.

    Adds ``iat`` and, unless ``expires_minutes`` is None, ``exp``.
    """
    if not secret:
        raise ValueError("Cannot sign a token without a secret.")

    now = datetime.now(timezone.utc)
    to_encode: Dict[str, Any] = dict(claims)
    to_encode["iat"] = int(now.timestamp())
    if expires_minutes is not None:
        to_encode["exp"] = int((now + timedelta(minutes=expires_minutes)).timestamp())
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = DEFAULT_ALGORITHM) -> Dict[str, Any]:
    """Decode and validate a JWT, returning its claims.

    Raises jose.JWTError on failure (bad signature, expired, malformed).
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as exc:
        logger.warning("[AUTH] Token rejected: %s", exc.__class__.__name__)
        raise
