"""
Session token verification with python-jose.

Sessions are issued by the external identity provider as HS256 JWTs signed
with a shared secret. Claims: `sub` (user id), `companyId`, `privilege`, and
optionally `name` and `email`.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from mro.config import get_logger
from mro.config.settings import AuthSettings
from mro.core.entities.tenant import TenantContext
from mro.core.exceptions import UnauthenticatedError

logger = get_logger(__name__)


def issue_token(
    settings: AuthSettings,
    user_id: str,
    company_id: str,
    privilege: str = "user",
    name: str | None = None,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed session token (local tooling and tests)."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.token_expire_minutes)
    )
    claims: dict[str, Any] = {
        "sub": user_id,
        "companyId": company_id,
        "privilege": privilege,
        "exp": expire,
    }
    if name:
        claims["name"] = name
    if email:
        claims["email"] = email
    if settings.issuer:
        claims["iss"] = settings.issuer
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_session_token(token: str, settings: AuthSettings) -> TenantContext:
    """
    Verify a session token and return the caller's tenant context.

    Raises:
        UnauthenticatedError: bad signature, expired, or missing sub/companyId
    """
    options = {"verify_iss": settings.issuer is not None}
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            issuer=settings.issuer,
            options=options,
        )
    except ExpiredSignatureError:
        raise UnauthenticatedError("Session expired") from None
    except JWTError as e:
        logger.debug("session_token_rejected", error=str(e))
        raise UnauthenticatedError("Invalid session token") from None

    user_id = payload.get("sub")
    company_id = payload.get("companyId")
    if not user_id or not company_id:
        raise UnauthenticatedError("Session is missing user or company")

    return TenantContext(
        user_id=str(user_id),
        company_id=str(company_id),
        privilege=payload.get("privilege") or "user",
        user_name=payload.get("name"),
        email=payload.get("email"),
    )
