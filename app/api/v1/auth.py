"""Auth dependencies applied to every protected route.

get_principal: bearer header (falling back to the HttpOnly cookie) -> revocation
check -> signature/expiry -> Principal. require_access() then evaluates the RBAC
table and, for ownership-scoped routes, the record owner.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Annotated, Literal

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import AuthenticationError, AuthorizationError
from app.core.ownership import RECORD_OWNERSHIP
from app.core.security import TokenIssuer
from app.schemas.auth import Principal
from app.services.notifications import EmailNotifier
from app.services.ownership import check_record_access
from app.services.rbac import policy_engine
from app.services.revocation import revocation_list

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)

# none: verb matrix only; replace: ownership check instead of the verb matrix;
# additional: verb matrix, then ownership check.
OwnershipMode = Literal["none", "replace", "additional"]

SettingsDep = Annotated[Settings, Depends(get_settings)]
DbDep = Annotated[Session, Depends(get_db)]


def get_token_issuer(settings: SettingsDep) -> TokenIssuer:
    return TokenIssuer(settings)


def get_notifier(settings: SettingsDep) -> EmailNotifier:
    return EmailNotifier(settings)


def extract_access_token(
    credentials: HTTPAuthorizationCredentials | None,
    request: Request,
    settings: Settings,
) -> str | None:
    """Bearer header value first, then the access-token cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.ACCESS_COOKIE_NAME) or None


def principal_from_claims(claims: dict) -> Principal:
    try:
        return Principal(
            id=int(claims["sub"]),
            email=claims["email"],
            role=claims["role"],
        )
    except (KeyError, TypeError, ValueError, PydanticValidationError):
        raise AuthenticationError("Invalid token payload") from None


def get_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DbDep,
    settings: SettingsDep,
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> Principal:
    """Dependency: require a valid, unrevoked access token. Raises 401 otherwise."""
    token = extract_access_token(credentials, request, settings)
    if token is None:
        raise AuthenticationError("Missing token")
    if revocation_list.is_revoked(db, token):
        raise AuthenticationError("Token revoked. Please log in again.")
    try:
        claims = issuer.decode_access_token(token)
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid or expired token") from None
    return principal_from_claims(claims)


def require_access(
    roles: Iterable[str] | None = None,
    entity: str | None = None,
    ownership: OwnershipMode = "none",
    id_param: str = "record_id",
) -> Callable[..., Principal]:
    """
    Build the access dependency for one route declaration.

    roles narrows the RBAC table to a role set (None means any approved role).
    entity names the ownership registry entry used when ownership is not "none".
    """
    allowed_roles = frozenset(roles) if roles is not None else None
    if ownership != "none":
        if entity is None:
            raise ValueError("Ownership-scoped routes must name an entity")
        RECORD_OWNERSHIP.rule(entity)

    def dependency(
        request: Request,
        principal: Annotated[Principal, Depends(get_principal)],
        db: DbDep,
    ) -> Principal:
        if ownership == "replace":
            if (
                allowed_roles is not None
                and principal.role not in allowed_roles
                and not policy_engine.is_wildcard(principal.role)
            ):
                raise AuthorizationError("Forbidden: insufficient permissions")
        else:
            decision = policy_engine.authorize(principal.role, request.method, allowed_roles)
            if not decision.allowed:
                logger.info(
                    "RBAC denied",
                    extra={
                        "user_id": principal.id,
                        "role": principal.role,
                        "method": request.method,
                        "path": request.url.path,
                    },
                )
                raise AuthorizationError(decision.reason or "Forbidden")
        if ownership != "none":
            check_record_access(
                db,
                RECORD_OWNERSHIP,
                principal,
                entity,
                str(request.path_params[id_param]),
            )
        return principal

    return dependency
