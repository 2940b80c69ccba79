"""Account endpoints: registration, cookie-based login/refresh/logout, profile and admin actions."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials

from app.api.v1.auth import (
    DbDep,
    SettingsDep,
    extract_access_token,
    get_notifier,
    get_principal,
    require_access,
    security,
)
from app.core.config import Settings
from app.core.errors import ValidationError
from app.core.security import RefreshGrant
from app.models.user import ACCOUNT_ADMIN_ROLES
from app.schemas.auth import (
    AccountActionResponse,
    AccountSummary,
    AccountUpdateRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    Principal,
    RegisterRequest,
    RegisterResponse,
    RejectRequest,
)
from app.services import accounts, authentication
from app.services.approval import approval_gate
from app.services.notifications import EmailNotifier

logger = logging.getLogger(__name__)
router = APIRouter()

AccountAdmin = Annotated[Principal, Depends(require_access(roles=ACCOUNT_ADMIN_ROLES))]
Notifier = Annotated[EmailNotifier, Depends(get_notifier)]


def _refresh_cookie_path(settings: Settings) -> str:
    # Refresh cookie is only sent to the account routes (refresh, logout).
    return f"{settings.API_V1_PREFIX}/users"


def _set_access_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.ACCESS_COOKIE_NAME,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


def _set_refresh_cookie(response: Response, grant: RefreshGrant, settings: Settings) -> None:
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        grant.token,
        expires=grant.expires_at,
        path=_refresh_cookie_path(settings),
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


def _clear_auth_cookies(response: Response, settings: Settings) -> None:
    for name, path in (
        (settings.ACCESS_COOKIE_NAME, "/"),
        (settings.REFRESH_COOKIE_NAME, _refresh_cookie_path(settings)),
    ):
        response.delete_cookie(
            name,
            path=path,
            httponly=True,
            secure=settings.cookie_secure,
            samesite=settings.cookie_samesite,
        )


def _notify(send: Callable[..., bool], *args: str | None) -> None:
    """Run a notification after the response; failures never reach the client."""
    try:
        send(*args)
    except Exception:
        logger.exception("Account notification failed")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: DbDep, settings: SettingsDep) -> RegisterResponse:
    """Create an account awaiting admin approval. Role defaults to member."""
    user = accounts.register_account(db, body, settings)
    return RegisterResponse(user=AccountSummary.model_validate(user))


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: DbDep,
    settings: SettingsDep,
) -> LoginResponse:
    """
    Authenticate with email and password.

    Sets the access-token cookie (short-lived) and the refresh-token cookie
    (long-lived, scoped to the account routes). Both are HttpOnly.
    """
    result = authentication.login(
        db,
        settings,
        body.email,
        body.password,
        device=request.headers.get("user-agent"),
    )
    _set_access_cookie(response, result.access_token, settings)
    _set_refresh_cookie(response, result.refresh, settings)
    return LoginResponse(user=AccountSummary.model_validate(result.user))


@router.post("/refresh", response_model=MessageResponse)
def refresh(
    request: Request,
    response: Response,
    db: DbDep,
    settings: SettingsDep,
) -> MessageResponse:
    """Reissue the access-token cookie from the refresh-token cookie."""
    token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if not token:
        raise ValidationError("Missing refresh token")
    _, access_token = authentication.refresh_access_token(db, settings, token)
    _set_access_cookie(response, access_token, settings)
    return MessageResponse(message="Access token refreshed")


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DbDep,
    settings: SettingsDep,
) -> MessageResponse:
    """End the refresh session, revoke the presented access token and clear both cookies."""
    authentication.logout(
        db,
        settings,
        refresh_token=request.cookies.get(settings.REFRESH_COOKIE_NAME),
        access_token=extract_access_token(credentials, request, settings),
    )
    _clear_auth_cookies(response, settings)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=AccountSummary)
def me(
    principal: Annotated[Principal, Depends(get_principal)],
    db: DbDep,
) -> AccountSummary:
    """Profile of the authenticated caller."""
    return AccountSummary.model_validate(accounts.get_account(db, principal.id))


@router.get("/pending", response_model=list[AccountSummary])
def list_pending(_admin: AccountAdmin, db: DbDep) -> list[AccountSummary]:
    """Accounts awaiting approval (admin/super_admin only)."""
    return [AccountSummary.model_validate(u) for u in accounts.list_pending(db)]


@router.post("/{user_id}/approve", response_model=AccountActionResponse)
def approve(
    user_id: int,
    admin: AccountAdmin,
    db: DbDep,
    notifier: Notifier,
    background_tasks: BackgroundTasks,
) -> AccountActionResponse:
    """Approve an account; the notification email is sent after the response, best-effort."""
    user = approval_gate.approve(db, user_id, actor_id=admin.id)
    summary = AccountSummary.model_validate(user)
    background_tasks.add_task(_notify, notifier.send_approved, summary.email, summary.username)
    return AccountActionResponse(message="User approved", user=summary)


@router.post("/{user_id}/reject", response_model=AccountActionResponse)
def reject(
    user_id: int,
    admin: AccountAdmin,
    db: DbDep,
    notifier: Notifier,
    background_tasks: BackgroundTasks,
    body: RejectRequest | None = None,
) -> AccountActionResponse:
    """Reject an account; the notification email is sent after the response, best-effort."""
    user = approval_gate.reject(db, user_id, actor_id=admin.id)
    summary = AccountSummary.model_validate(user)
    reason = body.reason if body else None
    background_tasks.add_task(
        _notify, notifier.send_rejected, summary.email, summary.username, reason
    )
    return AccountActionResponse(message="User rejected", user=summary)


@router.patch("/{user_id}", response_model=AccountSummary)
def update_user(
    user_id: int,
    body: AccountUpdateRequest,
    admin: AccountAdmin,
    db: DbDep,
    settings: SettingsDep,
) -> AccountSummary:
    """Update account fields (admin/super_admin only). A password is re-hashed."""
    user = accounts.update_account(db, user_id, body, admin, settings)
    return AccountSummary.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, admin: AccountAdmin, db: DbDep) -> MessageResponse:
    """
    Delete an account (admin/super_admin only).

    Self-deletion and deleting a super_admin are refused; admins may delete members only.
    """
    accounts.delete_account(db, user_id, admin)
    return MessageResponse(message="User deleted successfully")
