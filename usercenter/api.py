"""HTTP API for account registration, login, and user search."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, NoReturn, Optional

from fastapi import Cookie, FastAPI, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from .auth import AuthService
from .config import Settings, load_settings
from .database import Database, resolve_database_path
from .models import Page, SanitizedUser
from .passwords import PasswordCodec
from .results import ErrorKind, Failure
from .search import SearchService
from .sessions import Session, SessionManager

logger = logging.getLogger("usercenter.api")

SESSION_COOKIE_NAME = "usercenter_session"

_INVALID_LOGIN_DETAIL = "Invalid account or password"

_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_ACCOUNT: status.HTTP_409_CONFLICT,
    ErrorKind.REGISTRATION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.ACCOUNT_NOT_FOUND: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.BAD_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.SESSION_UNAVAILABLE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.NOT_LOGGED_IN: status.HTTP_401_UNAUTHORIZED,
}


class RegisterRequest(BaseModel):
    account: Optional[str] = Field(default=None, max_length=256)
    password: Optional[str] = Field(default=None, max_length=256)
    check_password: Optional[str] = Field(default=None, max_length=256)


class RegisterResponse(BaseModel):
    id: int


class LoginRequest(BaseModel):
    account: Optional[str] = Field(default=None, max_length=256)
    password: Optional[str] = Field(default=None, max_length=256)


class UserResponse(BaseModel):
    id: Optional[int]
    account: str
    username: Optional[str]
    avatar_id: Optional[int]
    gender: Optional[int]
    phone: Optional[str]
    email: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    status: int
    role: int


class UserPageResponse(BaseModel):
    records: List[UserResponse]
    current: int
    size: int
    pages: int
    total: int


def _user_to_response(user: SanitizedUser) -> UserResponse:
    return UserResponse(
        id=user.id,
        account=user.account,
        username=user.username,
        avatar_id=user.avatar_id,
        gender=user.gender,
        phone=user.phone,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
        status=int(user.status),
        role=int(user.role),
    )


def _page_to_response(page: Page[SanitizedUser]) -> UserPageResponse:
    return UserPageResponse(
        records=[_user_to_response(user) for user in page.records],
        current=page.current,
        size=page.size,
        pages=page.pages,
        total=page.total,
    )


def _raise_for(failure: Failure) -> NoReturn:
    # Unknown account and wrong password look the same from outside.
    if failure.kind in (ErrorKind.ACCOUNT_NOT_FOUND, ErrorKind.BAD_CREDENTIALS):
        detail = _INVALID_LOGIN_DETAIL
    else:
        detail = failure.reason
    raise HTTPException(status_code=_STATUS_BY_KIND[failure.kind], detail=detail)


def _initialise_database(database: Database) -> Database:
    database.initialize()
    return database


def register_user_routes(
    app: FastAPI,
    auth: AuthService,
    search: SearchService,
    *,
    session_manager: SessionManager,
    secure_cookies: bool,
) -> None:
    """Expose the account endpoints on the provided FastAPI application."""

    def _resolve_session(token: Optional[str]) -> Optional[Session]:
        if not token:
            return None
        return session_manager.resolve(token)

    def _issue_session_cookie(response: Response, token: str) -> None:
        response.set_cookie(
            SESSION_COOKIE_NAME,
            token,
            max_age=session_manager.cookie_max_age,
            secure=secure_cookies,
            httponly=True,
            samesite="lax",
            path="/",
        )

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/user/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
    def register(request: RegisterRequest) -> RegisterResponse:
        outcome = auth.register(request.account, request.password, request.check_password)
        if isinstance(outcome, Failure):
            _raise_for(outcome)
        return RegisterResponse(id=outcome.value)

    @app.post("/user/login", response_model=UserResponse)
    def login(
        request: LoginRequest,
        response: Response,
        session_token: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    ) -> UserResponse:
        session = session_manager.create()
        outcome = auth.login(request.account, request.password, session)
        if isinstance(outcome, Failure):
            session_manager.destroy(session.token)
            _raise_for(outcome)

        if session_token:
            session_manager.destroy(session_token)
        _issue_session_cookie(response, session.token)
        return _user_to_response(outcome.value)

    @app.get("/user/current", response_model=UserResponse)
    def current_user(
        session_token: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    ) -> UserResponse:
        outcome = auth.current_user(_resolve_session(session_token))
        if isinstance(outcome, Failure):
            _raise_for(outcome)
        return _user_to_response(outcome.value)

    @app.post("/user/logout", status_code=status.HTTP_204_NO_CONTENT)
    def logout(
        response: Response,
        session_token: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    ) -> None:
        if session_token:
            session_manager.destroy(session_token)
        response.delete_cookie(SESSION_COOKIE_NAME, path="/")

    @app.get("/user/search", response_model=UserPageResponse)
    def search_users(
        username: Optional[str] = Query(default=None, max_length=256),
        current: int = Query(default=1),
        size: int = Query(default=10, le=1000),
    ) -> UserPageResponse:
        outcome = search.search_by_name(username, current, size)
        if isinstance(outcome, Failure):
            _raise_for(outcome)
        return _page_to_response(outcome.value)


def create_app(
    *,
    database: Database | None = None,
    settings: Settings | None = None,
    session_manager: SessionManager | None = None,
) -> FastAPI:
    """Create the user center application."""

    app_settings = settings or load_settings()
    db = database or Database(resolve_database_path(app_settings.database_path))
    _initialise_database(db)

    codec = PasswordCodec(app_settings.password_salt, algorithm=app_settings.digest_algorithm)
    manager = session_manager or SessionManager(ttl=app_settings.session_ttl)

    if not app_settings.secure_cookies:
        logger.warning(
            "Session cookies are not marked as secure. Only disable secure cookies for"
            " local development."
        )

    app = FastAPI(
        title="User Center",
        version="0.1.0",
        description="Account registration, login, and user search.",
    )

    auth = AuthService(db, codec)
    search = SearchService(db)

    app.state.database = db
    app.state.session_manager = manager
    app.state.auth = auth
    app.state.search = search

    register_user_routes(
        app,
        auth,
        search,
        session_manager=manager,
        secure_cookies=app_settings.secure_cookies,
    )

    return app


__all__ = ["SESSION_COOKIE_NAME", "create_app", "register_user_routes"]
