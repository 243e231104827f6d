"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Request, Response

from src.core.config import get_settings
from src.services.dashboard_service import DashboardService
from src.services.session_registry import DashboardSession, get_session_registry

SESSION_TOKEN_HEADER = "x-session-token"


def get_session_cookie_config() -> dict:
    """Get session cookie configuration from settings."""
    settings = get_settings()
    # SameSite=None requires Secure=True, so fall back to Lax for local HTTP
    samesite = "none" if settings.session_cookie_secure else "lax"
    return {
        "key": settings.session_cookie_name,
        "max_age": settings.session_cookie_max_age,
        "httponly": True,
        "secure": settings.session_cookie_secure,
        "samesite": samesite,
        "path": "/",
    }


def get_session_token(request: Request) -> str | None:
    """Extract session token from X-Session-Token header or cookie.

    Checks header first (works when third-party cookies are blocked),
    then falls back to cookie.

    Args:
        request: FastAPI request object.

    Returns:
        str | None: The session token or None if not present.
    """
    header_token = request.headers.get(SESSION_TOKEN_HEADER)
    if header_token:
        return header_token

    config = get_session_cookie_config()
    return request.cookies.get(config["key"])


def set_session_cookie(response: Response, token: str) -> None:
    """Set session cookie on response.

    Args:
        response: FastAPI response object.
        token: The session token to set.
    """
    config = get_session_cookie_config()
    response.set_cookie(
        key=config["key"],
        value=token,
        max_age=config["max_age"],
        httponly=config["httponly"],
        secure=config["secure"],
        samesite=config["samesite"],
        path=config["path"],
    )


def get_dashboard_service() -> DashboardService:
    """Create a dashboard service backed by the Supabase record store."""
    return DashboardService()


async def get_dashboard_session(
    request: Request,
    response: Response,
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
) -> DashboardSession:
    """Resolve the caller's dashboard session, creating and loading it if needed.

    A new session gets its token in both a cookie and the X-Session-Token
    response header, and is loaded from the record store before first use.

    Args:
        request: FastAPI request object.
        response: FastAPI response object.
        service: Dashboard service used for the initial load.

    Returns:
        DashboardSession: The caller's session.
    """
    registry = get_session_registry()
    session = registry.get(get_session_token(request))

    if session is None:
        session = registry.create()
        set_session_cookie(response, session.token)

    response.headers[SESSION_TOKEN_HEADER] = session.token
    await service.ensure_loaded(session)
    return session


# Type aliases for cleaner dependency injection
Dashboard = Annotated[DashboardService, Depends(get_dashboard_service)]
CurrentSession = Annotated[DashboardSession, Depends(get_dashboard_session)]
