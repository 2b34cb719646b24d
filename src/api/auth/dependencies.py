"""
FastAPI dependencies for authentication.
Provides get_current_user, which accepts the session token either as a
Bearer header or as the ``token`` cookie set at login.
"""
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# Will be initialized in main.py when the app starts
_jwt_handler = None
_user_db = None

security = HTTPBearer(auto_error=False)


def init_auth(jwt_handler, user_db):
    """Initialize auth dependencies with actual instances. Called from main.py."""
    global _jwt_handler, _user_db
    _jwt_handler = jwt_handler
    _user_db = user_db


def _lazy_init():
    """Lazy-initialize auth from config if not already done."""
    global _jwt_handler, _user_db
    if _jwt_handler is not None and _user_db is not None:
        return
    import config
    from api.auth.jwt_handler import JWTHandler
    from api.auth.user_db import UserDB
    if not config.API_JWT_SECRET:
        return
    _jwt_handler = JWTHandler(
        secret=config.API_JWT_SECRET,
        algorithm=config.API_JWT_ALGORITHM,
        access_expiry_minutes=config.API_JWT_EXPIRY_MINUTES,
    )
    _user_db = UserDB(db_path=config.API_USER_DB_PATH)


def get_jwt_handler():
    """Get the JWT handler instance."""
    _lazy_init()
    if _jwt_handler is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Auth system not initialized"
        )
    return _jwt_handler


def get_user_db():
    """Get the user database instance."""
    _lazy_init()
    if _user_db is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Auth system not initialized"
        )
    return _user_db


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    cookie = request.cookies.get("token")
    return cookie or None


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, Any]:
    """
    FastAPI dependency that validates the session token and returns the current user.
    Use this on any route that requires authentication:

        @router.get("/protected")
        async def protected_route(user: dict = Depends(get_current_user)):
            return {"user_id": user["id"]}
    """
    token = _extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token not found. Please login again.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    jwt_handler = get_jwt_handler()
    user_db = get_user_db()

    payload = jwt_handler.verify_token(token, expected_type="access")
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Verify user still exists and is active
    user = user_db.get_user_by_id(payload["sub"])
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or deactivated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user
