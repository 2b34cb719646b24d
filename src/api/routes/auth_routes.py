"""
Authentication routes - login, logout, password update, profile.
"""
from fastapi import APIRouter, HTTPException, Response, status, Depends

from api.auth.models import (
    UserLogin, LoginResponse, UserInfo, UpdatePasswordRequest,
    UserProfile, MessageResponse, ErrorResponse,
)
from api.auth.dependencies import get_jwt_handler, get_user_db, get_current_user
from utils.logger import get_logger

router = APIRouter()

SESSION_COOKIES = ("token", "user", "name")


def _set_session_cookies(response: Response, token: str, user: dict, max_age: int):
    import config
    common = {
        "max_age": max_age,
        "path": "/",
        "secure": config.AUTH_COOKIE_SECURE,
        "samesite": config.AUTH_COOKIE_SAMESITE,
    }
    response.set_cookie("token", token, httponly=True, **common)
    # Readable by the dashboard header
    response.set_cookie("user", user["email"], **common)
    response.set_cookie("name", user["full_name"], **common)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Login and start a dashboard session",
)
async def login(body: UserLogin, response: Response):
    """
    Authenticate with email and password.

    Sets the `token` (httponly), `user` and `name` cookies and also returns
    the token so API clients can send it as `Authorization: Bearer <token>`.
    """
    user_db = get_user_db()
    jwt_handler = get_jwt_handler()

    user = user_db.authenticate(email=body.email, password=body.password)
    if not user:
        get_logger().warning(f"Failed login for {body.email}", component="Auth")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    token = jwt_handler.create_access_token(
        user_id=user["id"],
        email=user["email"],
        name=user["full_name"],
    )
    _set_session_cookies(response, token, user, jwt_handler.expires_in)
    get_logger().info(f"User logged in: {user['email']}", component="Auth")

    return LoginResponse(
        token=token,
        expires_in=jwt_handler.expires_in,
        user=UserInfo(id=user["id"], email=user["email"], name=user["full_name"]),
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Clear the dashboard session cookies",
)
async def logout(response: Response):
    """Clear the `token`, `user` and `name` cookies. Always succeeds."""
    for name in SESSION_COOKIES:
        response.delete_cookie(name, path="/")
    return MessageResponse(message="Logged out successfully")


@router.put(
    "/update-password",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Change the current user's password",
)
async def update_password(body: UpdatePasswordRequest, user: dict = Depends(get_current_user)):
    """
    Change the password of the authenticated user.

    - **currentPassword**: Must match the stored password
    - **newPassword**: Minimum 6 characters
    """
    import config
    if len(body.new_password) < config.MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"New password must be at least {config.MIN_PASSWORD_LENGTH} characters long",
        )

    user_db = get_user_db()
    if not user_db.update_password(user["id"], body.current_password, body.new_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    get_logger().info(f"Password updated for {user['email']}", component="Auth")
    return MessageResponse(message="Password updated successfully")


@router.get(
    "/me",
    response_model=UserProfile,
    summary="Get current user profile",
)
async def get_profile(user: dict = Depends(get_current_user)):
    """
    Get the authenticated user's profile.

    Accepts the session cookie or an `Authorization: Bearer` header.
    """
    return UserProfile(**user)
