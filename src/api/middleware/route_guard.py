"""
Route protection middleware.
Redirects requests for dashboard pages to the login page unless the browser
carries a ``token`` cookie. Only the presence of the cookie is checked; API
endpoints validate the token itself through get_current_user.
"""
from typing import Iterable, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from utils.logger import get_logger


class RouteProtectionMiddleware(BaseHTTPMiddleware):
    """
    Cookie gate for protected page prefixes.
    Unmatched paths pass straight through.
    """

    def __init__(self, app, protected_prefixes: Optional[Iterable[str]] = None,
                 login_path: Optional[str] = None):
        super().__init__(app)
        import config
        prefixes = protected_prefixes if protected_prefixes is not None else config.PROTECTED_ROUTE_PREFIXES
        self.protected_prefixes: Tuple[str, ...] = tuple(prefixes)
        self.login_path = login_path or config.LOGIN_PATH

    def is_protected(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.protected_prefixes)

    async def dispatch(self, request: Request, call_next):
        """Check the token cookie before serving a protected page."""
        path = request.url.path
        if not self.is_protected(path):
            return await call_next(request)

        logger = get_logger()
        token = request.cookies.get("token")
        if not token:
            logger.info(f"No token for {path}, redirecting to {self.login_path}", component="RouteGuard")
            return RedirectResponse(url=self.login_path, status_code=307)

        logger.info(f"Token present for {path}, allowing access", component="RouteGuard")
        return await call_next(request)
