"""
FastAPI application factory.
Creates the app with CORS, the page route guard, auth initialization, error
handlers and router registration.
Swagger UI available at /docs, ReDoc at /redoc.
"""
import sys
from pathlib import Path
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure src/ is on the path
_src_dir = str(Path(__file__).parent.parent)
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from errors import DashboardError  # noqa: E402
from utils.logger import get_logger  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic for the FastAPI app."""
    import config
    from api.auth.jwt_handler import JWTHandler
    from api.auth.user_db import UserDB
    from api.auth.dependencies import init_auth

    logger = get_logger()
    logger.info(f"Initializing {config.SERVICE_NAME} on port {config.API_PORT}", component="API")

    if config.API_JWT_SECRET:
        jwt_handler = JWTHandler(
            secret=config.API_JWT_SECRET,
            algorithm=config.API_JWT_ALGORITHM,
            access_expiry_minutes=config.API_JWT_EXPIRY_MINUTES,
        )
        user_db = UserDB(db_path=config.API_USER_DB_PATH)

        # Wire up auth dependencies
        init_auth(jwt_handler, user_db)

        # Store on app state for route access
        app.state.jwt_handler = jwt_handler
        app.state.user_db = user_db
        logger.info("Auth system initialized", component="API")
    else:
        logger.warning("API_JWT_SECRET is not set; login is disabled", component="API")

    logger.info(f"Swagger UI: http://localhost:{config.API_PORT}/docs", component="API")

    yield

    logger.info("Shutting down API server", component="API")


def _error_body(message, detail=None) -> dict:
    return {"message": message, "detail": detail if detail is not None else message}


def register_exception_handlers(app: FastAPI):
    """Render every error as ``{"message", "detail"}`` JSON (plus ``category`` for DashboardError)."""

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError):
        logger = get_logger()
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}", component="API")
        else:
            logger.warning(f"{request.method} {request.url.path}: {exc.message}", component="API")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=_error_body("Invalid request", jsonable_encoder(exc.errors())),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        get_logger().error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            component="API",
            exc_info=True,
        )
        return JSONResponse(status_code=500, content=_error_body("Internal server error"))


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    import config

    app = FastAPI(
        title=config.SERVICE_NAME,
        description=(
            "REST API for the Classic Wines dashboard - SMS, screenshot, PDF and "
            "voice order intake, purchase order editing and Zoho Books invoicing.\n\n"
            "**Authentication**: Use `/api/auth/login` to start a session. The token is "
            "set as the `token` cookie and can also be sent as `Authorization: Bearer <token>`."
        ),
        version=config.SERVICE_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    # Register routers
    from api.routes.auth_routes import router as auth_router
    from api.routes.catalog_routes import router as catalog_router
    from api.routes.po_routes import router as po_router
    from api.routes.purchase_order_routes import router as purchase_order_router
    from api.routes.page_routes import router as page_router
    from api.routes.health_routes import router as health_router

    app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(catalog_router, prefix="/api", tags=["Zoho Books"])
    app.include_router(po_router, prefix="/api", tags=["Purchase Orders"])
    app.include_router(purchase_order_router, prefix="/api/purchase-orders", tags=["Draft Purchase Orders"])
    app.include_router(page_router, prefix="/pages", tags=["Pages"])
    app.include_router(health_router, prefix="/health", tags=["Health"])

    # Page guard
    from api.middleware.route_guard import RouteProtectionMiddleware
    app.add_middleware(
        RouteProtectionMiddleware,
        protected_prefixes=config.PROTECTED_ROUTE_PREFIXES,
        login_path=config.LOGIN_PATH,
    )

    # CORS middleware (outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.API_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["Root"])
    async def root():
        """Login landing - service info and where to sign in."""
        return {
            "service": config.SERVICE_NAME,
            "version": config.SERVICE_VERSION,
            "login": "/api/auth/login",
            "dashboard": "/pages/dashboard",
            "docs": "/docs",
            "health": "/health",
        }

    return app
