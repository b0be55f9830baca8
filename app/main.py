import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.api import api_router
from app.core.config import Settings, settings as default_settings
from app.core.errors import AppError
from app.database import InMemoryStore
from app.services.auth_service import AuthService
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)

def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = _describe_validation_errors(exc)
        logger.info(f"Validation error on {request.method} {request.url.path}: {message}")
        return JSONResponse(
            status_code=400,
            content={"error": f"Invalid request: {message}"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[InMemoryStore] = None,
) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(title=settings.PROJECT_NAME)

    # One store per application instance, handed to routes through Depends(get_db)
    app.state.store = store if store is not None else InMemoryStore()
    app.state.token_service = TokenService.from_settings(settings)
    app.state.auth_service = AuthService(
        app.state.store,
        app.state.token_service,
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
        revoke_on_logout=settings.REVOKE_TOKENS_ON_LOGOUT,
    )

    register_exception_handlers(app)

    # Set all CORS enabled origins
    if settings.CORS_ORIGIN_URLS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGIN_URLS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.get("/")
    def root():
        return {"message": f"Welcome to {settings.PROJECT_NAME}"}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
