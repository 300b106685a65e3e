import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from config.settings import Settings, settings as default_settings
from core.errors import AuthError, ServiceError
from core.services.image_provider import ImageProvider
from core.services.payment_provider import PaymentProvider
from core.services.token_service import TokenService
from infrastructure.auth.jwt_service import JoseTokenService
from infrastructure.db.sqlite import init_db
from infrastructure.images.clipdrop_provider import ClipdropImageProvider
from infrastructure.payments.razorpay_provider import RazorpayPaymentProvider
from infrastructure.payments.stub_provider import StubPaymentProvider
from infrastructure.web.controllers.billing_controller import router as billing_router
from infrastructure.web.controllers.image_controller import router as image_router
from infrastructure.web.controllers.user_controller import router as user_router


logger = logging.getLogger(__name__)

TOKEN_ERRORS = {AuthError.MISSING, AuthError.MALFORMED, AuthError.INVALID}


def build_payment_provider(settings: Settings) -> PaymentProvider:
    if settings.PAYMENT_PROVIDER.lower() == "stub":
        logger.warning("PAYMENT_PROVIDER=stub: orders are kept in memory, no real payments")
        return StubPaymentProvider(auto_capture=settings.PAYMENT_STUB_AUTO_CAPTURE)
    # без ключей шлюз не настроен, use case вернёт ConfigError
    return RazorpayPaymentProvider(
        key_id=settings.RAZORPAY_KEY_ID,
        key_secret=settings.RAZORPAY_KEY_SECRET,
        api_url=settings.RAZORPAY_API_URL,
        timeout=settings.PAYMENT_TIMEOUT_SECONDS,
    )


def build_image_provider(settings: Settings) -> ImageProvider:
    return ClipdropImageProvider(
        api_key=settings.CLIPDROP_API_KEY,
        api_url=settings.CLIPDROP_API_URL,
        timeout=settings.IMAGE_TIMEOUT_SECONDS,
    )


def create_app(
    settings: Optional[Settings] = None,
    payment_provider: Optional[PaymentProvider] = None,
    image_provider: Optional[ImageProvider] = None,
    token_service: Optional[TokenService] = None,
) -> FastAPI:
    settings = settings or default_settings
    init_db(settings.DB_PATH)

    app = FastAPI(title="Image generation credits API")
    app.state.settings = settings
    app.state.payment_provider = payment_provider or build_payment_provider(settings)
    app.state.image_provider = image_provider or build_image_provider(settings)
    app.state.token_service = token_service or JoseTokenService(
        settings.SECRET_KEY, settings.ALGORITHM, settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # бизнес-ошибки - всегда 200 и success=false, ошибки токена - 401
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if isinstance(exc, AuthError) and exc.kind in TOKEN_ERRORS:
            return JSONResponse(status_code=401, content={"success": False, "message": exc.message})
        logger.info("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
        return JSONResponse(status_code=200, content={"success": False, "message": exc.message, **exc.extra})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=200, content={"success": False, "message": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error in %s %s", request.method, request.url.path)
        return JSONResponse(status_code=200, content={"success": False, "message": "Internal server error"})

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "API Working fine"

    app.include_router(user_router)
    app.include_router(billing_router)
    app.include_router(image_router)
    return app
