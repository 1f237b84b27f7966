import logging
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from src.api.error import ClientError, client_error_handler, validation_error_handler
from src.api.routes import checkout, credits, webhooks

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Pantry Credits Service",
        description="Credit ledger, subscription entitlements, checkout rewards and creator payouts",
        version="1.0.0",
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(credits.router, prefix=config.API_PREFIX)
    app.include_router(webhooks.router, prefix=config.API_PREFIX)
    app.include_router(checkout.router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["System"])
    async def health_check():
        return {"status": "healthy", "service": "pantry-credits"}

    logger.info(f"API routes mounted under {config.API_PREFIX}")
    return app
