from decimal import Decimal
from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.notification_service import create_notification_service
from src.app.services.notification_service import NotificationService
from src.domain.credit_products import MONTHLY_TIER_CREDITS
from src.domain.subscription_tier import SubscriptionTier

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_config(request: Request):
    return getattr(request.app.state, "config", ApplicationConfig)


def get_notification_service(request: Request) -> NotificationService:
    config = get_config(request)
    return create_notification_service(
        config.LEDGER_ALERT_WEBHOOK, timeout=float(config.REQUEST_ALERT_TIMEOUT_SECONDS)
    )


def tier_credits_from_config(config) -> dict:
    return {
        **MONTHLY_TIER_CREDITS,
        SubscriptionTier.PRO: int(config.PRO_MONTHLY_CREDITS),
        SubscriptionTier.POWER: int(config.POWER_MONTHLY_CREDITS),
    }


def minimum_payout_from_config(config) -> Decimal:
    return Decimal(str(config.MINIMUM_CREATOR_PAYOUT))
