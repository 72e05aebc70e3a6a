"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from datetime import datetime, timezone
import os

from profit_flow.backend.api.deps import get_database, get_settings
from profit_flow.backend.backend_core.config import Settings
from profit_flow.backend.backend_core.database import Database

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
@router.get("/")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": _now(),
        "version": os.getenv("APP_VERSION") or "0.1.0",
    }


@router.get("/ready")
async def readiness_check(
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_settings),
):
    """Readiness check - verifies dependencies."""
    checks = {
        "database": "ok" if database.ping() else "unavailable",
        "openai": "ok" if settings.OPENAI_API_KEY else "missing",
    }

    all_ready = all(status == "ok" for status in checks.values())

    return {
        "status": "ready" if all_ready else "not_ready",
        "checks": checks,
        "timestamp": _now(),
    }


@router.get("/config")
async def get_config(settings: Settings = Depends(get_settings)):
    """Get application configuration (non-sensitive)."""
    return {
        "environment": settings.ENVIRONMENT,
        "llm_model": settings.OPENAI_MODEL,
        "company_name": settings.COMPANY_NAME,
        "market_data_source": settings.MARKET_DATA_SOURCE,
        "equity_exchange_suffix": settings.EQUITY_EXCHANGE_SUFFIX,
        "crypto_quote_currency": settings.CRYPTO_QUOTE_CURRENCY,
        "trending_default_limit": settings.TRENDING_DEFAULT_LIMIT,
        "max_conversation_messages": settings.MAX_CONVERSATION_MESSAGES,
        "log_direct_answers": settings.LOG_DIRECT_ANSWERS,
    }
