"""
Profit Flow Backend - FastAPI Application

This is the main entry point for the Profit Flow chat backend. It wires the
chat orchestrator to OpenAI, the market-data gateway and the chat-log store.
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from market_core.data.base import MarketDataGateway
from market_core.data.factory import create_market_gateway
from profit_flow.backend.api import chat, feedback, health
from profit_flow.backend.backend_core.chat_log import ChatLogStore
from profit_flow.backend.backend_core.company import CompanyKnowledgeBase
from profit_flow.backend.backend_core.config import Settings, settings as default_settings
from profit_flow.backend.backend_core.database import Database
from profit_flow.backend.backend_core.llm import OpenAIChatModel
from profit_flow.backend.backend_core.orchestrator import ChatOrchestrator
from profit_flow.backend.backend_core.tools.company_tools import register_company_tools
from profit_flow.backend.backend_core.tools.market_tools import MarketToolConfig, register_market_tools
from profit_flow.backend.backend_core.tools.registry import ToolRegistry

# Configure logging early
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def _seed_company_info(settings: Settings, knowledge_base: CompanyKnowledgeBase) -> None:
    path = settings.COMPANY_INFO_PATH
    if not path:
        return
    if not os.path.exists(path):
        logger.warning(f"COMPANY_INFO_PATH {path} not found; get_company_info will fail until seeded")
        return
    try:
        knowledge_base.seed_from_yaml(path)
    except Exception as e:
        logger.warning("Company info seed skipped/failed during startup: %s", e, exc_info=True)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    gateway: Optional[MarketDataGateway] = None,
    llm=None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Collaborators not passed in are constructed in the lifespan from
    settings; whatever the lifespan constructs it also closes.
    """
    settings = settings or default_settings

    if settings.DEBUG:
        logging.getLogger("profit_flow").setLevel(logging.DEBUG)
        logging.getLogger("market_core").setLevel(logging.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Profit Flow Backend starting up...")
        db = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)
        market = gateway or create_market_gateway(settings.MARKET_DATA_SOURCE, settings.market_data_config())
        model = llm or OpenAIChatModel(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
        )

        if settings.RUN_DB_STARTUP:
            # Best-effort DB init: do not crash app startup if DB is temporarily unavailable.
            try:
                db.create_all()
                logger.info("Database tables created/verified")
            except Exception as e:
                logger.warning("Database init skipped/failed during startup: %s", e, exc_info=True)
        else:
            logger.info("Skipping DB init on startup (set RUN_DB_STARTUP=true to enable)")

        knowledge_base = CompanyKnowledgeBase(db, settings.COMPANY_NAME)
        if settings.RUN_DB_STARTUP:
            _seed_company_info(settings, knowledge_base)

        registry = ToolRegistry()
        register_market_tools(
            registry,
            market,
            MarketToolConfig(
                equity_suffix=settings.EQUITY_EXCHANGE_SUFFIX,
                crypto_quote_currency=settings.CRYPTO_QUOTE_CURRENCY,
                default_limit=settings.TRENDING_DEFAULT_LIMIT,
                lookback_days=settings.HISTORY_LOOKBACK_DAYS,
                news_highlights_limit=settings.NEWS_HIGHLIGHTS_LIMIT,
            ),
        )
        register_company_tools(registry, knowledge_base)
        logger.info(f"Registered {len(registry.get_function_definitions())} tools")

        chat_log = ChatLogStore(db)
        app.state.settings = settings
        app.state.database = db
        app.state.chat_log = chat_log
        app.state.orchestrator = ChatOrchestrator(
            llm=model,
            tool_registry=registry,
            chat_log=chat_log,
            company_name=settings.COMPANY_NAME,
            max_conversation_messages=settings.MAX_CONVERSATION_MESSAGES,
            log_direct_answers=settings.LOG_DIRECT_ANSWERS,
        )
        logger.info(f"CORS origins: {settings.CORS_ORIGINS}")

        try:
            yield
        finally:
            logger.info("Profit Flow Backend shutting down...")
            if llm is None:
                await model.aclose()
            if gateway is None:
                await market.aclose()
            if database is None:
                db.dispose()

    app = FastAPI(
        title="Profit Flow - Financial Chat API",
        description="LLM function dispatch over Indian equity and crypto market data",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        logger.info("REQUEST %s %s", request.method, request.url.path)
        if settings.DEBUG:
            logger.debug(f"   Query params: {dict(request.query_params)}")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Error processing request: {e}", exc_info=True)
            raise

        process_time = time.time() - start_time
        logger.info("RESPONSE %s %s - %s (%.3fs)", request.method, request.url.path, response.status_code, process_time)
        return response

    # Include routers
    app.include_router(health.router, prefix="/api/health", tags=["health"])
    app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
    app.include_router(feedback.router, prefix="/api/feedback", tags=["feedback"])

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        content = {"error": "Internal server error"}
        if not settings.is_production:
            content["details"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "profit_flow.backend.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
    )
