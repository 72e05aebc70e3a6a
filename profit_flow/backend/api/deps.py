"""
FastAPI dependency providers.

Everything the routes need is built once in the app lifespan and kept on
``app.state``; these helpers hand it to the routes (and are the override
points in tests).
"""

from fastapi import Request

from profit_flow.backend.backend_core.chat_log import ChatLogStore
from profit_flow.backend.backend_core.config import Settings
from profit_flow.backend.backend_core.database import Database
from profit_flow.backend.backend_core.orchestrator import ChatOrchestrator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_chat_log(request: Request) -> ChatLogStore:
    return request.app.state.chat_log


def get_orchestrator(request: Request) -> ChatOrchestrator:
    return request.app.state.orchestrator
