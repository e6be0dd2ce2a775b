"""
API Server Implementation

A small REST API in front of the command router, used for local operation
and management. It is a caller of the router, not a messaging transport.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from commandbot import __version__
from commandbot.config import AppConfig
from commandbot.core.router import CommandRouter

from .routers import commands

logger = logging.getLogger(__name__)


class CommandBotAPIServer:
    """FastAPI application wrapping a single command router."""

    def __init__(self, command_router: CommandRouter, settings: Optional[AppConfig] = None):
        self.command_router = command_router
        self.settings = settings or command_router.context.config
        self._start_time = datetime.now()

        self.app = FastAPI(
            title="Command Bot API",
            description="REST API for running bot commands and inspecting the command table",
            version=__version__,
        )
        self.app.state.command_router = command_router

        self._setup_routes()
        self._setup_error_handlers()

    def _setup_routes(self):
        """Setup API routes."""
        self.app.include_router(commands.router)

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            return {
                "status": "healthy",
                "timestamp": datetime.now().isoformat(),
                "uptime_seconds": (datetime.now() - self._start_time).total_seconds(),
                "version": __version__,
                "service": "commandbot_api",
                "pending_reminders": len(self.command_router.context.reminders.scheduler),
            }

    def _setup_error_handlers(self):
        """Setup custom error handlers."""

        @self.app.exception_handler(HTTPException)
        async def http_exception_handler(request: Request, exc: HTTPException):
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": exc.detail,
                    "status_code": exc.status_code,
                    "timestamp": datetime.now().isoformat(),
                },
            )

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            logger.error(f"Unhandled exception: {exc}", exc_info=True)

            detail = "Internal server error"
            if self.settings.log_level == "DEBUG":
                detail = str(exc)

            return JSONResponse(
                status_code=500,
                content={
                    "error": detail,
                    "status_code": 500,
                    "timestamp": datetime.now().isoformat(),
                },
            )


def create_api_server(command_router: CommandRouter, settings: Optional[AppConfig] = None) -> FastAPI:
    """Factory function to create the API server."""
    server = CommandBotAPIServer(command_router, settings)
    return server.app
