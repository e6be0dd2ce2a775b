"""
Dependency injection for the API server.
"""

from fastapi import HTTPException, Request

from commandbot.core.router import CommandRouter


def get_router(request: Request) -> CommandRouter:
    """Get the command router attached to the running app."""
    router = getattr(request.app.state, "command_router", None)
    if router is None:
        raise HTTPException(status_code=503, detail="Command router not available")
    return router
