"""
API Server package for the command bot management interface.

This package provides a small FastAPI-based REST API for running commands
and inspecting the command table and recorded failures.
"""

from .server import CommandBotAPIServer, create_api_server

__all__ = ["CommandBotAPIServer", "create_api_server"]
