"""FastAPI application factory for the local event server."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from paramedic.event_server.routes import router


def setup_cors(app: FastAPI) -> None:
    """Allow posts from the app webview, which has a ``file://`` or ``null`` origin."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(server: Any) -> FastAPI:
    """Create the ASGI app that forwards harness posts to ``server``."""
    app = FastAPI(title="paramedic event server")
    app.state.server = server
    setup_cors(app)
    app.include_router(router)
    return app
