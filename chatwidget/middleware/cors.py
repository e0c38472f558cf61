"""CORS middleware configuration"""
from fastapi.middleware.cors import CORSMiddleware
from chatwidget.config import get_settings

WIDGET_HOST_METHODS = ["GET", "POST", "DELETE"]


def setup_cors(app):
    """
    Configure CORS for the widget host API

    Widget pages are served from customer sites, so any configured origin
    may call in. Browsers reject credentials with a wildcard origin, so
    credentials are only allowed for an explicit origin list.

    Args:
        app: FastAPI application instance
    """
    origins = get_settings().cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=WIDGET_HOST_METHODS,
        allow_headers=["Content-Type", "User-Agent"],
        max_age=600,
    )
