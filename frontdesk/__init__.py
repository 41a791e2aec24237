"""
Front desk recovery router package.

Deterministic pre-classification of chat messages for sober living / recovery
housing tenants, plus the FastAPI surface that exposes it.

Note: We use lazy imports so that importing the router or models does not
create the FastAPI application.
"""


def create_app(settings=None):
    """Lazy import wrapper for create_app to avoid import-time app creation."""
    from .main import create_app as _create_app
    return _create_app(settings)


def get_app():
    """Get or create the FastAPI application instance."""
    from .main import app
    return app


__all__ = ["create_app", "get_app"]
