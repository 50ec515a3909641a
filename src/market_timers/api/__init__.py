"""HTTP API for the countdown service"""

from .main import create_app
from .dependencies import get_provider, set_provider

__all__ = ["create_app", "get_provider", "set_provider"]
