# API routes
from src.api.routes import health
from src.api.routes import proxy_settings
from src.api.routes import redirect_settings

__all__ = ["health", "proxy_settings", "redirect_settings"]
