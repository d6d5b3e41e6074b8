"""
FastAPI host service for running checks.

- routes.py: POST /checks/{http,tcp-echo,local-command}, GET /health
- dependencies.py: Settings injection
- models.py: Service and error response models
- error_handlers.py: Maps failed/rejected checks to HTTP status codes
- middleware.py: Request id tracing
"""

from checkmate.api import dependencies, error_handlers, models
from checkmate.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
