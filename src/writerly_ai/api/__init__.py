"""
FastAPI API routes and endpoints.

- routes.py: POST /api/ai/generate, POST /api/rewrite, POST /api/grammar/check,
  GET /api/metrics, GET /health
- dependencies.py: Access to app-scoped services and the caller's identity
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
- middleware.py: Request ID / user tracing
"""

from writerly_ai.api import dependencies, error_handlers, models
from writerly_ai.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
