"""
Middleware package for application
"""

from finetune_studio.app.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
