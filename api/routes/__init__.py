"""API route handlers."""

from api.routes import claims, generate, health, update_root

__all__ = ["health", "generate", "update_root", "claims"]
