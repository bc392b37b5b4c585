"""
HTTP Client Module

requests-based HTTP client used by ledger adapters.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
