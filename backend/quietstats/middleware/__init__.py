"""
Middleware package.
"""
from quietstats.middleware.error_handler import ErrorHandlerMiddleware
from quietstats.middleware.request_id import RequestIdMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "RequestIdMiddleware",
]
