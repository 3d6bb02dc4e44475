"""
Infrastructure layer: logging, errors and transport resilience.
"""

from .logger import logger
from .error_handler import (
    GrabError,
    InvalidUrlError,
    RemoteError,
    AuthenticationError,
    RateLimitError,
    ContentNotFoundError,
    MaterializeError,
    handle_api_error,
)
from .retry_manager import RetryConfig, RetryManager
from .rate_limiter import RateLimitInfo, RateLimiter

__all__ = [
    "logger",
    "GrabError",
    "InvalidUrlError",
    "RemoteError",
    "AuthenticationError",
    "RateLimitError",
    "ContentNotFoundError",
    "MaterializeError",
    "handle_api_error",
    "RetryConfig",
    "RetryManager",
    "RateLimitInfo",
    "RateLimiter",
]
