"""
Error types and API error translation for GHGrab.
"""

import functools
from typing import Any, Callable, Optional, TypeVar

import httpx

from .logger import logger


F = TypeVar("F", bound=Callable[..., Any])


####
##      EXCEPTION HIERARCHY
#####
class GrabError(Exception):
    """Base exception for every GHGrab failure."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (Original: {self.original_error})"
        return self.message


class InvalidUrlError(GrabError):
    """The URL is malformed or does not point inside a GitHub repository."""


class RemoteError(GrabError):
    """Listing or fetching content from GitHub failed."""


class AuthenticationError(RemoteError):
    """GitHub rejected the credentials, or access is forbidden."""


class RateLimitError(RemoteError):
    """GitHub API rate limit exceeded."""


class ContentNotFoundError(RemoteError):
    """Repository, ref or path does not exist (or is invisible to us)."""


class MaterializeError(GrabError):
    """Writing a file or creating a directory on the local disk failed."""


####
##      HTTP ERROR TRANSLATION
#####
def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    if response.headers.get("x-ratelimit-remaining") == "0":
        return True
    return "rate limit" in response.text.lower()


def translate_http_error(error: Exception) -> RemoteError:
    """Map an httpx (or unexpected) exception onto the RemoteError family."""

    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        status = response.status_code
        url = str(error.request.url)

        if status in (403, 429) and _is_rate_limited(response):
            return RateLimitError(f"GitHub API rate limit exceeded for {url}", error)
        if status in (401, 403):
            return AuthenticationError(f"Access denied ({status}) for {url}", error)
        if status == 404:
            return ContentNotFoundError(f"Not found: {url}", error)
        return RemoteError(f"GitHub API returned {status} for {url}", error)

    if isinstance(error, httpx.RequestError):
        if "429" in str(error):
            return RateLimitError("GitHub API rate limit exceeded", error)
        return RemoteError(f"Request failed: {error}", error)

    return RemoteError(f"Unexpected error: {error}", error)


def handle_api_error(func: F) -> F:
    """
    Decorator translating transport errors raised by an ``async`` API call
    into ``RemoteError`` subclasses. GHGrab's own errors pass through
    untouched.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except GrabError:
            raise
        except Exception as e:
            translated = translate_http_error(e)
            logger.debug(f"{func.__name__} failed: {translated}")
            raise translated from e

    return wrapper  # type: ignore[return-value]


__all__ = [
    "GrabError",
    "InvalidUrlError",
    "RemoteError",
    "AuthenticationError",
    "RateLimitError",
    "ContentNotFoundError",
    "MaterializeError",
    "translate_http_error",
    "handle_api_error",
]
