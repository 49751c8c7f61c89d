"""
Structured error system for Country Info.

Every failure the CLI can hit is one of these types. None of them are
retried: the CLI reports the message on stderr and exits non-zero.
"""

from typing import Any, Dict, List, Optional
import logging

import httpx

logger = logging.getLogger(__name__)


class CountryInfoError(Exception):
    """Base exception for all Country Info errors."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "message": self.message,
            "status": self.status,
            "code": self.code,
            "details": self.details,
            "type": self.__class__.__name__
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.status:
            parts.append(f"(Status: {self.status})")
        if self.code:
            parts.append(f"(Code: {self.code})")
        return " ".join(parts)


class ConfigurationError(CountryInfoError):
    """Error for invalid flag combinations or settings."""

    def __init__(
        self,
        message: str = "Configuration error",
        config_field: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, code="CONFIGURATION_ERROR", **kwargs)
        if config_field:
            self.details["config_field"] = config_field


class MissingCredentialError(ConfigurationError):
    """Error when a required API key environment variable is not set."""

    def __init__(self, env_var: str, **kwargs):
        super().__init__(
            f"{env_var} environment variable is not set",
            config_field=env_var,
            **kwargs
        )
        self.code = "MISSING_CREDENTIAL"
        self.env_var = env_var


class ApiError(CountryInfoError):
    """Error returned by the provider's API."""

    def __init__(
        self,
        message: str = "API error",
        provider: Optional[str] = None,
        **kwargs
    ):
        kwargs.setdefault("code", "API_ERROR")
        super().__init__(message, **kwargs)
        if provider:
            self.details["provider"] = provider


class AuthenticationError(ApiError):
    """Error related to authentication issues."""

    def __init__(self, message: str = "Authentication failed", **kwargs):
        kwargs.setdefault("status", 401)
        super().__init__(message, code="AUTHENTICATION_ERROR", **kwargs)


class ModelUnavailableError(ApiError):
    """Error when the requested model is unavailable."""

    def __init__(
        self,
        message: str = "Model unavailable",
        model: Optional[str] = None,
        **kwargs
    ):
        kwargs.setdefault("status", 404)
        super().__init__(message, code="MODEL_UNAVAILABLE", **kwargs)
        if model:
            self.details["model"] = model


class RateLimitError(ApiError):
    """Error when the provider rejects the request for rate or quota reasons."""

    def __init__(self, message: str = "Rate limit exceeded", **kwargs):
        kwargs.setdefault("status", 429)
        super().__init__(message, code="RATE_LIMITED", **kwargs)


class ServerError(ApiError):
    """Error for server-side issues."""

    def __init__(self, message: str = "Server error", **kwargs):
        kwargs.setdefault("status", 500)
        super().__init__(message, code="SERVER_ERROR", **kwargs)


class NetworkError(CountryInfoError):
    """Error for network-related issues."""

    def __init__(self, message: str = "Network error", **kwargs):
        super().__init__(message, code="NETWORK_ERROR", **kwargs)


class RequestTimeoutError(NetworkError):
    """Error for request timeouts."""

    def __init__(
        self,
        message: str = "Request timeout",
        timeout_seconds: Optional[float] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.code = "TIMEOUT_ERROR"
        if timeout_seconds:
            self.details["timeout_seconds"] = timeout_seconds


class ResponseDecodeError(CountryInfoError):
    """Error when a model reply does not match the response schema."""

    def __init__(
        self,
        message: str = "Response does not match schema",
        raw_text: str = "",
        errors: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, code="DECODE_ERROR", **kwargs)
        self.raw_text = raw_text
        self.errors = list(errors or [])
        if self.errors:
            self.details["errors"] = self.errors


def error_from_status(
    status: int,
    message: str,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> ApiError:
    """Map an HTTP status code from a provider to an error type."""
    if status in (401, 403):
        return AuthenticationError(message, status=status, provider=provider)
    if status == 404:
        return ModelUnavailableError(message, model=model, provider=provider)
    if status == 429:
        return RateLimitError(message, provider=provider)
    if 500 <= status < 600:
        return ServerError(message, status=status, provider=provider)
    return ApiError(message, status=status, provider=provider)


def classify_error(error: Exception) -> CountryInfoError:
    """
    Classify a generic exception into a structured CountryInfoError.

    Args:
        error: The original exception

    Returns:
        Classified CountryInfoError instance
    """
    if isinstance(error, CountryInfoError):
        return error

    error_message = str(error) or error.__class__.__name__

    if isinstance(error, httpx.TimeoutException):
        return RequestTimeoutError(f"Request timed out: {error_message}", original_error=error)
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        classified = error_from_status(status, f"HTTP {status}: {error.response.text}")
        classified.original_error = error
        return classified
    if isinstance(error, httpx.TransportError):
        return NetworkError(f"Network error: {error_message}", original_error=error)

    status = getattr(error, "status", None) or getattr(error, "status_code", None)
    if isinstance(status, int):
        classified = error_from_status(status, error_message)
        classified.original_error = error
        return classified

    return CountryInfoError(error_message, original_error=error)
