import traceback

import httpx


def _capture_stack() -> str:
    try:
        return "".join(traceback.format_stack()[:-2])
    except Exception:
        return ""


class FeedStreamError(Exception):
    """Base exception for feedstream client errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status: int = 500,
        details: dict | None = None,
    ):
        self.code = code
        self.message = message
        self.status = status
        self.details = details or {}
        self.stack = _capture_stack()
        super().__init__(message)

    def to_dict(self) -> dict:
        result = {
            "error": {
                "code": self.code,
                "message": self.message,
                "status": self.status,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class ValidationError(FeedStreamError):
    def __init__(self, message: str = "Invalid input.", details: dict | None = None):
        super().__init__(code="validation_error", message=message, status=400, details=details)


class ConfigurationError(FeedStreamError):
    def __init__(self, message: str = "Client is not configured.", details: dict | None = None):
        super().__init__(code="configuration_error", message=message, status=400, details=details)


class AuthorizationError(FeedStreamError):
    def __init__(self, message: str = "Operation requires the API secret.", details: dict | None = None):
        super().__init__(code="insufficient_credentials", message=message, status=403, details=details)


class RemoteAPIError(FeedStreamError):
    """The feed API answered with a failure, or could not be reached."""

    def __init__(
        self,
        message: str = "Feed API request failed.",
        error: dict | None = None,
        response: httpx.Response | None = None,
        code: str = "remote_api_error",
    ):
        status = response.status_code if response is not None else 503
        super().__init__(code=code, message=message, status=status, details=error)
        self.error = error
        self.response = response
