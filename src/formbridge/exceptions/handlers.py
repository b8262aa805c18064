from __future__ import annotations

from typing import Any, Dict, Optional


class FormBridgeException(Exception):
    """
    Base exception.

    Carries everything the web layer needs to build an error response:
    - attributes: message/code/status_code/details/user_message
    - method: to_dict()
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "FORMBRIDGE_ERROR",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details: Dict[str, Any] = details or {}
        self.user_message = user_message or message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class ValidationError(FormBridgeException):
    def __init__(self, message: str, field: Optional[str] = None, **kwargs: Any):
        details: Dict[str, Any] = {"field": field} if field else {}
        details.update(kwargs)
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=422,
            details=details,
            user_message=f"Validation failed: {message}",
        )


class ConfigurationError(FormBridgeException):
    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs: Any):
        details: Dict[str, Any] = {"config_key": config_key} if config_key else {}
        details.update(kwargs)
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            status_code=500,
            details=details,
            user_message="System configuration error",
        )


class RecordNotFoundError(FormBridgeException):
    def __init__(self, model: str, record_id: Any):
        message = f"Record not found: {model}/{record_id}"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details={"model": model, "record_id": record_id},
            user_message=message,
        )
