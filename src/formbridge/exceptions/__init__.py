from formbridge.exceptions.handlers import (
    ConfigurationError,
    FormBridgeException,
    RecordNotFoundError,
    ValidationError,
)

__all__ = [
    "FormBridgeException",
    "ValidationError",
    "ConfigurationError",
    "RecordNotFoundError",
]
