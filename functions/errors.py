# functions/errors.py

from typing import Optional

class FunctionError(Exception):
    """Base error for server functions. Rendered as {"error": message}."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

class UnauthorizedError(FunctionError):
    status_code = 401

class ForbiddenError(FunctionError):
    status_code = 403

class InvalidPayloadError(FunctionError):
    status_code = 400

class NotFoundError(FunctionError):
    status_code = 404

class PersistenceError(FunctionError):
    status_code = 500

class ProviderError(FunctionError):
    """Upstream AI provider refused to start a completion stream."""
    status_code = 500
