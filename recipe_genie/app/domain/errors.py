from __future__ import annotations


class RecipeGenieError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputValidationError(RecipeGenieError):
    status_code = 400

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class ResponseParseError(RecipeGenieError):
    def __init__(self, raw_text: str, message: str = "Failed to parse recipe data from AI"):
        super().__init__(message)
        self.raw_text = raw_text


class UpstreamError(RecipeGenieError):
    pass


class StorageValidationError(RecipeGenieError):
    status_code = 400

    def __init__(self, errors: list[str], message: str = "Recipe validation failed"):
        super().__init__(message)
        self.errors = errors


class StorageError(RecipeGenieError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Storage error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class AuthError(RecipeGenieError):
    status_code = 401

    def __init__(self, message: str = "Not authorized to access this route"):
        super().__init__(message)


class NotFoundError(RecipeGenieError):
    status_code = 404

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.identifier = identifier
