"""Typed service-layer errors"""

from typing import Any, Dict, List, Optional

import pydantic


class ServiceError(Exception):
    """Base class for errors raised by the service layer"""

    code = "SERVICE_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "statusCode": self.status_code,
        }


class ValidationError(ServiceError):
    """Malformed or out-of-range input, raised before any storage access"""

    code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(self, message: str = "Validation failed", errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors = errors or {}

    @classmethod
    def from_pydantic(cls, exc: pydantic.ValidationError) -> "ValidationError":
        errors: Dict[str, List[str]] = {}
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "__root__"
            errors.setdefault(field, []).append(err["msg"])
        return cls("Validation failed", errors)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class NotFoundError(ServiceError):
    """Referenced entity or key is absent"""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, key: Any):
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class ConflictError(ServiceError):
    """Uniqueness or state precondition violated"""

    code = "CONFLICT"
    status_code = 409

    def __init__(self, entity: str, key: Any, message: Optional[str] = None):
        super().__init__(message or f"{entity} already exists: {key}")
        self.entity = entity
        self.key = key


class TransactionFailure(ServiceError):
    """A multi-step atomic operation failed and was rolled back"""

    code = "TRANSACTION_FAILED"
    status_code = 500


def parse_input(schema, data):
    """Validate a mapping against a pydantic schema, raising ValidationError"""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data or {})
    except pydantic.ValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def page_bounds(limit: Optional[int], offset: int, default: int, maximum: int):
    """Resolve a limit/offset pair, capping limit at maximum"""
    errors: Dict[str, List[str]] = {}
    if limit is not None and limit < 1:
        errors["limit"] = ["must be >= 1"]
    if offset is None or offset < 0:
        errors["offset"] = ["must be >= 0"]
    if errors:
        raise ValidationError("Invalid page bounds", errors)
    return min(limit or default, maximum), offset
