"""REST API error response models.

Structured error responses that provide consistent format for all HTTP errors.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Individual error detail for field-level errors.

    Used in validation errors to indicate which field failed and why.
    """

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "amount",
                "message": "Must be greater than zero",
                "code": "INVALID_AMOUNT",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error response format.

    Supports:
    - Simple errors (just detail and code)
    - Multi-field validation errors (detail + errors array)
    - Business rule conflicts with context (account id, balances)
    - Error codes for i18n (code field can be used for translation keys)

    Examples:
        Simple error:
            {
                "detail": "CreditAccount with identifier '42' not found",
                "code": "NOT_FOUND"
            }

        Conflict with context:
            {
                "detail": "Purchase amount exceeds credit limit",
                "code": "CREDIT_LIMIT_EXCEEDED",
                "context": {"account_id": 42, "credit_limit": "1000.00"}
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None
    context: dict[str, Any] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "CreditAccount with identifier '42' not found", "code": "NOT_FOUND"},
                {
                    "detail": "Purchase amount exceeds credit limit",
                    "code": "CREDIT_LIMIT_EXCEEDED",
                    "context": {
                        "account_id": 42,
                        "current_balance": "900.00",
                        "credit_limit": "1000.00",
                        "amount": "250.00",
                    },
                },
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "amount",
                            "message": "Must be greater than zero",
                            "code": "INVALID_AMOUNT",
                        }
                    ],
                },
            ]
        }
    )


# Reusable ``responses=`` entries for route declarations
NOT_FOUND_RESPONSE: dict[int | str, dict[str, Any]] = {
    404: {"model": ErrorResponse, "description": "Credit account or transaction not found"},
}
VALIDATION_RESPONSE: dict[int | str, dict[str, Any]] = {
    422: {"model": ErrorResponse, "description": "Validation error"},
}
CONFLICT_RESPONSE: dict[int | str, dict[str, Any]] = {
    409: {"model": ErrorResponse, "description": "Business rule rejected the operation"},
}
