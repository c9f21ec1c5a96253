"""Tests for REST error response models."""

from credit_ledger.entrypoints.http.error_responses import (
    CONFLICT_RESPONSE,
    NOT_FOUND_RESPONSE,
    VALIDATION_RESPONSE,
    ErrorDetail,
    ErrorResponse,
)


class TestErrorDetail:
    """Tests for ErrorDetail model."""

    def test_creates_error_detail_with_all_fields(self) -> None:
        detail = ErrorDetail(
            field="amount",
            message="Must be greater than zero",
            code="INVALID_AMOUNT",
        )

        assert detail.model_dump() == {
            "field": "amount",
            "message": "Must be greater than zero",
            "code": "INVALID_AMOUNT",
        }

    def test_code_is_optional(self) -> None:
        """ErrorDetail can be created without code (optional)."""
        detail = ErrorDetail(field="monthly_due_day", message="Must be between 1 and 31")

        assert detail.code is None

    def test_serializes_to_json(self) -> None:
        detail = ErrorDetail(field="start", message="Must be before end", code="INVALID_RANGE")

        json_str = detail.model_dump_json()

        assert '"field":"start"' in json_str
        assert '"code":"INVALID_RANGE"' in json_str


class TestErrorResponse:
    """Tests for ErrorResponse model."""

    def test_creates_simple_error_response(self) -> None:
        response = ErrorResponse(detail="CreditAccount with identifier '42' not found", code="NOT_FOUND")

        assert response.code == "NOT_FOUND"
        assert response.errors is None
        assert response.context is None

    def test_carries_business_context(self) -> None:
        """Conflicts expose the values that made the operation fail."""
        response = ErrorResponse(
            detail="Payment exceeds outstanding balance",
            code="PAYMENT_EXCEEDS_BALANCE",
            context={"account_id": 42, "current_balance": "80.00", "amount": "100.00"},
        )

        result = response.model_dump()

        assert result["context"] == {
            "account_id": 42,
            "current_balance": "80.00",
            "amount": "100.00",
        }
        assert result["errors"] is None

    def test_serializes_validation_error_to_dict(self) -> None:
        errors = [ErrorDetail(field="amount", message="Must be positive", code="INVALID_AMOUNT")]

        response = ErrorResponse(detail="Validation failed", code="VALIDATION_ERROR", errors=errors)
        result = response.model_dump()

        assert result["errors"] == [
            {"field": "amount", "message": "Must be positive", "code": "INVALID_AMOUNT"}
        ]

    def test_parses_validation_error_from_dict(self) -> None:
        data = {
            "detail": "Validation failed",
            "code": "VALIDATION_ERROR",
            "errors": [{"field": "value", "message": "Must be positive", "code": "INVALID_VALUE"}],
        }

        response = ErrorResponse.model_validate(data)

        assert response.errors is not None
        assert response.errors[0].field == "value"


class TestErrorResponseExamples:
    """Documented examples must validate against the models they describe."""

    def test_every_error_response_example_is_valid(self) -> None:
        examples = ErrorResponse.model_json_schema()["examples"]

        assert len(examples) >= 3
        for example in examples:
            ErrorResponse.model_validate(example)

    def test_context_example_present(self) -> None:
        examples = ErrorResponse.model_json_schema()["examples"]

        assert any("context" in e for e in examples)

    def test_error_detail_example_is_valid(self) -> None:
        example = ErrorDetail.model_json_schema()["example"]

        detail = ErrorDetail.model_validate(example)

        assert detail.code is not None


class TestRouteResponseEntries:
    def test_entries_reference_error_response(self) -> None:
        for entry, status in (
            (NOT_FOUND_RESPONSE, 404),
            (VALIDATION_RESPONSE, 422),
            (CONFLICT_RESPONSE, 409),
        ):
            assert entry[status]["model"] is ErrorResponse
