from pydantic import BaseModel, ConfigDict, Field

AMOUNT_PATTERN = r"^\d+(\.\d{1,2})?$"
RATE_PATTERN = r"^\d+(\.\d{1,4})?$"


class CreditAccountCreateDTO(BaseModel):
    """Request payload for opening a credit account."""

    client_id: int = Field(description="Client owning the account", examples=[1001], ge=1)
    establishment_id: int = Field(
        description="Establishment granting the credit", examples=[7], ge=1
    )
    credit_limit: str = Field(
        description="Credit limit as decimal string",
        examples=["1500.00"],
        pattern=AMOUNT_PATTERN,
    )
    monthly_due_day: int = Field(
        description="Day of month payments are due (clamped to short months)",
        examples=[15],
        ge=1,
        le=31,
    )
    annual_interest_rate: str = Field(
        description="Annual interest rate as a percentage (e.g., '12' = 12%)",
        examples=["24.5"],
        pattern=RATE_PATTERN,
    )
    interest_type: str = Field(description="NOMINAL or EFFECTIVE", examples=["NOMINAL"])
    credit_type: str = Field(description="SHORT_TERM or LONG_TERM", examples=["LONG_TERM"])
    grace_period_months: int = Field(
        default=0,
        description="Months before the first installment falls due (LONG_TERM)",
        examples=[0],
        ge=0,
    )
    late_fee_percentage: str | None = Field(
        default=None,
        description="Flat late fee percentage used when the establishment has no fee tiers",
        examples=["5"],
        pattern=RATE_PATTERN,
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "client_id": 1001,
                "establishment_id": 7,
                "credit_limit": "1500.00",
                "monthly_due_day": 15,
                "annual_interest_rate": "24.5",
                "interest_type": "NOMINAL",
                "credit_type": "LONG_TERM",
                "grace_period_months": 0,
                "late_fee_percentage": "5",
            }
        }
    )


class CreditAccountUpdateDTO(BaseModel):
    """Partial update; omitted fields keep their current value."""

    credit_limit: str | None = Field(default=None, pattern=AMOUNT_PATTERN)
    monthly_due_day: int | None = Field(default=None, ge=1, le=31)
    annual_interest_rate: str | None = Field(default=None, pattern=RATE_PATTERN)
    interest_type: str | None = None
    grace_period_months: int | None = Field(default=None, ge=0)
    late_fee_percentage: str | None = Field(default=None, pattern=RATE_PATTERN)
    is_blocked: bool | None = Field(default=None, description="Block or unblock by hand")


class CreditAccountResponseDTO(BaseModel):
    id: int
    client_id: int
    establishment_id: int
    credit_limit: str
    current_balance: str
    available_credit: str
    monthly_due_day: int
    annual_interest_rate: str
    interest_type: str
    credit_type: str
    grace_period_months: int
    late_fee_percentage: str | None
    is_blocked: bool
    last_interest_accrual_at: str
