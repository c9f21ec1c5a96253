from pydantic import BaseModel, ConfigDict, Field

from credit_ledger.entrypoints.http.dtos.credit_account import (
    RATE_PATTERN,
    CreditAccountResponseDTO,
)


class LateFeeRuleCreateDTO(BaseModel):
    """Late fee tier covering ``[min_days_overdue, max_days_overdue)``."""

    min_days_overdue: int = Field(examples=[1], ge=0)
    max_days_overdue: int | None = Field(
        default=None, description="Exclusive upper bound; omit for an open-ended tier", examples=[30]
    )
    fee_type: str = Field(description="PERCENTAGE or FIXED", examples=["PERCENTAGE"])
    value: str = Field(
        description="Percentage of the balance, or a fixed amount",
        examples=["5"],
        pattern=RATE_PATTERN,
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "min_days_overdue": 1,
                "max_days_overdue": 30,
                "fee_type": "PERCENTAGE",
                "value": "5",
            }
        }
    )


class LateFeeRuleResponseDTO(BaseModel):
    id: int
    establishment_id: int
    min_days_overdue: int
    max_days_overdue: int | None
    fee_type: str
    value: str


class OverdueAccountResponseDTO(BaseModel):
    account: CreditAccountResponseDTO
    overdue_amount: str
    days_overdue: int
