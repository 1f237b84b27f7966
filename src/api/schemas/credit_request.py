"""Request schemas for the Credits API

Pydantic models for validating incoming HTTP requests.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.credit_transaction import TransactionType

FEATURE_CHARGE_TYPES = {
    TransactionType.AI_RECIPE,
    TransactionType.AI_MEAL_PLAN,
    TransactionType.AI_RECEIPT_SCAN,
    TransactionType.CHAT_SESSION,
    TransactionType.URL_IMPORT,
    TransactionType.RECIPE_USE,
}


class ChargeRequestSchema(BaseModel):
    """
    Request schema for charging credits

    Used for POST /credits/{user_id}/charge endpoint.
    """

    amount: int = Field(..., gt=0, description="Credits to charge (must be > 0)")

    transaction_type: TransactionType = Field(..., description="Feature being paid for")

    description: Optional[str] = Field(default=None, max_length=255)

    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Audit metadata")

    idempotency_key: Optional[str] = Field(default=None, min_length=1, max_length=255)

    @field_validator("transaction_type")
    @classmethod
    def validate_feature_type(cls, v):
        """Only feature types are charged over the API"""
        if v not in FEATURE_CHARGE_TYPES:
            raise ValueError(f"{v.value} is not a chargeable feature")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "amount": 1,
                "transaction_type": "ai_receipt_scan",
                "description": "Scanned receipt: 12 items extracted",
                "metadata": {"items_extracted": 12},
                "idempotency_key": "receipt_scan:abc123"
            }
        }
