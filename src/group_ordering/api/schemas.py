"""Pydantic models for session request payloads."""

import re
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from group_ordering.services.codes import is_valid_otp

_NON_DIGITS = re.compile(r"[^0-9]")


class CreateSessionRequest(BaseModel):
    """Body of a session creation request."""

    model_config = ConfigDict(populate_by_name=True)

    table_id: UUID = Field(alias="tableId")
    restaurant_id: UUID = Field(alias="restaurantId")


class JoinSessionRequest(BaseModel):
    """Body of a session join request."""

    model_config = ConfigDict(populate_by_name=True)

    otp: str
    table_id: UUID = Field(alias="tableId")
    customer_name: str = Field(alias="customerName", min_length=1, max_length=100)
    customer_phone: str = Field(alias="customerPhone", min_length=10, max_length=15)

    @field_validator("otp")
    @classmethod
    def _otp_is_exact(cls, value: str) -> str:
        if not is_valid_otp(value):
            raise ValueError("OTP must be exactly 6 digits")
        return value

    @field_validator("customer_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Customer name is required")
        return cleaned

    @field_validator("customer_phone")
    @classmethod
    def _digits_only(cls, value: str) -> str:
        digits = _NON_DIGITS.sub("", value)
        if not digits:
            raise ValueError("Phone number must contain digits")
        return digits
