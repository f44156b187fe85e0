"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for enrolling a wallet holder with an existing Stellar account."""

    phone_number: str = Field(..., min_length=1, alias="phoneNumber")
    stellar_public_key: str = Field(
        ...,
        min_length=1,
        alias="stellarPublicKey",
        description="StrKey-encoded Stellar public key (G...)",
    )
    display_name: str | None = Field(None, alias="displayName")

    model_config = ConfigDict(populate_by_name=True)
