"""Pydantic schemas for the Stellar challenge-response handshake."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    """Accepts and emits the camelCase keys used by the wallet clients."""

    model_config = ConfigDict(populate_by_name=True)


class ChallengeRequest(_CamelModel):
    """Request to obtain a challenge for the account behind a phone number."""

    phone_number: str = Field(..., min_length=1, alias="phoneNumber")


class ChallengeResponse(_CamelModel):
    """Challenge the client must sign with its Stellar secret key."""

    success: bool = True
    challenge: str = Field(..., description="Exact text to sign")
    expires_at: datetime = Field(..., alias="expiresAt")


class VerifyRequest(_CamelModel):
    """Signed challenge submitted by the client."""

    phone_number: str = Field(..., min_length=1, alias="phoneNumber")
    challenge: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1, description="Base64 Ed25519 signature")


class UserOut(_CamelModel):
    """Public view of a wallet holder."""

    id: int
    phone_number: str = Field(..., alias="phoneNumber")
    stellar_public_key: str = Field(..., alias="stellarPublicKey")
    display_name: str | None = Field(None, alias="displayName")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class VerifyResponse(_CamelModel):
    """Successful authentication result with a session token."""

    success: bool = True
    message: str = "Authentication successful"
    user: UserOut
    access_token: str = Field(..., alias="accessToken")
    token_type: str = Field("bearer", alias="tokenType")
