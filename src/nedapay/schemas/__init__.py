"""Pydantic schemas for request/response validation."""

from .auth import ChallengeRequest, ChallengeResponse, UserOut, VerifyRequest, VerifyResponse
from .user import RegisterRequest

__all__ = [
    "ChallengeRequest",
    "ChallengeResponse",
    "RegisterRequest",
    "UserOut",
    "VerifyRequest",
    "VerifyResponse",
]
