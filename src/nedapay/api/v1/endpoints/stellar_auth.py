# src/nedapay/api/v1/endpoints/stellar_auth.py
"""Challenge-response login for Stellar account holders."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from nedapay.api.v1.dependencies import AuthenticatorDep, UserDirectoryDep
from nedapay.core.security import create_access_token
from nedapay.schemas.auth import (
    ChallengeRequest,
    ChallengeResponse,
    UserOut,
    VerifyRequest,
    VerifyResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stellar-auth", tags=["authentication"])

# Every verification failure maps to this response so callers cannot tell
# which stage rejected them.
AUTH_FAILED_DETAIL = "Authentication failed, please try again"


@router.post(
    "/challenge",
    summary="Issue a challenge for the account behind a phone number",
    response_model=ChallengeResponse,
)
def issue_challenge(
    payload: ChallengeRequest,
    directory: UserDirectoryDep,
    authenticator: AuthenticatorDep,
) -> ChallengeResponse:
    """Return a fresh single-use challenge for the caller to sign."""
    user = directory.get_by_phone(payload.phone_number)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    record = authenticator.issue_challenge(user.stellar_public_key)
    return ChallengeResponse(challenge=record.challenge_text, expires_at=record.expires_at)


@router.post(
    "/verify",
    summary="Verify a signed challenge and open a session",
    response_model=VerifyResponse,
)
def verify_challenge(
    payload: VerifyRequest,
    directory: UserDirectoryDep,
    authenticator: AuthenticatorDep,
) -> VerifyResponse:
    """Authenticate by returning the challenge signed with the account key."""
    user = directory.get_by_phone(payload.phone_number)
    if user is None:
        logger.info("Verification attempted for unknown phone number")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_FAILED_DETAIL,
        )

    outcome = authenticator.verify_challenge(
        user.stellar_public_key,
        payload.challenge,
        payload.signature,
        user.stellar_public_key,
    )
    if not outcome.ok:
        logger.info("Verification failed for user %s: %s", user.id, outcome.value)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_FAILED_DETAIL,
        )

    access_token = create_access_token(user.id, {"account": user.stellar_public_key})
    return VerifyResponse(user=UserOut.model_validate(user), access_token=access_token)
