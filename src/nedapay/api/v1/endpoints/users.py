"""Wallet holder enrolment and profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from nedapay.api.v1.dependencies import CurrentUserDep, UserDirectoryDep
from nedapay.schemas.auth import UserOut
from nedapay.schemas.user import RegisterRequest
from nedapay.services.user_directory import UserAlreadyExistsError

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "/register",
    summary="Enrol a phone number with an existing Stellar account",
    status_code=status.HTTP_201_CREATED,
    response_model=UserOut,
)
def register_user(payload: RegisterRequest, directory: UserDirectoryDep) -> UserOut:
    try:
        user = directory.register(
            payload.phone_number,
            payload.stellar_public_key,
            payload.display_name,
        )
    except UserAlreadyExistsError as err:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err)) from err
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    return UserOut.model_validate(user)


@router.get("/me", summary="Return the authenticated wallet holder", response_model=UserOut)
def read_current_user(current_user: CurrentUserDep) -> UserOut:
    return UserOut.model_validate(current_user)
